"""Contracts for the external collaborators the core depends on."""

from .interfaces import (
    DurableStorage,
    FormatHint,
    ScriptGenerator,
    SpeechSynthesizer,
    SynthesizedAudio,
)

__all__ = [
    "DurableStorage",
    "FormatHint",
    "ScriptGenerator",
    "SpeechSynthesizer",
    "SynthesizedAudio",
]
