"""Speech synthesis stage."""

from __future__ import annotations

from briefcast.application.interfaces import SpeechSynthesizer, SynthesizedAudio
from briefcast.errors import ProviderError


async def synthesize_script(synthesizer: SpeechSynthesizer, script: str) -> SynthesizedAudio:
    audio = await synthesizer.synthesize(script)
    if not audio.data:
        raise ProviderError("No valid audio data")
    return audio


__all__ = ["synthesize_script"]
