"""Service layer helpers for external integrations."""

from .gemini_tts import GeminiSpeechSynthesizer
from .polly_tts import PollySpeechSynthesizer
from .script_generator import OpenAIScriptGenerator
from .storage import LocalDirectoryStorage, S3ObjectStorage

__all__ = [
    "GeminiSpeechSynthesizer",
    "LocalDirectoryStorage",
    "OpenAIScriptGenerator",
    "PollySpeechSynthesizer",
    "S3ObjectStorage",
]
