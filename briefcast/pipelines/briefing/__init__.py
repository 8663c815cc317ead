"""Briefing generation pipeline package.

Modules are organised by the order in which ``POST /briefings/generate``
executes:

1. `script` – ask the chat model for a spoken script.
2. `synthesis` – turn the script into audio with the configured TTS provider.
3. `encoding` – wrap raw PCM in a WAV container.
4. `playback` – load the audio into the engine and start playing.
5. `flow` – sequences the stages and tags failures with the stage.

`presets` holds the suggested topics, lengths and tones shown to clients.
"""

from .encoding import WAV_MEDIA_TYPE, encode_for_playback
from .flow import BriefingPipeline, StageDescription
from .playback import load_audio, load_into_engine, start_playback
from .presets import (
    DEFAULT_LENGTH_SECONDS,
    DEFAULT_TONE,
    LENGTH_CHOICES,
    TONES,
    TRENDING_TOPICS,
)
from .script import generate_script
from .synthesis import synthesize_script
from .types import BriefingRequest, GenerationOutcome, PlayableAudio

__all__ = [
    "BriefingPipeline",
    "BriefingRequest",
    "DEFAULT_LENGTH_SECONDS",
    "DEFAULT_TONE",
    "GenerationOutcome",
    "LENGTH_CHOICES",
    "PlayableAudio",
    "StageDescription",
    "TONES",
    "TRENDING_TOPICS",
    "WAV_MEDIA_TYPE",
    "encode_for_playback",
    "generate_script",
    "load_audio",
    "load_into_engine",
    "start_playback",
    "synthesize_script",
]
