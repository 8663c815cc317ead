"""Container encoding stage.

Raw PCM from the synthesizer is wrapped in a WAV header so the playback
engine (and the library) only ever see self-describing audio. Already
encoded payloads pass through untouched.
"""

from __future__ import annotations

from briefcast.application.interfaces import FormatHint, SynthesizedAudio
from briefcast.audio import (
    DEFAULT_BITS_PER_SAMPLE,
    DEFAULT_CHANNELS,
    DEFAULT_SAMPLE_RATE,
    encode_wav,
)

from .types import PlayableAudio

WAV_MEDIA_TYPE = "audio/wav"


def encode_for_playback(audio: SynthesizedAudio) -> PlayableAudio:
    if audio.format_hint is FormatHint.RAW_PCM:
        wav = encode_wav(
            audio.data,
            sample_rate=DEFAULT_SAMPLE_RATE,
            channels=DEFAULT_CHANNELS,
            bits_per_sample=DEFAULT_BITS_PER_SAMPLE,
        )
        return PlayableAudio(data=wav, media_type=WAV_MEDIA_TYPE)
    return PlayableAudio(data=audio.data, media_type=audio.media_type)


__all__ = ["WAV_MEDIA_TYPE", "encode_for_playback"]
