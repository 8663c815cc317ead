"""Audio container helpers."""

from .media import MPEG_MEDIA_TYPE, OCTET_STREAM, WAV_MEDIA_TYPE, guess_media_type
from .wav import (
    DEFAULT_BITS_PER_SAMPLE,
    DEFAULT_CHANNELS,
    DEFAULT_SAMPLE_RATE,
    RIFF_OVERHEAD,
    WAV_HEADER_SIZE,
    WavFormat,
    encode_wav,
    parse_wav_header,
    pcm_duration_seconds,
)

__all__ = [
    "DEFAULT_BITS_PER_SAMPLE",
    "DEFAULT_CHANNELS",
    "DEFAULT_SAMPLE_RATE",
    "MPEG_MEDIA_TYPE",
    "OCTET_STREAM",
    "RIFF_OVERHEAD",
    "WAV_HEADER_SIZE",
    "WAV_MEDIA_TYPE",
    "WavFormat",
    "encode_wav",
    "guess_media_type",
    "parse_wav_header",
    "pcm_duration_seconds",
]
