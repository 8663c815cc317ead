"""RIFF/WAVE container for raw linear PCM.

The speech provider returns bare 16-bit mono PCM at 24 kHz. Wrapping it in
the canonical 44-byte WAVE header is enough for any standard decoder to play
it and report its duration.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Final

DEFAULT_SAMPLE_RATE: Final[int] = 24_000
DEFAULT_CHANNELS: Final[int] = 1
DEFAULT_BITS_PER_SAMPLE: Final[int] = 16

WAV_HEADER_SIZE: Final[int] = 44
# Bytes counted by the RIFF size field besides the payload itself.
RIFF_OVERHEAD: Final[int] = WAV_HEADER_SIZE - 8
_FMT_CHUNK_SIZE: Final[int] = 16
_FORMAT_PCM: Final[int] = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class WavFormat:
    """Format parameters declared by a canonical PCM WAVE header."""

    sample_rate: int
    channels: int
    bits_per_sample: int
    byte_rate: int
    block_align: int
    data_size: int
    riff_size: int

    @property
    def duration_seconds(self) -> float:
        return self.data_size / self.byte_rate if self.byte_rate else 0.0


def _check_parameters(sample_rate: int, channels: int, bits_per_sample: int) -> None:
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    if channels <= 0:
        raise ValueError(f"channels must be positive, got {channels}")
    if bits_per_sample <= 0 or bits_per_sample % 8:
        raise ValueError(
            f"bits_per_sample must be a positive multiple of 8, got {bits_per_sample}"
        )


def encode_wav(
    pcm: bytes,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = DEFAULT_CHANNELS,
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE,
) -> bytes:
    """Prefix raw PCM samples with a WAVE header and return the container bytes.

    The payload is copied through untouched. The RIFF size field equals the
    payload length plus 36 so readers can validate without scanning samples.
    """

    _check_parameters(sample_rate, channels, bits_per_sample)
    block_align = channels * bits_per_sample // 8
    byte_rate = sample_rate * block_align
    header = _HEADER.pack(
        b"RIFF",
        len(pcm) + RIFF_OVERHEAD,
        b"WAVE",
        b"fmt ",
        _FMT_CHUNK_SIZE,
        _FORMAT_PCM,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        len(pcm),
    )
    return header + bytes(pcm)


def parse_wav_header(data: bytes) -> WavFormat:
    """Read back the parameters of a header produced by :func:`encode_wav`."""

    if len(data) < WAV_HEADER_SIZE:
        raise ValueError("Buffer is shorter than a WAVE header")
    (
        riff,
        riff_size,
        wave_tag,
        fmt_tag,
        fmt_size,
        audio_format,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        data_size,
    ) = _HEADER.unpack_from(data)
    if riff != b"RIFF" or wave_tag != b"WAVE":
        raise ValueError("Missing RIFF/WAVE signature")
    if fmt_tag != b"fmt " or fmt_size != _FMT_CHUNK_SIZE or data_tag != b"data":
        raise ValueError("Not a canonical PCM WAVE header")
    if audio_format != _FORMAT_PCM:
        raise ValueError(f"Unsupported WAVE format tag {audio_format}")
    return WavFormat(
        sample_rate=sample_rate,
        channels=channels,
        bits_per_sample=bits_per_sample,
        byte_rate=byte_rate,
        block_align=block_align,
        data_size=data_size,
        riff_size=riff_size,
    )


def pcm_duration_seconds(
    byte_count: int,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = DEFAULT_CHANNELS,
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE,
) -> float:
    """Duration of ``byte_count`` bytes of raw PCM with the given format."""

    _check_parameters(sample_rate, channels, bits_per_sample)
    return byte_count / (sample_rate * channels * bits_per_sample // 8)


__all__ = [
    "DEFAULT_BITS_PER_SAMPLE",
    "DEFAULT_CHANNELS",
    "DEFAULT_SAMPLE_RATE",
    "RIFF_OVERHEAD",
    "WAV_HEADER_SIZE",
    "WavFormat",
    "encode_wav",
    "parse_wav_header",
    "pcm_duration_seconds",
]
