"""Best-effort media type detection for stored or loaded audio."""

from __future__ import annotations

WAV_MEDIA_TYPE = "audio/wav"
MPEG_MEDIA_TYPE = "audio/mpeg"
OCTET_STREAM = "application/octet-stream"


def guess_media_type(data: bytes) -> str:
    """Return a media type from the leading magic bytes of ``data``."""

    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return WAV_MEDIA_TYPE
    if data[:3] == b"ID3":
        return MPEG_MEDIA_TYPE
    # Bare MPEG audio frame sync.
    if len(data) >= 2 and data[0] == 0xFF and (data[1] & 0xE0) == 0xE0:
        return MPEG_MEDIA_TYPE
    return OCTET_STREAM


__all__ = ["MPEG_MEDIA_TYPE", "OCTET_STREAM", "WAV_MEDIA_TYPE", "guess_media_type"]
