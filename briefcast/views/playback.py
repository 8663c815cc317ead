"""Playback state schemas."""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from briefcast.playback import PlaybackSession


def format_clock(seconds: float) -> str:
    """Render ``seconds`` as ``m:ss``, flooring to whole seconds."""

    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


class PlaybackView(BaseModel):
    """Observable playback state as shown to clients."""

    state: str
    is_playing: bool
    position_seconds: float
    duration_seconds: float
    duration_known: bool
    progress: float = Field(..., ge=0.0, le=1.0)
    position_label: str
    duration_label: str
    has_audio: bool

    @classmethod
    def from_session(cls, session: PlaybackSession) -> "PlaybackView":
        return cls(
            state=session.state.value,
            is_playing=session.is_playing,
            position_seconds=round(session.position_seconds, 3),
            duration_seconds=round(session.duration_seconds, 3),
            duration_known=session.duration_known,
            progress=session.progress,
            position_label=format_clock(session.position_seconds),
            duration_label=format_clock(session.duration_seconds) if session.duration_known else "0:00",
            has_audio=session.last_loaded_ref is not None,
        )


class SeekRequest(BaseModel):
    fraction: float = Field(..., description="Target position as a fraction of the duration")
