"""Typed containers shared across the briefing pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass

from briefcast.playback import PlaybackSession


@dataclass(frozen=True)
class BriefingRequest:
    """What the user asked for."""

    topic: str
    length_seconds: int
    tone: str


@dataclass(frozen=True)
class PlayableAudio:
    """Bytes ready for the playback engine and their media type."""

    data: bytes
    media_type: str


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of a successful pipeline run."""

    request: BriefingRequest
    script: str
    audio: PlayableAudio
    session: PlaybackSession


__all__ = ["BriefingRequest", "GenerationOutcome", "PlayableAudio"]
