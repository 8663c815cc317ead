"""Pure playback state machine.

``transition`` maps a session and an event to the next session plus the side
effects the engine has to carry out. Nothing here touches an audio device, a
timer or a lock, so every rule can be exercised directly in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Union

AudioSource = Union[bytes, Path]

# Placeholder duration used until the decoder reports a real one. Keeps
# position / duration defined.
MIN_DURATION_SECONDS = 0.001


class PlaybackState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


SEEKABLE_STATES = frozenset(
    {PlaybackState.READY, PlaybackState.PLAYING, PlaybackState.PAUSED, PlaybackState.FINISHED}
)


@dataclass(frozen=True)
class PlaybackSession:
    """Observable state of the single active playback session."""

    state: PlaybackState = PlaybackState.IDLE
    position_seconds: float = 0.0
    duration_seconds: float = MIN_DURATION_SECONDS
    duration_known: bool = False
    generation: int = 0
    source_ref: AudioSource | None = None
    last_loaded_ref: AudioSource | None = None

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def progress(self) -> float:
        """Position as a fraction of the duration, always within [0, 1]."""

        return min(1.0, max(0.0, self.position_seconds / self.duration_seconds))


class EffectKind(str, Enum):
    START_OUTPUT = "start_output"
    PAUSE_OUTPUT = "pause_output"
    SEEK_OUTPUT = "seek_output"
    START_SAMPLING = "start_sampling"
    PAUSE_SAMPLING = "pause_sampling"
    TEAR_DOWN = "tear_down"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    seconds: float = 0.0


@dataclass(frozen=True)
class Transition:
    session: PlaybackSession
    effects: tuple[Effect, ...] = ()


# --- events -----------------------------------------------------------------


@dataclass(frozen=True)
class LoadRequested:
    source: AudioSource


@dataclass(frozen=True)
class LoadSucceeded:
    generation: int
    duration_seconds: float


@dataclass(frozen=True)
class LoadFailed:
    generation: int


@dataclass(frozen=True)
class PlayRequested:
    pass


@dataclass(frozen=True)
class PauseRequested:
    pass


@dataclass(frozen=True)
class SeekRequested:
    fraction: float


@dataclass(frozen=True)
class StopRequested:
    pass


@dataclass(frozen=True)
class PositionSampled:
    generation: int
    position_seconds: float
    duration_seconds: float | None = None


@dataclass(frozen=True)
class PlaybackFinished:
    generation: int


PlaybackEvent = Union[
    LoadRequested,
    LoadSucceeded,
    LoadFailed,
    PlayRequested,
    PauseRequested,
    SeekRequested,
    StopRequested,
    PositionSampled,
    PlaybackFinished,
]


def _clamp_fraction(fraction: float) -> float:
    if fraction != fraction:  # NaN
        return 0.0
    return min(1.0, max(0.0, float(fraction)))


def _finish(session: PlaybackSession) -> Transition:
    return Transition(
        replace(session, state=PlaybackState.FINISHED, position_seconds=session.duration_seconds),
        (Effect(EffectKind.PAUSE_OUTPUT), Effect(EffectKind.PAUSE_SAMPLING)),
    )


def transition(session: PlaybackSession, event: PlaybackEvent) -> Transition:
    """Apply ``event`` to ``session``; unknown or stale events leave it unchanged."""

    state = session.state

    if isinstance(event, LoadRequested):
        return Transition(
            PlaybackSession(
                state=PlaybackState.LOADING,
                generation=session.generation + 1,
                source_ref=event.source,
                last_loaded_ref=session.last_loaded_ref,
            ),
            (Effect(EffectKind.TEAR_DOWN),),
        )

    if isinstance(event, StopRequested):
        return Transition(
            PlaybackSession(
                generation=session.generation + 1,
                last_loaded_ref=session.last_loaded_ref,
            ),
            (Effect(EffectKind.PAUSE_OUTPUT), Effect(EffectKind.TEAR_DOWN)),
        )

    if isinstance(event, LoadSucceeded):
        if state is not PlaybackState.LOADING or event.generation != session.generation:
            return Transition(session)
        known = event.duration_seconds > 0
        return Transition(
            replace(
                session,
                state=PlaybackState.READY,
                position_seconds=0.0,
                duration_seconds=event.duration_seconds if known else MIN_DURATION_SECONDS,
                duration_known=known,
                last_loaded_ref=session.source_ref,
            )
        )

    if isinstance(event, LoadFailed):
        if state is not PlaybackState.LOADING or event.generation != session.generation:
            return Transition(session)
        return Transition(
            PlaybackSession(generation=session.generation, last_loaded_ref=session.last_loaded_ref),
            (Effect(EffectKind.TEAR_DOWN),),
        )

    if isinstance(event, PlayRequested):
        if state in (PlaybackState.IDLE, PlaybackState.LOADING, PlaybackState.PLAYING):
            return Transition(session)
        if state is PlaybackState.FINISHED:
            return Transition(
                replace(session, state=PlaybackState.PLAYING, position_seconds=0.0),
                (
                    Effect(EffectKind.SEEK_OUTPUT, 0.0),
                    Effect(EffectKind.START_OUTPUT),
                    Effect(EffectKind.START_SAMPLING),
                ),
            )
        return Transition(
            replace(session, state=PlaybackState.PLAYING),
            (Effect(EffectKind.START_OUTPUT), Effect(EffectKind.START_SAMPLING)),
        )

    if isinstance(event, PauseRequested):
        if state is not PlaybackState.PLAYING:
            return Transition(session)
        return Transition(
            replace(session, state=PlaybackState.PAUSED),
            (Effect(EffectKind.PAUSE_OUTPUT), Effect(EffectKind.PAUSE_SAMPLING)),
        )

    if isinstance(event, SeekRequested):
        if state not in SEEKABLE_STATES:
            return Transition(session)
        target = _clamp_fraction(event.fraction) * session.duration_seconds
        next_state = PlaybackState.PAUSED if state is PlaybackState.FINISHED else state
        return Transition(
            replace(session, state=next_state, position_seconds=target),
            (Effect(EffectKind.SEEK_OUTPUT, target),),
        )

    if isinstance(event, PositionSampled):
        if state is not PlaybackState.PLAYING or event.generation != session.generation:
            return Transition(session)
        updated = session
        if event.duration_seconds is not None and event.duration_seconds > 0:
            updated = replace(updated, duration_seconds=event.duration_seconds, duration_known=True)
        position = max(0.0, event.position_seconds)
        if updated.duration_known and position >= updated.duration_seconds:
            return _finish(updated)
        return Transition(replace(updated, position_seconds=position))

    if isinstance(event, PlaybackFinished):
        if event.generation != session.generation:
            return Transition(session)
        if state not in (PlaybackState.PLAYING, PlaybackState.PAUSED):
            return Transition(session)
        return _finish(session)

    return Transition(session)


__all__ = [
    "AudioSource",
    "Effect",
    "EffectKind",
    "LoadFailed",
    "LoadRequested",
    "LoadSucceeded",
    "MIN_DURATION_SECONDS",
    "PauseRequested",
    "PlayRequested",
    "PlaybackEvent",
    "PlaybackFinished",
    "PlaybackSession",
    "PlaybackState",
    "PositionSampled",
    "SEEKABLE_STATES",
    "SeekRequested",
    "StopRequested",
    "Transition",
    "transition",
]
