"""Load and autoplay stages."""

from __future__ import annotations

from fastapi.concurrency import run_in_threadpool

from briefcast.errors import DecodeError
from briefcast.playback import PlaybackEngine, PlaybackSession, PlaybackState

from .types import PlayableAudio


async def load_audio(engine: PlaybackEngine, data: bytes) -> PlaybackSession:
    """Decode ``data`` on a worker thread, then swap it in on the control loop.

    A payload that cannot be decoded still replaces the previous session,
    leaving the engine idle.
    """

    try:
        duration = await run_in_threadpool(engine.measure, data)
    except DecodeError:
        engine.stop()
        raise
    return engine.load(data, duration_seconds=duration)


async def load_into_engine(engine: PlaybackEngine, audio: PlayableAudio) -> PlaybackSession:
    """Replace whatever the engine holds with ``audio``; raises ``DecodeError``."""

    return await load_audio(engine, audio.data)


def start_playback(engine: PlaybackEngine) -> PlaybackSession:
    session = engine.play()
    if session.state is not PlaybackState.PLAYING:
        raise RuntimeError(f"Playback did not start (state={session.state.value})")
    return session


__all__ = ["load_audio", "load_into_engine", "start_playback"]
