"""Playback engine package.

1. `state` – pure transition function (session × event → session, effects).
2. `engine` – applies transitions to an output device and a sampling ticker.
3. `ticker` – periodic position sampling on the asyncio loop.
4. `output` – decoder/output contract plus the headless clocked player.
"""

from .engine import PlaybackEngine
from .output import AudioOutput, ClockedAudioOutput
from .state import (
    MIN_DURATION_SECONDS,
    AudioSource,
    PlaybackSession,
    PlaybackState,
    transition,
)
from .ticker import AsyncioTicker, Ticker

__all__ = [
    "AsyncioTicker",
    "AudioOutput",
    "AudioSource",
    "ClockedAudioOutput",
    "MIN_DURATION_SECONDS",
    "PlaybackEngine",
    "PlaybackSession",
    "PlaybackState",
    "Ticker",
    "transition",
]
