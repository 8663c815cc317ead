"""Shared fakes for the briefcast test suite."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Callable, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from briefcast.application.interfaces import DurableStorage  # noqa: E402
from briefcast.errors import DecodeError, StorageError  # noqa: E402
from briefcast.playback import PlaybackEngine  # noqa: E402
from briefcast.playback.output import read_source_bytes  # noqa: E402


class FakeOutput:
    """In-memory output whose clock only moves when the test says so."""

    def __init__(self, duration: float = 2.0) -> None:
        self.duration = duration
        self.loaded_bytes: Optional[bytes] = None
        self.position = 0.0
        self.playing = False
        self.callback: Callable[[], None] | None = None
        self.calls: list[str] = []

    def measure(self, source) -> float:
        self.calls.append("measure")
        data = read_source_bytes(source)
        if not data or data.startswith(b"bad"):
            raise DecodeError("cannot decode test payload")
        return self.duration

    def load(self, source, duration_seconds: Optional[float] = None) -> float:
        self.calls.append("load")
        if duration_seconds is None:
            duration_seconds = self.measure(source)
        self.loaded_bytes = read_source_bytes(source)
        self.position = 0.0
        return duration_seconds

    def play(self) -> None:
        self.calls.append("play")
        self.playing = True

    def pause(self) -> None:
        self.calls.append("pause")
        self.playing = False

    def seek_to(self, seconds: float) -> None:
        self.calls.append(f"seek:{seconds:g}")
        self.position = seconds

    def current_position(self) -> float:
        return self.position

    def current_duration(self) -> float | None:
        return self.duration if self.loaded_bytes is not None else None

    def set_finished_callback(self, callback: Callable[[], None] | None) -> None:
        self.callback = callback

    def unload(self) -> None:
        self.calls.append("unload")
        self.loaded_bytes = None
        self.playing = False
        self.position = 0.0

    def advance(self, seconds: float) -> None:
        self.position = min(self.duration, self.position + seconds)

    def fire_finished(self) -> None:
        if self.callback is not None:
            self.callback()


class ManualTicker:
    """Ticker driven explicitly by ``tick()``."""

    def __init__(self) -> None:
        self.callback: Callable[[], None] | None = None
        self.running = False

    def start(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.running = True

    def pause(self) -> None:
        self.running = False

    def cancel(self) -> None:
        self.running = False
        self.callback = None

    def tick(self) -> None:
        if self.running and self.callback is not None:
            self.callback()


class MemoryStorage(DurableStorage):
    """Dict-backed storage with switchable failures."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()
        self.fail_removes: set[str] = set()
        self.fail_all_writes = False

    def read_all(self, key: str) -> Optional[bytes]:
        if key in self.fail_reads:
            raise StorageError(f"read failed for {key}")
        return self.blobs.get(key)

    def write_all(self, key: str, data: bytes) -> None:
        if self.fail_all_writes or key in self.fail_writes:
            raise StorageError(f"write failed for {key}")
        self.blobs[key] = bytes(data)

    def remove(self, key: str) -> bool:
        if key in self.fail_removes:
            raise StorageError(f"remove failed for {key}")
        return self.blobs.pop(key, None) is not None


@pytest.fixture
def output() -> FakeOutput:
    return FakeOutput()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def engine(output: FakeOutput, ticker: ManualTicker) -> PlaybackEngine:
    return PlaybackEngine(output, ticker)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()
