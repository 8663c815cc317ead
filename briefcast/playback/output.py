"""Decoder/output contract and a headless, clock-driven implementation.

The service never owns a sound card: clients fetch the loaded bytes and play
them locally. ``ClockedAudioOutput`` still behaves like a player so the engine
has an authoritative position, a duration and an end-of-stream notification.
"""

from __future__ import annotations

import io
import logging
import subprocess
import threading
import time
import wave
from pathlib import Path
from typing import Callable, Optional, Protocol

from briefcast.errors import DecodeError

from .state import AudioSource

logger = logging.getLogger(__name__)

_FFPROBE_TIMEOUT_SECONDS = 30


class AudioOutput(Protocol):
    """What the playback engine needs from a decoder/output device."""

    def measure(self, source: AudioSource) -> float: ...

    def load(self, source: AudioSource, duration_seconds: float | None = None) -> float: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek_to(self, seconds: float) -> None: ...

    def current_position(self) -> float: ...

    def current_duration(self) -> float | None: ...

    def set_finished_callback(self, callback: Callable[[], None] | None) -> None: ...

    def unload(self) -> None: ...


def read_source_bytes(source: AudioSource) -> bytes:
    """Return the bytes behind a source, reading the file for path sources."""

    if isinstance(source, Path):
        return source.read_bytes()
    return bytes(source)


def _wav_duration(data: bytes) -> float:
    try:
        with wave.open(io.BytesIO(data), "rb") as wave_file:
            frames = wave_file.getnframes()
            rate = wave_file.getframerate()
    except (wave.Error, EOFError) as exc:
        raise DecodeError(f"Invalid WAV container: {exc}") from exc
    if rate <= 0:
        raise DecodeError("WAV container declares a zero sample rate")
    return frames / rate


def encoded_duration(data: bytes) -> float:
    """Ask ffprobe for the duration of an encoded (non-WAV) payload."""

    try:
        process = subprocess.run(
            [
                "ffprobe",
                "-v", "error",
                "-show_entries", "format=duration",
                "-of", "default=noprint_wrappers=1:nokey=1",
                "-i", "pipe:0",
            ],
            input=data,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=True,
            timeout=_FFPROBE_TIMEOUT_SECONDS,
        )
    except FileNotFoundError as exc:
        raise DecodeError("ffprobe is required to decode non-WAV audio") from exc
    except subprocess.TimeoutExpired as exc:
        raise DecodeError("ffprobe timed out while reading audio") from exc
    except subprocess.CalledProcessError as exc:
        error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
        logger.error("ffprobe failed. stderr: %s", error_msg)
        raise DecodeError(f"ffprobe could not decode audio: {error_msg}") from exc

    raw = process.stdout.decode("utf-8", errors="replace").strip()
    try:
        return float(raw)
    except ValueError as exc:
        raise DecodeError(f"ffprobe reported no duration ({raw!r})") from exc


def measure_duration(
    data: bytes,
    read_encoded: Callable[[bytes], float] = encoded_duration,
) -> float:
    """Duration of a payload: WAV from its header, anything else through ffprobe.

    Blocks for as long as ffprobe runs, so async callers use a worker thread.
    """

    if not data:
        raise DecodeError("Audio payload is empty")
    if data[:4] == b"RIFF":
        return _wav_duration(data)
    return read_encoded(data)


class ClockedAudioOutput:
    """Player that derives its position from a monotonic clock.

    The completion callback fires from a timer thread once the remaining
    duration has elapsed; the engine marshals it onto the control loop.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        timer_factory: Callable[[float, Callable[[], None]], threading.Timer] = threading.Timer,
        read_encoded: Callable[[bytes], float] = encoded_duration,
    ) -> None:
        self._clock = clock
        self._timer_factory = timer_factory
        self._read_encoded = read_encoded
        self._duration: Optional[float] = None
        self._offset = 0.0
        self._started_at: Optional[float] = None
        self._timer: Optional[threading.Timer] = None
        self._finished_callback: Callable[[], None] | None = None

    @property
    def loaded(self) -> bool:
        return self._duration is not None

    @property
    def playing(self) -> bool:
        return self._started_at is not None

    def measure(self, source: AudioSource) -> float:
        return measure_duration(self._read_bytes(source), self._read_encoded)

    def load(self, source: AudioSource, duration_seconds: float | None = None) -> float:
        """Make ``source`` current; a known ``duration_seconds`` skips decoding."""

        self.unload()
        if duration_seconds is None:
            duration_seconds = self.measure(source)
        self._duration = duration_seconds
        logger.debug("Loaded audio source (%.3fs)", duration_seconds)
        return duration_seconds

    def play(self) -> None:
        if self._duration is None or self._started_at is not None:
            return
        self._started_at = self._clock()
        self._arm_timer()

    def pause(self) -> None:
        if self._started_at is None:
            return
        self._offset = self.current_position()
        self._started_at = None
        self._cancel_timer()

    def seek_to(self, seconds: float) -> None:
        if self._duration is None:
            return
        self._offset = min(self._duration, max(0.0, seconds))
        if self._started_at is not None:
            self._started_at = self._clock()
            self._arm_timer()

    def current_position(self) -> float:
        if self._duration is None:
            return 0.0
        if self._started_at is None:
            return self._offset
        return min(self._duration, self._offset + (self._clock() - self._started_at))

    def current_duration(self) -> float | None:
        return self._duration

    def set_finished_callback(self, callback: Callable[[], None] | None) -> None:
        self._finished_callback = callback

    def unload(self) -> None:
        self._cancel_timer()
        self._finished_callback = None
        self._duration = None
        self._offset = 0.0
        self._started_at = None

    @staticmethod
    def _read_bytes(source: AudioSource) -> bytes:
        try:
            return read_source_bytes(source)
        except OSError as exc:
            raise DecodeError(f"Audio source could not be read: {exc}") from exc

    def _arm_timer(self) -> None:
        self._cancel_timer()
        remaining = max(0.0, (self._duration or 0.0) - self.current_position())
        timer = self._timer_factory(remaining, self._fire_finished)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire_finished(self) -> None:
        callback = self._finished_callback
        if callback is not None:
            callback()


__all__ = ["AudioOutput", "ClockedAudioOutput", "encoded_duration", "measure_duration", "read_source_bytes"]
