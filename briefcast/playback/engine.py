"""Playback engine: applies the pure state machine to a real output and ticker.

All state changes go through one FIFO inbox drained on the control loop.
Events raised on other threads (the output's end-of-stream timer) are handed
to ``dispatcher`` first, which in the service is ``loop.call_soon_threadsafe``.
Every asynchronous event carries the generation of the session it was
created for, so ticks and completions from a torn-down source are dropped by
the transition function.
"""

from __future__ import annotations

import logging
from collections import deque
from functools import partial
from typing import Callable, Optional

from briefcast.errors import DecodeError
from briefcast.telemetry import record_playback_transition

from .output import AudioOutput, read_source_bytes
from .state import (
    AudioSource,
    Effect,
    EffectKind,
    LoadFailed,
    LoadRequested,
    LoadSucceeded,
    PauseRequested,
    PlaybackEvent,
    PlaybackFinished,
    PlaybackSession,
    PlayRequested,
    PositionSampled,
    SeekRequested,
    StopRequested,
    transition,
)
from .ticker import Ticker

logger = logging.getLogger(__name__)

Listener = Callable[[PlaybackSession], None]
Dispatcher = Callable[[Callable[[], None]], None]


def _call_now(callback: Callable[[], None]) -> None:
    callback()


class PlaybackEngine:
    """Owns the single active playback session."""

    def __init__(
        self,
        output: AudioOutput,
        ticker: Ticker,
        *,
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        self._output = output
        self._ticker = ticker
        self._dispatch = dispatcher or _call_now
        self._session = PlaybackSession()
        self._inbox: deque[PlaybackEvent] = deque()
        self._draining = False
        self._listeners: list[Listener] = []

    @property
    def session(self) -> PlaybackSession:
        return self._session

    def snapshot(self) -> PlaybackSession:
        return self._session

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns an unsubscribe hook."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- commands -----------------------------------------------------------

    def measure(self, source: AudioSource) -> float:
        """Decode ``source`` far enough to learn its duration.

        Touches no session state, so it may run on a worker thread ahead of
        :meth:`load`. Raises :class:`DecodeError`.
        """

        try:
            return self._output.measure(source)
        except DecodeError:
            raise
        except Exception as exc:
            raise DecodeError(f"Audio could not be decoded: {exc}") from exc

    def load(self, source: AudioSource, *, duration_seconds: float | None = None) -> PlaybackSession:
        """Tear down the previous session and load ``source``.

        A ``duration_seconds`` from :meth:`measure` spares the output a second
        decode on the control loop. Raises :class:`DecodeError` when the output
        cannot decode the source; the engine is then left idle with no sampling
        active.
        """

        if self._draining:
            raise RuntimeError("load() cannot be called from a playback listener")

        self.submit(LoadRequested(source))
        generation = self._session.generation
        try:
            duration = self._output.load(source, duration_seconds)
        except Exception as exc:
            self.submit(LoadFailed(generation))
            if isinstance(exc, DecodeError):
                raise
            raise DecodeError(f"Audio could not be loaded: {exc}") from exc

        self._output.set_finished_callback(partial(self._on_output_finished, generation))
        self.submit(LoadSucceeded(generation, duration))
        logger.info(
            "Loaded playback source generation=%s duration=%.3fs",
            generation,
            self._session.duration_seconds,
        )
        return self._session

    def play(self) -> PlaybackSession:
        self.submit(PlayRequested())
        return self._session

    def pause(self) -> PlaybackSession:
        self.submit(PauseRequested())
        return self._session

    def seek(self, fraction: float) -> PlaybackSession:
        self.submit(SeekRequested(fraction))
        return self._session

    def stop(self) -> PlaybackSession:
        self.submit(StopRequested())
        return self._session

    def current_audio_bytes(self) -> bytes | None:
        """Bytes of what is currently loaded, whatever it was loaded from."""

        ref = self._session.last_loaded_ref
        if ref is None:
            return None
        return read_source_bytes(ref)

    # --- event plumbing -----------------------------------------------------

    def submit(self, event: PlaybackEvent) -> None:
        """Queue ``event`` and drain the inbox unless a drain is in progress.

        Must be called on the control loop; other threads go through the
        dispatcher.
        """

        self._inbox.append(event)
        if self._draining:
            return
        self._draining = True
        try:
            while self._inbox:
                self._apply(self._inbox.popleft())
        finally:
            self._draining = False

    def _apply(self, event: PlaybackEvent) -> None:
        previous = self._session
        result = transition(previous, event)
        self._session = result.session
        for effect in result.effects:
            self._perform(effect)
        if result.session.state is not previous.state:
            logger.debug(
                "Playback %s -> %s on %s",
                previous.state.value,
                result.session.state.value,
                type(event).__name__,
            )
            record_playback_transition(result.session.state.value)
        if result.session != previous:
            for listener in list(self._listeners):
                listener(result.session)

    def _perform(self, effect: Effect) -> None:
        kind = effect.kind
        if kind is EffectKind.START_OUTPUT:
            self._output.play()
        elif kind is EffectKind.PAUSE_OUTPUT:
            self._output.pause()
        elif kind is EffectKind.SEEK_OUTPUT:
            self._output.seek_to(effect.seconds)
        elif kind is EffectKind.START_SAMPLING:
            self._ticker.start(partial(self._sample, self._session.generation))
        elif kind is EffectKind.PAUSE_SAMPLING:
            self._ticker.pause()
        elif kind is EffectKind.TEAR_DOWN:
            self._ticker.cancel()
            self._output.set_finished_callback(None)
            self._output.unload()

    def _sample(self, generation: int) -> None:
        if generation != self._session.generation:
            return
        self.submit(
            PositionSampled(
                generation,
                self._output.current_position(),
                self._output.current_duration(),
            )
        )

    def _on_output_finished(self, generation: int) -> None:
        self._dispatch(partial(self.submit, PlaybackFinished(generation)))


__all__ = ["Dispatcher", "Listener", "PlaybackEngine"]
