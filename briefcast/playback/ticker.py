"""Periodic position sampling on the asyncio control loop."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


class Ticker(Protocol):
    """Fires a callback at a fixed interval until paused or cancelled."""

    def start(self, callback: Callable[[], None]) -> None: ...

    def pause(self) -> None: ...

    def cancel(self) -> None: ...


class AsyncioTicker:
    """Ticker backed by ``loop.call_later``.

    ``pause`` keeps the callback so the next ``start`` resumes cheaply;
    ``cancel`` drops it. Both take effect before returning, so a cancelled
    ticker never fires again.
    """

    def __init__(
        self,
        interval_seconds: float,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._interval = interval_seconds
        self._loop = loop
        self._callback: Callable[[], None] | None = None
        self._handle: asyncio.TimerHandle | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        if self._handle is None:
            self._schedule()

    def pause(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def cancel(self) -> None:
        self.pause()
        self._callback = None

    def _schedule(self) -> None:
        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop
        self._handle = loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        callback = self._callback
        if callback is None:
            return
        self._schedule()
        callback()


__all__ = ["AsyncioTicker", "Ticker"]
