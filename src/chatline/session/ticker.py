"""Repeating tick schedulers for temporary sessions.

Hides how the once-per-second session tick is driven. At most one
callback may be outstanding per ticker; starting a second one without
cancelling the first raises SessionError.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable

from ..config import TICK_INTERVAL_SECONDS
from ..errors import SessionError


class Ticker(ABC):
    """Cancellable repeating callback."""

    @abstractmethod
    def start(self, callback: Callable[[], None]) -> None:
        """Begin invoking callback once per interval."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop invoking the callback; cancelling twice is a no-op."""

    @property
    @abstractmethod
    def running(self) -> bool:
        """Whether a callback is outstanding."""


class AsyncioTicker(Ticker):
    """Ticker driven by the running asyncio event loop.

    Deadlines are computed from the start time so callbacks do not drift.
    """

    def __init__(self, interval: float = TICK_INTERVAL_SECONDS) -> None:
        self._interval = interval
        self._callback: Callable[[], None] | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._deadline = 0.0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        if self._callback is not None:
            raise SessionError("A tick callback is already scheduled")
        loop = asyncio.get_running_loop()
        self._callback = callback
        self._deadline = loop.time()
        self._schedule(loop)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        self._deadline += self._interval
        self._handle = loop.call_at(self._deadline, self._fire, loop)

    def _fire(self, loop: asyncio.AbstractEventLoop) -> None:
        self._handle = None
        callback = self._callback
        if callback is None:
            return
        callback()
        # The callback may have cancelled or restarted the ticker
        if self._callback is callback and self._handle is None:
            self._schedule(loop)


class ManualTicker(Ticker):
    """Ticker advanced explicitly with advance(); used for simulated time."""

    def __init__(self) -> None:
        self._callback: Callable[[], None] | None = None
        self.fired = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        if self._callback is not None:
            raise SessionError("A tick callback is already scheduled")
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    def advance(self, ticks: int = 1) -> int:
        """Fire up to ticks callbacks, stopping early if cancelled.

        Returns:
            Number of callbacks actually fired
        """
        fired = 0
        for _ in range(ticks):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        self.fired += fired
        return fired
