"""Time-boxed temporary chat session.

Hides the countdown state machine wrapped around an ephemeral timeline:

    Inactive --start()--> Active --tick()*--> Active
    Active --(countdown hits 0 | end())--> Inactive

Every Active -> Inactive path runs one guarded teardown: cancel the tick,
clear the ephemeral timeline, notify once. Repeated or overlapping end
requests after the first are no-ops.
"""

import logging
from collections.abc import Callable

from ..config import SESSION_BUDGET_SECONDS
from ..errors import SessionError
from ..timeline import EphemeralTimeline
from .models import EndReason, SessionMode
from .ticker import AsyncioTicker, Ticker

logger = logging.getLogger(__name__)

SessionEndedCallback = Callable[[EndReason], None]


class TemporarySession:
    """Countdown-governed owner of an ephemeral timeline."""

    def __init__(
        self,
        ticker: Ticker | None = None,
        budget_seconds: int = SESSION_BUDGET_SECONDS,
    ) -> None:
        if budget_seconds <= 0:
            raise ValueError("budget_seconds must be positive")
        self._ticker = ticker or AsyncioTicker()
        self._budget = budget_seconds
        self._timeline = EphemeralTimeline()
        self._active = False
        self._mode = SessionMode.NORMAL
        self._remaining = budget_seconds
        self._torn_down = True
        self._on_ended: SessionEndedCallback | None = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def remaining_label(self) -> str:
        """Countdown as MM:SS."""
        minutes, seconds = divmod(self._remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def timeline(self) -> EphemeralTimeline:
        return self._timeline

    def start(self, on_ended: SessionEndedCallback | None = None) -> None:
        """Enter temporary mode with a full budget and an empty timeline.

        Raises:
            SessionError: If the session is already active
        """
        if self._active:
            raise SessionError("Temporary session is already active")
        self._ticker.start(self.tick)
        self._remaining = self._budget
        self._timeline._clear()
        self._mode = SessionMode.TEMPORARY
        self._active = True
        self._torn_down = False
        self._on_ended = on_ended
        logger.info("Temporary session started (%d seconds)", self._budget)

    def tick(self) -> None:
        """Count down one second; expire the session at zero."""
        if not self._active or self._mode != SessionMode.TEMPORARY:
            return
        self._remaining -= 1
        if self._remaining <= 0:
            self._remaining = 0
            self.end(EndReason.EXPIRED)

    def end(self, reason: EndReason = EndReason.EXITED) -> bool:
        """Tear the session down.

        Returns:
            True if this call performed the teardown
        """
        if self._torn_down:
            return False
        self._torn_down = True
        self._ticker.cancel()
        self._active = False
        self._mode = SessionMode.NORMAL
        self._timeline._clear()
        callback, self._on_ended = self._on_ended, None
        logger.info("Temporary session ended", extra={"reason": reason.value})
        if callback is not None:
            callback(reason)
        return True
