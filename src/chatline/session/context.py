"""Explicit ownership of the process-wide temporary session.

Views receive a SessionContext and acquire a handle before entering
temporary mode. Only the current holder may drive the session; acquiring
while another view holds it tears the other view's session down first.
"""

import logging

from ..errors import SessionError
from .models import EndReason
from .temporary import SessionEndedCallback, TemporarySession

logger = logging.getLogger(__name__)


class SessionHandle:
    """Exclusive access to the session for one owner.

    Usable as a (sync or async) context manager; leaving the block
    releases the handle, which ends an active session.
    """

    def __init__(self, context: "SessionContext", owner: str) -> None:
        self._context = context
        self._owner = owner

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def held(self) -> bool:
        return self._context.holder is self

    @property
    def session(self) -> TemporarySession:
        self._require_held()
        return self._context.session

    def enter_temporary(self, on_ended: SessionEndedCallback | None = None) -> None:
        self.session.start(on_ended)

    def exit_temporary(self) -> bool:
        return self.session.end(EndReason.EXITED)

    def release(self) -> bool:
        """Give up the session, ending it if active; repeat calls are no-ops.

        Returns:
            True if releasing ended an active session
        """
        if not self.held:
            return False
        ended = self._context.session.end(EndReason.TEARDOWN)
        self._context._release(self)
        return ended

    def _require_held(self) -> None:
        if not self.held:
            raise SessionError(f"Session handle of {self._owner!r} was released or preempted")

    def __enter__(self) -> "SessionHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    async def __aenter__(self) -> "SessionHandle":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


class SessionContext:
    """Holds the single temporary session and tracks its owner."""

    def __init__(self, session: TemporarySession | None = None) -> None:
        self._session = session or TemporarySession()
        self._holder: SessionHandle | None = None

    @property
    def session(self) -> TemporarySession:
        return self._session

    @property
    def holder(self) -> SessionHandle | None:
        return self._holder

    def acquire(self, owner: str) -> SessionHandle:
        """Take ownership of the session, preempting any current holder."""
        if self._holder is not None:
            logger.info("Session preempted: %s -> %s", self._holder.owner, owner)
            self._session.end(EndReason.PREEMPTED)
        self._holder = SessionHandle(self, owner)
        return self._holder

    def _release(self, handle: SessionHandle) -> None:
        if self._holder is handle:
            self._holder = None
