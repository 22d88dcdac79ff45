"""Ephemeral timeline for temporary chats.

Index-addressed and never persisted. Only the owning TemporarySession
may clear it wholesale.
"""

import logging
from collections.abc import Hashable, Iterator

from ..errors import NotFoundError
from .base import RegenerableTimeline
from .models import DeleteResult, Role, TempMessage, is_single_user_turn

logger = logging.getLogger(__name__)


class EphemeralTimeline(RegenerableTimeline):
    """Bare ordered sequence of temporary messages."""

    def __init__(self) -> None:
        self._messages: list[TempMessage] = []

    @property
    def messages(self) -> tuple[TempMessage, ...]:
        """Read-only snapshot in append order."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[TempMessage]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> TempMessage:
        return self._messages[self._check(index)]

    def append(self, message: TempMessage) -> None:
        self._messages.append(message)
        logger.debug("Appended temporary %s message at %d", message.role.value, len(self._messages) - 1)

    def delete_at(self, index: int) -> bool:
        """Remove one message; an out-of-range index is a no-op."""
        if not 0 <= index < len(self._messages):
            logger.debug("Delete of temporary index %d ignored", index)
            return False
        del self._messages[index]
        return True

    def delete_after(self, index: int) -> DeleteResult:
        """Remove the message at index and everything after it.

        Raises:
            NotFoundError: If index is out of range
        """
        return self.truncate_from(self._check(index))

    def _clear(self) -> None:
        self._messages.clear()

    def _check(self, index: int) -> int:
        # Negative indices are not aliases for positions from the end
        if not isinstance(index, int) or not 0 <= index < len(self._messages):
            raise NotFoundError(index)
        return index

    # RegenerableTimeline interface

    def resolve_position(self, ref: Hashable) -> int:
        return self._check(ref)  # type: ignore[arg-type]

    def role_at(self, position: int) -> Role:
        return self._messages[position].role

    def content_at(self, position: int) -> str:
        return self._messages[position].content

    def truncate_from(self, position: int) -> DeleteResult:
        self._check(position)
        removed = len(self._messages) - position
        del self._messages[position:]
        return DeleteResult(
            removed_count=removed,
            is_single_message=is_single_user_turn(self._messages),
        )
