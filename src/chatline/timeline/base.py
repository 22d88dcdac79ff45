"""Abstract base class for message timelines.

This module defines the positional interface shared by the durable and
ephemeral timelines. The abstraction hides:
- How a message is addressed (stable id or list index)
- Whether mutations are persisted
"""

from abc import ABC, abstractmethod
from collections.abc import Hashable

from ..errors import NoPrecedingUserMessageError
from .models import DeleteResult, Role


class RegenerableTimeline(ABC):
    """Ordered message sequence that supports cascading deletes.

    Positions are zero-based offsets in append order. Every public
    operation runs to completion without yielding, so operations on one
    instance are serialized by arrival order.
    """

    @abstractmethod
    def __len__(self) -> int:
        """Number of messages in the timeline."""

    @abstractmethod
    def resolve_position(self, ref: Hashable) -> int:
        """Map a message reference to its position.

        Raises:
            NotFoundError: If the reference is absent
        """

    @abstractmethod
    def role_at(self, position: int) -> Role:
        """Role of the message at a position."""

    @abstractmethod
    def content_at(self, position: int) -> str:
        """Content of the message at a position."""

    @abstractmethod
    def truncate_from(self, position: int) -> DeleteResult:
        """Remove the message at position and everything after it."""

    def find_preceding_user(self, position: int) -> int:
        """Scan backward from position - 1 for the nearest user message.

        Raises:
            NoPrecedingUserMessageError: If no user message precedes position
        """
        for index in range(position - 1, -1, -1):
            if self.role_at(index) == Role.USER:
                return index
        raise NoPrecedingUserMessageError(position)
