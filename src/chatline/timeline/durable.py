"""Durable conversation timeline.

Owns the ordered messages of one conversation and mirrors every mutation
into an external key-value store. Store writes are fire-and-forget: a
failed write is logged and never changes timeline semantics.
"""

import asyncio
import logging
from collections.abc import Awaitable, Hashable, Iterator
from datetime import datetime

from pydantic import TypeAdapter

from ..config import STORE_KEY_PREFIX
from ..errors import NotFoundError, TimelineError
from ..store import KeyValueStore
from .base import RegenerableTimeline
from .grouping import group_by_day
from .models import DeleteResult, Message, MessageStatus, Role, is_single_user_turn

logger = logging.getLogger(__name__)

_MESSAGES = TypeAdapter(list[Message])


class Timeline(RegenerableTimeline):
    """Ordered, id-addressed message store for a durable conversation."""

    def __init__(
        self,
        conversation_id: str,
        messages: list[Message] | None = None,
        store: KeyValueStore | None = None,
    ):
        self._conversation_id = conversation_id
        self._messages: list[Message] = list(messages or [])
        self._store = store
        self._pending_writes: set[asyncio.Task] = set()
        self.updated_at = datetime.now().astimezone()

    @classmethod
    async def load(cls, store: KeyValueStore, conversation_id: str) -> "Timeline":
        """Read a conversation from the store; an unknown key yields an empty timeline."""
        raw = await store.get(cls.store_key(conversation_id))
        messages = _MESSAGES.validate_json(raw) if raw else []
        logger.debug("Loaded %d message(s) for conversation %s", len(messages), conversation_id)
        return cls(conversation_id, messages, store)

    @staticmethod
    def store_key(conversation_id: str) -> str:
        return f"{STORE_KEY_PREFIX}{conversation_id}"

    @property
    def conversation_id(self) -> str:
        return self._conversation_id

    @property
    def messages(self) -> tuple[Message, ...]:
        """Read-only snapshot in append order."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __contains__(self, message_id: object) -> bool:
        return any(m.id == message_id for m in self._messages)

    def index_of(self, message_id: str) -> int:
        """Position of a message id.

        Raises:
            NotFoundError: If no message has this id
        """
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                return index
        raise NotFoundError(message_id)

    def get(self, message_id: str) -> Message:
        return self._messages[self.index_of(message_id)]

    def append(self, message: Message) -> None:
        """Insert a message at the end.

        The caller supplies a fresh id; uniqueness is not re-checked.
        """
        self._messages.append(message)
        logger.debug("Appended %s message %s", message.role.value, message.id)
        self._touch()

    def update_content(self, message_id: str, content: str) -> Message:
        """Replace the content of a message that is still streaming."""
        index = self.index_of(message_id)
        current = self._messages[index]
        if current.status != MessageStatus.PENDING:
            raise TimelineError(f"Message {message_id!r} is no longer streaming")
        self._messages[index] = current.model_copy(update={"content": content})
        self._touch()
        return self._messages[index]

    def complete(
        self,
        message_id: str,
        status: MessageStatus = MessageStatus.COMPLETE,
        **fields
    ) -> Message:
        """Move a pending message to a terminal status.

        Extra fields (e.g. response_time_ms, response_tokens) are recorded
        with the transition.
        """
        if status == MessageStatus.PENDING:
            raise TimelineError("Terminal status required")
        index = self.index_of(message_id)
        current = self._messages[index]
        if current.status != MessageStatus.PENDING:
            raise TimelineError(f"Message {message_id!r} already has status {current.status.value}")
        self._messages[index] = current.model_copy(update={"status": status, **fields})
        self._touch()
        return self._messages[index]

    def delete_message(self, message_id: str) -> bool:
        """Remove exactly one message; an unknown id is a no-op.

        Returns:
            True if a message was removed
        """
        try:
            index = self.index_of(message_id)
        except NotFoundError:
            logger.debug("Delete of unknown message %s ignored", message_id)
            return False

        del self._messages[index]
        logger.info(
            "Deleted message %s",
            message_id,
            extra={"conversation_id": self._conversation_id, "message_id": message_id},
        )
        self._touch()
        return True

    def delete_messages_after(self, message_id: str) -> DeleteResult:
        """Remove the message with this id and everything after it.

        Raises:
            NotFoundError: If no message has this id
        """
        result = self.truncate_from(self.index_of(message_id))
        logger.info(
            "Truncated conversation %s at %s (%d removed)",
            self._conversation_id,
            message_id,
            result.removed_count,
            extra={
                "conversation_id": self._conversation_id,
                "message_id": message_id,
                "is_single_message": result.is_single_message,
            },
        )
        return result

    def grouped_by_day(self, now: datetime | None = None) -> dict[str, list[Message]]:
        """Day-bucketed view; never mutates the timeline."""
        return group_by_day(self._messages, now)

    # RegenerableTimeline interface

    def resolve_position(self, ref: Hashable) -> int:
        return self.index_of(str(ref))

    def role_at(self, position: int) -> Role:
        return self._messages[position].role

    def content_at(self, position: int) -> str:
        return self._messages[position].content

    def truncate_from(self, position: int) -> DeleteResult:
        if not 0 <= position < len(self._messages):
            raise NotFoundError(position)
        removed = len(self._messages) - position
        del self._messages[position:]
        self._touch()
        return DeleteResult(
            removed_count=removed,
            is_single_message=is_single_user_turn(self._messages),
        )

    # Persistence

    async def flush(self) -> None:
        """Wait for outstanding store writes."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    def _touch(self) -> None:
        self.updated_at = datetime.now().astimezone()
        self._schedule_write()

    def _schedule_write(self) -> None:
        if self._store is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; store write skipped for %s", self._conversation_id)
            return

        key = self.store_key(self._conversation_id)
        if self._messages:
            payload = _MESSAGES.dump_json(self._messages).decode("utf-8")
            task = loop.create_task(self._write(self._store.set(key, payload)))
        else:
            task = loop.create_task(self._write(self._store.delete(key)))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write(self, operation: Awaitable[None]) -> None:
        try:
            await operation
        except Exception as e:
            logger.warning("Store write failed for conversation %s: %s", self._conversation_id, e)
