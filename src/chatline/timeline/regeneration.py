"""Regeneration of assistant responses.

Shared by the durable and ephemeral timelines: locate the user message
that triggered a response, cascade-delete the response and everything
after it, then ask the completion provider for a new answer.

A failed completion does not restore the deleted messages; the
conversation stays truncated after the triggering user message and the
user retries manually.
"""

import logging
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING

from ..errors import CompletionProviderError
from .base import RegenerableTimeline
from .models import DeleteResult

if TYPE_CHECKING:
    from ..completion import CompletionProvider

logger = logging.getLogger(__name__)


class RegenerationOrchestrator:
    """Runs regenerations and exposes the "regenerating" indicator."""

    def __init__(
        self,
        provider: "CompletionProvider",
        on_indicator_change: Callable[[bool], None] | None = None,
    ) -> None:
        self._provider = provider
        self._on_indicator_change = on_indicator_change
        self._in_flight = 0

    @property
    def regenerating(self) -> bool:
        return self._in_flight > 0

    async def regenerate(self, timeline: RegenerableTimeline, ref: Hashable) -> DeleteResult:
        """Regenerate the response at ref (a message id or an index).

        Raises:
            NotFoundError: If ref is absent from the timeline
            NoPrecedingUserMessageError: If no user message precedes ref;
                the timeline is left unchanged
            CompletionProviderError: If the provider fails; the cascade
                deletion has already been applied
        """
        position = timeline.resolve_position(ref)
        anchor = timeline.find_preceding_user(position)

        result = timeline.truncate_from(position)
        prompt = timeline.content_at(anchor)
        logger.info(
            "Regenerating from position %d (anchor %d, %d removed)",
            position, anchor, result.removed_count,
        )

        self._set_in_flight(self._in_flight + 1)
        try:
            await self._provider(prompt, result.is_single_message)
        except Exception as e:
            logger.error("Regeneration failed at position %d: %s", position, e, exc_info=True)
            raise CompletionProviderError(str(e)) from e
        finally:
            self._set_in_flight(max(self._in_flight - 1, 0))

        return result

    def reset_indicator(self) -> None:
        """Clear the indicator on teardown; in-flight calls keep running."""
        self._set_in_flight(0)

    def _set_in_flight(self, count: int) -> None:
        was_regenerating = self.regenerating
        self._in_flight = count
        if self._on_indicator_change is not None and was_regenerating != self.regenerating:
            self._on_indicator_change(self.regenerating)
