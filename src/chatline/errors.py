"""Error taxonomy for chatline.

Normalization never raises; malformed markdown outside the repaired
patterns is rendered as-is.
"""


class ChatlineError(Exception):
    """Base class for chatline errors."""


class TimelineError(ChatlineError):
    """Base class for timeline operation errors."""


class NotFoundError(TimelineError):
    """A message id or index is absent from the timeline."""

    def __init__(self, ref: str | int):
        self.ref = ref
        super().__init__(f"Message not found: {ref!r}")


class NoPrecedingUserMessageError(TimelineError):
    """Regeneration was requested at a position with no user message before it."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"No user message precedes position {position}")


class CompletionProviderError(ChatlineError):
    """The external completion call failed.

    The cascade deletion that preceded the call is not rolled back.
    """

    def __init__(self, message: str):
        super().__init__(f"Completion failed: {message}")


class SessionError(ChatlineError):
    """Temporary session ownership or scheduling was violated."""
