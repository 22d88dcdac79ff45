"""
Chatline: message timelines for a chat client.

Durable and temporary conversation timelines, response regeneration,
and markdown normalization and rendering for model output.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .errors import (
    ChatlineError,
    CompletionProviderError,
    NoPrecedingUserMessageError,
    NotFoundError,
    SessionError,
    TimelineError,
)
from .rendering import MessageRenderer, normalize
from .session import SessionContext, SessionHandle, TemporarySession
from .timeline import (
    DeleteResult,
    EphemeralTimeline,
    Message,
    MessageStatus,
    RegenerationOrchestrator,
    Role,
    TempMessage,
    Timeline,
)

__all__ = [
    "ChatlineError",
    "CompletionProviderError",
    "DeleteResult",
    "EphemeralTimeline",
    "Message",
    "MessageRenderer",
    "MessageStatus",
    "NoPrecedingUserMessageError",
    "NotFoundError",
    "RegenerationOrchestrator",
    "Role",
    "SessionContext",
    "SessionError",
    "SessionHandle",
    "TempMessage",
    "TemporarySession",
    "Timeline",
    "TimelineError",
    "normalize",
]
