"""Conversation timeline module for chatline.

Provides the durable and ephemeral message timelines, day grouping and
the regeneration algorithm they share.
"""

from .base import RegenerableTimeline
from .durable import Timeline
from .ephemeral import EphemeralTimeline
from .grouping import day_label, group_by_day
from .models import DeleteResult, Message, MessageStatus, Role, TempMessage
from .regeneration import RegenerationOrchestrator

__all__ = [
    "DeleteResult",
    "EphemeralTimeline",
    "Message",
    "MessageStatus",
    "RegenerableTimeline",
    "RegenerationOrchestrator",
    "Role",
    "TempMessage",
    "Timeline",
    "day_label",
    "group_by_day",
]
