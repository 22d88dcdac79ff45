"""Data models for conversation timelines.

These models define the structure of messages independently of the
timeline variant (durable or ephemeral) that holds them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from uuid_extensions import uuid7


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageStatus(str, Enum):
    """Lifecycle tag of a message."""

    PENDING = "pending"      # Still streaming
    COMPLETE = "complete"
    ERROR = "error"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class Message(BaseModel):
    """One turn in a durable conversation.

    Messages are frozen; the owning Timeline replaces an instance when its
    content grows during streaming or its status reaches a terminal value.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque identifier, unique within a timeline")
    role: Role
    content: str = Field(default="", description="Raw text, may be empty while streaming")
    status: MessageStatus = MessageStatus.COMPLETE
    timestamp: datetime = Field(default_factory=_local_now)
    response_time_ms: int = Field(default=0, ge=0, description="0 means unknown")
    response_tokens: int | None = Field(default=None, ge=0)
    model: str | None = Field(default=None, description="Generation backend identifier")
    mode: str = Field(default="chat", description="chat or agent")
    agent_type: str = Field(default="none", description="Persona that produced the message")
    is_image_generation: bool = False
    image_url: str | None = None

    @classmethod
    def create(cls, role: Role | str, content: str = "", **fields) -> "Message":
        """Create a message with a fresh time-ordered id."""
        return cls(id=str(uuid7()), role=Role(role), content=content, **fields)


class TempMessage(BaseModel):
    """Reduced message shape held by an ephemeral timeline."""

    model_config = ConfigDict(frozen=True)

    content: str
    role: Role
    response_time_ms: int = Field(default=0, ge=0)
    response_tokens: int = Field(default=0, ge=0)
    model: str = ""

    @field_validator("role")
    @classmethod
    def _user_or_assistant(cls, role: Role) -> Role:
        if role == Role.SYSTEM:
            raise ValueError("temporary messages are user or assistant only")
        return role


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a cascading delete."""

    removed_count: int
    is_single_message: bool


def is_single_user_turn(messages: "list[Message] | list[TempMessage]") -> bool:
    """Check whether a sequence is exactly one user message and nothing else."""
    return len(messages) == 1 and messages[0].role == Role.USER
