"""Data models for temporary sessions."""

from enum import Enum


class SessionMode(str, Enum):
    """Chat mode of the client."""

    NORMAL = "normal"
    TEMPORARY = "temporary"


class EndReason(str, Enum):
    """Why a temporary session ended."""

    EXPIRED = "expired"        # Countdown reached zero
    EXITED = "exited"          # User left temporary mode
    TEARDOWN = "teardown"      # Owning view was torn down
    PREEMPTED = "preempted"    # Another view acquired the session
