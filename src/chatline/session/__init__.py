"""Temporary session module for chatline.

Wraps the ephemeral timeline in a self-expiring session with explicit,
single-owner access.
"""

from .context import SessionContext, SessionHandle
from .models import EndReason, SessionMode
from .temporary import TemporarySession
from .ticker import AsyncioTicker, ManualTicker, Ticker

__all__ = [
    "AsyncioTicker",
    "EndReason",
    "ManualTicker",
    "SessionContext",
    "SessionHandle",
    "SessionMode",
    "Ticker",
    "TemporarySession",
]
