"""Configuration constants and environment-driven settings.

Centralizes magic numbers and configuration values for chatline.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# Temporary session configuration
SESSION_BUDGET_SECONDS = 1800  # 30 minutes per temporary session
TICK_INTERVAL_SECONDS = 1.0

# Persistent store configuration
STORE_KEY_PREFIX = "chatline_conversation:"
DEFAULT_STORE_PATH = "./chatline.db"

# Day grouping labels
TODAY_LABEL = "Today"
YESTERDAY_LABEL = "Yesterday"

# Models
DEFAULT_MODEL = "gpt-4o-mini"

# Session end notification
SESSION_ENDED_MESSAGE = "Temporary chat session ended. All messages have been cleared."


class Settings(BaseModel):
    """Runtime settings read from the environment."""

    model_config = ConfigDict(frozen=True)

    store_backend: str = Field(default="memory", description="Key-value store backend ('memory' or 'sqlite')")
    store_path: str = Field(default=DEFAULT_STORE_PATH, description="Path of the SQLite store file")
    model: str = Field(default=DEFAULT_MODEL, description="Model identifier used for new messages")
    log_level: str = Field(default="WARNING")
    session_seconds: int = Field(default=SESSION_BUDGET_SECONDS, gt=0)


def load_settings() -> Settings:
    """Load settings from environment variables.

    Environment variables:
        CHATLINE_STORE: Store backend (default: memory)
        CHATLINE_STORE_PATH: SQLite store path (default: ./chatline.db)
        CHATLINE_MODEL: Model identifier (default: gpt-4o-mini)
        CHATLINE_LOG_LEVEL: Log level (default: WARNING)
        CHATLINE_SESSION_SECONDS: Temporary session budget (default: 1800)
    """
    load_dotenv()
    return Settings(
        store_backend=os.getenv("CHATLINE_STORE", "memory"),
        store_path=os.getenv("CHATLINE_STORE_PATH", DEFAULT_STORE_PATH),
        model=os.getenv("CHATLINE_MODEL", DEFAULT_MODEL),
        log_level=os.getenv("CHATLINE_LOG_LEVEL", "WARNING"),
        session_seconds=int(os.getenv("CHATLINE_SESSION_SECONDS", str(SESSION_BUDGET_SECONDS))),
    )
