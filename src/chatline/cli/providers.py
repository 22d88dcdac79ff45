"""Provider factory functions for CLI.

Centralizes creation of the key-value store from settings.
Hides configuration details from command implementations.
"""

from ..config import Settings
from ..store import KeyValueStore, create_key_value_store


def get_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store backend named by the settings.

    Environment variables (through Settings):
        CHATLINE_STORE: Store backend (memory or sqlite; default: memory)
        CHATLINE_STORE_PATH: SQLite store path (default: ./chatline.db)
    """
    if settings.store_backend == "sqlite":
        return create_key_value_store("sqlite", path=settings.store_path)
    return create_key_value_store(settings.store_backend)
