"""Persistent key-value store module for chatline.

Durable timelines are read from the store at construction and written on
every mutation.
"""

from .base import KeyValueStore
from .factory import create_key_value_store
from .in_memory import InMemoryKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "create_key_value_store",
]
