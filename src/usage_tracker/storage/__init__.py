"""Key-value persistence backends with abstract base."""

from usage_tracker.storage.base import BaseKeyValueStore
from usage_tracker.storage.memory import MemoryKeyValueStore
from usage_tracker.storage.sqlite import SQLiteKeyValueStore


def __getattr__(name):
    """Lazy import for the backend that requires httpx."""
    if name == "HttpKeyValueStore":
        from usage_tracker.storage.remote import HttpKeyValueStore
        return HttpKeyValueStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "BaseKeyValueStore",
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "HttpKeyValueStore",
]
