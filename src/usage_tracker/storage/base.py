"""Abstract base class for key-value persistence backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseKeyValueStore(ABC):
    """Asynchronous get/set by key over plain nested JSON-compatible values.

    Implementations must hand out copies: mutating a value returned by
    ``get`` never changes what is stored until it is passed to ``set``.
    """

    @abstractmethod
    async def get(self, key: str) -> dict | None:
        """Return the value stored under ``key``, or None if absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: dict) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    async def keys(self) -> list[str]:
        """All stored keys, sorted."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        return None
