"""In-process key-value backend."""

from __future__ import annotations

import asyncio
import copy

from usage_tracker.storage.base import BaseKeyValueStore


class MemoryKeyValueStore(BaseKeyValueStore):
    """Dict-backed store for tests and ephemeral sessions.

    Every call yields to the event loop once so callers see the same
    suspension points they would with a real asynchronous backend.
    """

    def __init__(self, initial: dict[str, dict] | None = None):
        self._data: dict[str, dict] = copy.deepcopy(initial or {})

    async def get(self, key: str) -> dict | None:
        await asyncio.sleep(0)
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: dict) -> None:
        await asyncio.sleep(0)
        self._data[key] = copy.deepcopy(value)

    async def keys(self) -> list[str]:
        return sorted(self._data)

    def snapshot(self) -> dict[str, dict]:
        """Synchronous copy of everything stored (memory-specific)."""
        return copy.deepcopy(self._data)
