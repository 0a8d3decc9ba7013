"""SQLite key-value backend, durable across process restarts."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import threading
from pathlib import Path

from usage_tracker.exceptions import StorageReadError, StorageWriteError
from usage_tracker.storage.base import BaseKeyValueStore

logger = logging.getLogger(__name__)

TABLE_NAME = "kv"


class SQLiteKeyValueStore(BaseKeyValueStore):
    """One row per key with a JSON-encoded value.

    The blocking sqlite3 calls run in a worker thread via asyncio.to_thread.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._io_lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {TABLE_NAME} ("
                "key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageWriteError(f"Failed to open {self.db_path}: {e}") from e

    # ---- Sync methods ----

    def get_sync(self, key: str) -> dict | None:
        try:
            with self._io_lock:
                row = self._conn.execute(
                    f"SELECT value FROM {TABLE_NAME} WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageReadError(f"Failed to read {key}: {e}") from e
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Corrupt value stored under {key}: {e}") from e

    def set_sync(self, key: str, value: dict) -> None:
        try:
            payload = json.dumps(value, sort_keys=True)
        except (TypeError, ValueError) as e:
            raise StorageWriteError(f"Value for {key} is not JSON-serializable: {e}") from e
        try:
            with self._io_lock:
                self._conn.execute(
                    f"INSERT INTO {TABLE_NAME} (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, payload),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            raise StorageWriteError(f"Failed to write {key}: {e}") from e

    def keys_sync(self) -> list[str]:
        try:
            with self._io_lock:
                rows = self._conn.execute(
                    f"SELECT key FROM {TABLE_NAME} ORDER BY key"
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageReadError(f"Failed to list keys: {e}") from e
        return [row[0] for row in rows]

    # ---- Async interface (asyncio.to_thread) ----

    async def get(self, key: str) -> dict | None:
        return await asyncio.to_thread(self.get_sync, key)

    async def set(self, key: str, value: dict) -> None:
        await asyncio.to_thread(self.set_sync, key, value)

    async def keys(self) -> list[str]:
        return await asyncio.to_thread(self.keys_sync)

    async def close(self) -> None:
        """Close the underlying connection."""
        with self._io_lock:
            self._conn.close()
        logger.debug("Closed SQLite store at %s", self.db_path)
