"""Daily aggregate store with accumulate-not-overwrite merge updates."""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from usage_tracker.aggregate.models import DailyRecord, RecordDelta
from usage_tracker.clock import Clock
from usage_tracker.exceptions import StorageReadError
from usage_tracker.storage.base import BaseKeyValueStore

logger = logging.getLogger(__name__)


def day_key(day: date | str) -> str:
    """Persistence key for a calendar day (``YYYY-MM-DD``)."""
    return day if isinstance(day, str) else day.isoformat()


class DailyAggregateStore:
    """Owns the persisted per-day record.

    Exactly one key is current at a time. Every merge is a read-modify-write
    against the current key, serialized through one asyncio.Lock so that two
    merges from this process never interleave between their read and write.
    Sealed (past) keys are never written again.

    Args:
        backend: Key-value persistence service.
        clock: Source of the local date; defaults to the system clock.
    """

    def __init__(self, backend: BaseKeyValueStore, clock: Clock | None = None):
        self.backend = backend
        self._clock = clock or Clock()
        self._lock = asyncio.Lock()
        self._current_key: str | None = None
        self._sealed: set[str] = set()

    @property
    def current_key(self) -> str | None:
        """Key of the record currently accepting merges (None before first access)."""
        return self._current_key

    @property
    def sealed_keys(self) -> frozenset[str]:
        return frozenset(self._sealed)

    async def get_or_init_today(self) -> DailyRecord:
        """Return today's record, creating and persisting a zeroed one if absent."""
        async with self._lock:
            return await self._load_current()

    async def merge_update(self, delta: RecordDelta) -> DailyRecord:
        """Accumulate ``delta`` onto the current record and write it back.

        The record is re-read from the backend on every call. Returns the
        merged record as written.
        """
        async with self._lock:
            current = await self._load_current()
            if delta.is_empty:
                return current
            merged = current.merged(delta)
            problems = merged.violations()
            if problems:
                logger.warning("Record %s inconsistent after merge: %s", merged.date, problems)
            await self.backend.set(merged.date, merged.to_dict())
            logger.debug("Merged %s into %s", delta, merged.date)
            return merged

    async def seal_and_rollover(self) -> str:
        """Seal the current record and start today's.

        Returns the key now current. A call made before the local date has
        advanced leaves the current key in place.
        """
        async with self._lock:
            today = day_key(self._clock.today())
            if self._current_key == today:
                logger.info("Rollover requested but %s is still current", today)
                return today
            self._advance(today)
            await self._load_current()
            return today

    async def get_record(self, day: date | str) -> DailyRecord | None:
        """Read the record for any day without initializing it."""
        key = day_key(day)
        raw = await self.backend.get(key)
        return DailyRecord.from_dict(raw, date=key) if raw is not None else None

    async def list_days(self) -> list[str]:
        """Keys of every stored daily record, oldest first."""
        return await self.backend.keys()

    async def _load_current(self) -> DailyRecord:
        key = self._resolve_key()
        raw = await self.backend.get(key)
        if raw is not None:
            try:
                return DailyRecord.from_dict(raw, date=key)
            except (TypeError, ValueError, AttributeError) as e:
                raise StorageReadError(f"Malformed record stored under {key}: {e}") from e
        record = DailyRecord(date=key)
        await self.backend.set(key, record.to_dict())
        logger.info("Initialized daily record %s", key)
        return record

    def _resolve_key(self) -> str:
        today = day_key(self._clock.today())
        if self._current_key is None:
            self._current_key = today
        elif today > self._current_key:
            logger.info("Date changed since last rollover, rolling over implicitly")
            self._advance(today)
        return self._current_key

    def _advance(self, today: str) -> None:
        if self._current_key is not None:
            self._sealed.add(self._current_key)
            logger.info("Sealed daily record %s", self._current_key)
        self._current_key = today
