"""Composition root wiring storage, aggregate store, session, scheduler and router."""

from __future__ import annotations

import logging

from usage_tracker.aggregate.models import DailyRecord
from usage_tracker.aggregate.store import DailyAggregateStore
from usage_tracker.clock import Clock
from usage_tracker.config import TrackerConfig
from usage_tracker.storage.base import BaseKeyValueStore
from usage_tracker.storage.memory import MemoryKeyValueStore
from usage_tracker.storage.sqlite import SQLiteKeyValueStore
from usage_tracker.tracking.router import EventRouter, TabLookup
from usage_tracker.tracking.scheduler import Scheduler
from usage_tracker.tracking.session import TrackingSession

logger = logging.getLogger(__name__)


def build_backend(config: TrackerConfig) -> BaseKeyValueStore:
    """Instantiate the persistence backend named by ``config.backend``."""
    if config.backend == "memory":
        return MemoryKeyValueStore()
    if config.backend == "http":
        from usage_tracker.storage.remote import HttpKeyValueStore
        return HttpKeyValueStore(config.remote_url)
    return SQLiteKeyValueStore(config.db_path)


class UsageTracker:
    """One tracker per browser profile.

    The host delivers its notifications to ``router``; with ``start()`` the
    flush and rollover timers run in-process, otherwise the host registers
    ``scheduler.alarm_specs()`` and forwards firings to
    ``router.on_alarm_fired``.

    Args:
        backend: Persistence backend; built from ``config`` when omitted.
        config: Tracker settings; read from the environment when omitted.
        clock: Wall-clock source shared by every component.
        tab_lookup: Async resolver for tab activation events.
    """

    def __init__(
        self,
        backend: BaseKeyValueStore | None = None,
        config: TrackerConfig | None = None,
        clock: Clock | None = None,
        tab_lookup: TabLookup | None = None,
    ):
        self.config = config or TrackerConfig.from_env()
        self.clock = clock or Clock()
        self.backend = backend or build_backend(self.config)
        self.store = DailyAggregateStore(self.backend, clock=self.clock)
        self.session = TrackingSession(self.store, clock=self.clock)
        self.scheduler = Scheduler(
            self.session,
            self.store,
            clock=self.clock,
            tick_interval=self.config.tick_interval,
        )
        self.router = EventRouter(
            self.session,
            self.store,
            tab_lookup=tab_lookup,
            scheduler=self.scheduler,
        )

    async def start(self, run_timers: bool = True) -> DailyRecord:
        """Ensure today's record exists and optionally start the timers."""
        record = await self.store.get_or_init_today()
        if run_timers:
            self.scheduler.start()
        logger.info("Usage tracker started on %s", record.date)
        return record

    async def stop(self) -> None:
        """Stop timers, flush the active session and close the backend."""
        await self.scheduler.stop()
        try:
            await self.session.end()
        finally:
            await self.backend.close()
        logger.info("Usage tracker stopped")

    async def today(self) -> DailyRecord:
        """Today's aggregate, as a display surface would read it."""
        return await self.store.get_or_init_today()

    async def __aenter__(self) -> UsageTracker:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
