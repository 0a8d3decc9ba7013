"""Flush and daily-rollover timers."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, time, timedelta

from usage_tracker.aggregate.store import DailyAggregateStore
from usage_tracker.clock import Clock
from usage_tracker.exceptions import StorageError
from usage_tracker.tracking.models import AlarmSpec
from usage_tracker.tracking.session import TrackingSession

logger = logging.getLogger(__name__)

TICK_ALARM = "tick"
ROLLOVER_ALARM = "dailyReset"
ROLLOVER_PERIOD = timedelta(hours=24)


def next_local_midnight(now: datetime) -> datetime:
    """The first midnight strictly after ``now``, keeping its tzinfo."""
    return datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)


class Scheduler:
    """Drives the 1-second flush and the once-a-day rollover.

    Timers can be driven by the host (``alarm_specs`` + ``handle_alarm``)
    or in-process with ``start``/``stop``.

    Args:
        session: Session flushed on every tick.
        store: Store rolled over at local midnight.
        clock: Wall-clock source; defaults to the system clock.
        tick_interval: Seconds between flushes.
    """

    def __init__(
        self,
        session: TrackingSession,
        store: DailyAggregateStore,
        clock: Clock | None = None,
        tick_interval: float = 1.0,
    ):
        self.session = session
        self.store = store
        self._clock = clock or Clock()
        self.tick_interval = tick_interval
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def alarm_specs(self) -> list[AlarmSpec]:
        """Timers the host should register to drive ``handle_alarm``."""
        now = self._clock.now()
        return [
            AlarmSpec(
                name=TICK_ALARM,
                first_fire=now + timedelta(seconds=self.tick_interval),
                period=timedelta(seconds=self.tick_interval),
            ),
            AlarmSpec(
                name=ROLLOVER_ALARM,
                first_fire=next_local_midnight(now),
                period=ROLLOVER_PERIOD,
            ),
        ]

    async def handle_alarm(self, name: str) -> bool:
        """Dispatch a host alarm firing. Returns False for unknown alarms."""
        if name == TICK_ALARM:
            await self.flush()
        elif name == ROLLOVER_ALARM:
            await self.rollover()
        else:
            logger.debug("Ignoring unknown alarm %r", name)
            return False
        return True

    async def flush(self) -> int:
        """Flush the active session's elapsed time; no-op when idle."""
        return await self.session.tick()

    async def rollover(self) -> str:
        """Flush the active session, then roll the store over.

        The flush lands on whichever day is current when it is merged, so
        a timer firing after midnight attributes that last tick to the new day.
        """
        await self.session.tick()
        key = await self.store.seal_and_rollover()
        logger.info("Daily rollover complete, current record is %s", key)
        return key

    # ---- In-process timers ----

    def start(self) -> None:
        """Start both timers as tasks on the running event loop."""
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._run_flush_loop(), name="usage-tracker-flush"),
            asyncio.create_task(self._run_rollover_loop(), name="usage-tracker-rollover"),
        ]
        logger.info("Scheduler started (tick every %ss)", self.tick_interval)

    async def stop(self) -> None:
        """Cancel both timers and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info("Scheduler stopped")

    async def _run_flush_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            try:
                await self.flush()
            except StorageError as e:
                logger.error("Flush failed, elapsed time dropped: %s", e)

    async def _run_rollover_loop(self) -> None:
        while True:
            now = self._clock.now()
            delay = (next_local_midnight(now) - now).total_seconds()
            await asyncio.sleep(max(delay, self.tick_interval))
            try:
                await self.rollover()
            except StorageError as e:
                logger.error("Daily rollover failed: %s", e)
