"""Tracking session state machine: which tab/site is active and since when."""

from __future__ import annotations

import logging
from enum import Enum

from usage_tracker.aggregate.models import LastActive, RecordDelta
from usage_tracker.aggregate.store import DailyAggregateStore
from usage_tracker.clock import Clock
from usage_tracker.formatting import format_duration
from usage_tracker.sites.classifier import is_tracked_site
from usage_tracker.tracking.models import ActiveSession

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class TrackingSession:
    """Single process-lifetime session, mutated only through begin/end/tick.

    Each transition updates its fields before awaiting any merge, so a
    transition that is still writing is never observed half-done and the
    same span of time is never flushed twice.

    Args:
        store: Aggregate store receiving elapsed-time deltas.
        clock: Wall-clock source; defaults to the system clock.
    """

    def __init__(self, store: DailyAggregateStore, clock: Clock | None = None):
        self.store = store
        self._clock = clock or Clock()
        self.active_tab_id: int | None = None
        self.active_site: str | None = None
        self.started_at: int | None = None
        self._flushed_at: int | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self.active_tab_id is not None else SessionState.IDLE

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def current(self) -> ActiveSession | None:
        if not self.is_active:
            return None
        return ActiveSession(self.active_tab_id, self.active_site, self.started_at)

    async def begin(self, tab_id: int, site: str) -> bool:
        """Start attributing time to ``site`` in ``tab_id``.

        Re-entering the active tab/site pair is a no-op. Any other active
        session is ended first, including the same tab on a different site.
        Returns True if a new session started.
        """
        if self.active_tab_id == tab_id and self.active_site == site:
            return False
        closed = self._close() if self.is_active else None

        now = self._clock.now_ms()
        self.active_tab_id = tab_id
        self.active_site = site
        self.started_at = now
        self._flushed_at = now
        logger.info("Started tracking %s in tab %s", site, tab_id)

        if closed:
            await self._flush_closed(*closed)
        await self.store.merge_update(
            RecordDelta(
                last_active=LastActive(site=site, timestamp=now),
                usage_by_site={site: 0} if is_tracked_site(site) else {},
            )
        )
        return True

    async def end(self) -> int:
        """Flush the remaining elapsed time and return to idle.

        Returns the milliseconds attributed by this call.
        """
        if not self.is_active:
            return 0
        elapsed, site = self._close()
        await self._flush_closed(elapsed, site)
        return elapsed

    async def tick(self) -> int:
        """Flush time elapsed since the last flush without leaving the session."""
        if not self.is_active:
            return 0
        elapsed = self._take_elapsed()
        if elapsed:
            await self.store.merge_update(_attribution(elapsed, self.active_site))
        return elapsed

    def _take_elapsed(self) -> int:
        now = self._clock.now_ms()
        # Clamp: a wall clock stepped backwards must not produce a negative delta.
        elapsed = max(0, now - self._flushed_at)
        self._flushed_at = max(now, self._flushed_at)
        return elapsed

    def _close(self) -> tuple[int, str | None]:
        elapsed = self._take_elapsed()
        site = self.active_site
        self._reset()
        return elapsed, site

    async def _flush_closed(self, elapsed: int, site: str | None) -> None:
        logger.info(
            "Stopped tracking %s. Time spent since last flush: %s", site, format_duration(elapsed)
        )
        if elapsed:
            await self.store.merge_update(_attribution(elapsed, site))

    def _reset(self) -> None:
        self.active_tab_id = None
        self.active_site = None
        self.started_at = None
        self._flushed_at = None


def _attribution(elapsed: int, site: str | None) -> RecordDelta:
    if not is_tracked_site(site):
        return RecordDelta(total_time=elapsed)
    return RecordDelta(total_time=elapsed, ai_time=elapsed, usage_by_site={site: elapsed})
