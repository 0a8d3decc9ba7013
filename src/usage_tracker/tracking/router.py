"""Route host tab and alarm notifications onto session transitions."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from usage_tracker.aggregate.models import RecordDelta
from usage_tracker.aggregate.store import DailyAggregateStore
from usage_tracker.exceptions import StorageError, TabLookupError
from usage_tracker.sites.classifier import classify_url
from usage_tracker.tracking.models import Tab, TabChange
from usage_tracker.tracking.scheduler import Scheduler
from usage_tracker.tracking.session import TrackingSession

logger = logging.getLogger(__name__)

# Resolves a tab ID to its current state; raises TabLookupError or returns None on failure.
TabLookup = Callable[[int], Awaitable[Tab | None]]


class EventRouter:
    """Host notification handlers.

    Handlers never raise to the host: storage failures are logged and the
    affected delta is dropped.

    Args:
        session: The tracking session to transition.
        store: Aggregate store for tab-open/close counters.
        tab_lookup: Async resolver used on tab activation.
        scheduler: Receives alarm firings; optional when timers run in-process.
        classifier: URL -> tracked-site identity (or None).
    """

    def __init__(
        self,
        session: TrackingSession,
        store: DailyAggregateStore,
        tab_lookup: TabLookup | None = None,
        scheduler: Scheduler | None = None,
        classifier: Callable[[str | None], str | None] = classify_url,
    ):
        self.session = session
        self.store = store
        self.tab_lookup = tab_lookup
        self.scheduler = scheduler
        self.classify = classifier

    async def on_tab_created(self, tab: Tab | None = None) -> None:
        """Count a newly opened tab."""
        try:
            await self.store.merge_update(RecordDelta(tabs_opened=1))
        except StorageError as e:
            logger.error("Failed to count opened tab: %s", e)

    async def on_tab_removed(self, tab_id: int) -> None:
        """End the session if it belonged to this tab, then count the close."""
        if self.session.active_tab_id == tab_id:
            logger.info("Tracked tab %s closed", tab_id)
            try:
                await self.session.end()
            except StorageError as e:
                logger.error("Failed to flush closed tab %s: %s", tab_id, e)
        try:
            await self.store.merge_update(RecordDelta(tabs_closed=1))
        except StorageError as e:
            logger.error("Failed to record closed tab %s: %s", tab_id, e)

    async def on_tab_updated(self, tab_id: int, change: TabChange, tab: Tab) -> None:
        """Begin or end tracking when a tab navigates or finishes loading."""
        if not change.is_navigation:
            return
        if not tab.url:
            logger.warning("Tab %s updated without a URL, ignoring", tab_id)
            return
        site = self.classify(tab.url)
        try:
            if site:
                await self.session.begin(tab_id, site)
            elif self.session.active_tab_id == tab_id:
                logger.info("Tab %s navigated away from %s", tab_id, self.session.active_site)
                await self.session.end()
        except StorageError as e:
            logger.error("Failed to handle update of tab %s: %s", tab_id, e)

    async def on_tab_activated(self, tab_id: int) -> None:
        """Follow focus: begin on a tracked tab, otherwise end any session."""
        tab = await self._lookup(tab_id)
        site = self.classify(tab.url) if tab else None
        try:
            if site:
                await self.session.begin(tab_id, site)
            else:
                await self.session.end()
        except StorageError as e:
            logger.error("Failed to handle activation of tab %s: %s", tab_id, e)

    async def on_alarm_fired(self, name: str) -> None:
        """Forward a host alarm to the scheduler."""
        if self.scheduler is None:
            logger.debug("No scheduler attached, ignoring alarm %r", name)
            return
        try:
            await self.scheduler.handle_alarm(name)
        except StorageError as e:
            logger.error("Alarm %r failed: %s", name, e)

    async def _lookup(self, tab_id: int) -> Tab | None:
        if self.tab_lookup is None:
            logger.warning("No tab lookup configured, treating tab %s as unresolvable", tab_id)
            return None
        try:
            tab = await self.tab_lookup(tab_id)
        except TabLookupError as e:
            logger.warning("Could not resolve tab %s: %s", tab_id, e)
            return None
        if tab is None or not tab.url:
            logger.warning("Could not get URL for tab %s", tab_id)
            return None
        return tab
