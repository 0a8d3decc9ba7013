"""Attribute browsing time to tracked AI sites and keep per-day aggregates."""

from usage_tracker.aggregate import DailyAggregateStore, DailyRecord, LastActive, RecordDelta
from usage_tracker.config import TrackerConfig
from usage_tracker.sites import TRACKED_SITES, classify_url
from usage_tracker.tracker import UsageTracker
from usage_tracker.tracking import EventRouter, Scheduler, Tab, TabChange, TrackingSession

__all__ = [
    "DailyAggregateStore",
    "DailyRecord",
    "LastActive",
    "RecordDelta",
    "TrackerConfig",
    "TRACKED_SITES",
    "classify_url",
    "UsageTracker",
    "EventRouter",
    "Scheduler",
    "Tab",
    "TabChange",
    "TrackingSession",
]
