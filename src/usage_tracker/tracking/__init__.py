"""Session tracking, timers and host event routing."""

from usage_tracker.tracking.models import ActiveSession, AlarmSpec, Tab, TabChange
from usage_tracker.tracking.router import EventRouter, TabLookup
from usage_tracker.tracking.scheduler import (
    ROLLOVER_ALARM,
    TICK_ALARM,
    Scheduler,
    next_local_midnight,
)
from usage_tracker.tracking.session import SessionState, TrackingSession

__all__ = [
    "ActiveSession",
    "AlarmSpec",
    "Tab",
    "TabChange",
    "EventRouter",
    "TabLookup",
    "ROLLOVER_ALARM",
    "TICK_ALARM",
    "Scheduler",
    "next_local_midnight",
    "SessionState",
    "TrackingSession",
]
