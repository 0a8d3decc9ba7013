"""Per-day usage aggregates and their merge-update store."""

from usage_tracker.aggregate.models import DailyRecord, LastActive, RecordDelta
from usage_tracker.aggregate.store import DailyAggregateStore, day_key

__all__ = [
    "DailyRecord",
    "LastActive",
    "RecordDelta",
    "DailyAggregateStore",
    "day_key",
]
