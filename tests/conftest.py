"""Shared fixtures."""

from datetime import date, datetime, timedelta

import pytest

from usage_tracker.clock import Clock


class FakeClock(Clock):
    """Manually advanced clock; ``ms`` and ``day`` move independently."""

    def __init__(self, ms: int = 1_700_000_000_000, day: date = date(2024, 3, 10)):
        self.ms = ms
        self.day = day

    def advance(self, ms: int) -> None:
        self.ms += ms

    def next_day(self) -> None:
        self.day += timedelta(days=1)

    def now_ms(self) -> int:
        return self.ms

    def now(self) -> datetime:
        return datetime.combine(self.day, datetime.min.time()) + timedelta(hours=12)

    def today(self) -> date:
        return self.day


@pytest.fixture
def clock():
    return FakeClock()
