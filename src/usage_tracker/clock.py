"""Wall-clock source shared by the session, store and scheduler."""

from __future__ import annotations

import time
from datetime import date, datetime


class Clock:
    """System wall clock in the local timezone.

    Tests substitute a subclass with settable time.
    """

    def now_ms(self) -> int:
        """Current instant as epoch milliseconds."""
        return int(time.time() * 1000)

    def now(self) -> datetime:
        """Current local datetime (naive)."""
        return datetime.now()

    def today(self) -> date:
        """Current local calendar date."""
        return date.today()
