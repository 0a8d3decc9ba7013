"""Host-facing value types for the tracking module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass
class Tab:
    """A browser tab as reported by the host."""

    id: int
    url: str | None = None
    status: str | None = None  # "loading" | "complete"


@dataclass
class TabChange:
    """The changed fields of a tab-updated notification."""

    url: str | None = None
    status: str | None = None

    @property
    def is_navigation(self) -> bool:
        return bool(self.url) or self.status == "complete"


@dataclass(frozen=True)
class ActiveSession:
    """Snapshot of the session currently being attributed."""

    tab_id: int
    site: str
    started_at: int  # epoch ms


@dataclass(frozen=True)
class AlarmSpec:
    """A recurring timer the host should register."""

    name: str
    first_fire: datetime
    period: timedelta
