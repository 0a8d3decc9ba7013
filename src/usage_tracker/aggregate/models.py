"""Data models for the daily aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field

from usage_tracker.exceptions import InvalidDeltaError


@dataclass(frozen=True)
class LastActive:
    """Most recent tracked site that began a session."""

    site: str
    timestamp: int  # epoch ms

    def to_dict(self) -> dict:
        return {"website": self.site, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, raw: dict | None) -> LastActive | None:
        if not raw or raw.get("website") is None:
            return None
        return cls(site=raw["website"], timestamp=int(raw.get("timestamp") or 0))


@dataclass(frozen=True)
class RecordDelta:
    """A partial update to a DailyRecord.

    Scalar fields and ``usage_by_site`` values are added to the stored record;
    ``last_active`` replaces the stored value when set.
    """

    total_time: int = 0
    ai_time: int = 0
    usage_by_site: dict[str, int] = field(default_factory=dict)
    last_active: LastActive | None = None
    tabs_opened: int = 0
    tabs_closed: int = 0

    def __post_init__(self) -> None:
        for name in ("total_time", "ai_time", "tabs_opened", "tabs_closed"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidDeltaError(f"{name} must be a non-negative int, got {value!r}")
        for site, value in self.usage_by_site.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidDeltaError(
                    f"usage_by_site[{site!r}] must be a non-negative int, got {value!r}"
                )

    @property
    def is_empty(self) -> bool:
        return (
            not (self.total_time or self.ai_time or self.tabs_opened or self.tabs_closed)
            and not any(self.usage_by_site.values())
            and self.last_active is None
        )


@dataclass
class DailyRecord:
    """Accumulated usage for one local calendar day.

    Times are integer milliseconds.
    """

    date: str  # YYYY-MM-DD
    total_time: int = 0
    ai_time: int = 0
    usage_by_site: dict[str, int] = field(default_factory=dict)
    last_active: LastActive | None = None
    tabs_opened: int = 0
    tabs_closed: int = 0

    def merged(self, delta: RecordDelta) -> DailyRecord:
        """Return a new record with ``delta`` accumulated onto this one."""
        usage = dict(self.usage_by_site)
        for site, ms in delta.usage_by_site.items():
            usage[site] = usage.get(site, 0) + ms
        return DailyRecord(
            date=self.date,
            total_time=self.total_time + delta.total_time,
            ai_time=self.ai_time + delta.ai_time,
            usage_by_site=usage,
            last_active=delta.last_active or self.last_active,
            tabs_opened=self.tabs_opened + delta.tabs_opened,
            tabs_closed=self.tabs_closed + delta.tabs_closed,
        )

    def violations(self) -> list[str]:
        """Describe every broken accounting invariant; empty when consistent."""
        problems = []
        if self.ai_time > self.total_time:
            problems.append(f"aiTime {self.ai_time} exceeds totalTime {self.total_time}")
        for site, ms in self.usage_by_site.items():
            if ms > self.ai_time:
                problems.append(f"usageBySite[{site}] {ms} exceeds aiTime {self.ai_time}")
        if sum(self.usage_by_site.values()) > self.ai_time:
            problems.append("usageBySite total exceeds aiTime")
        return problems

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "totalTime": self.total_time,
            "aiTime": self.ai_time,
            "usageBySite": dict(self.usage_by_site),
            "lastActive": self.last_active.to_dict() if self.last_active else None,
            "tabsOpened": self.tabs_opened,
            "tabsClosed": self.tabs_closed,
        }

    @classmethod
    def from_dict(cls, raw: dict, date: str | None = None) -> DailyRecord:
        """Parse a persisted record, filling any missing field with its zero value.

        An explicit ``date`` (the storage key) takes precedence over the stored one.
        """
        return cls(
            date=date or raw.get("date") or "",
            total_time=int(raw.get("totalTime") or 0),
            ai_time=int(raw.get("aiTime") or 0),
            usage_by_site={
                site: int(ms or 0) for site, ms in (raw.get("usageBySite") or {}).items()
            },
            last_active=LastActive.from_dict(raw.get("lastActive")),
            tabs_opened=int(raw.get("tabsOpened") or 0),
            tabs_closed=int(raw.get("tabsClosed") or 0),
        )
