"""Environment-driven tracker configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from usage_tracker.exceptions import ConfigError

BACKENDS = ("memory", "sqlite", "http")

DEFAULT_BACKEND = os.environ.get("USAGE_TRACKER_BACKEND", "sqlite")
DEFAULT_DB_PATH = Path(
    os.environ.get("USAGE_TRACKER_DB", Path.home() / ".usage_tracker" / "usage.db")
)
DEFAULT_TICK_SECONDS = 1.0


@dataclass
class TrackerConfig:
    """Settings for building a UsageTracker.

    Args:
        backend: One of "memory", "sqlite" or "http".
        db_path: SQLite file used by the "sqlite" backend.
        remote_url: Base URL of the key-value service used by the "http" backend.
        tick_interval: Seconds between flushes of the active session.
    """

    backend: str = DEFAULT_BACKEND
    db_path: Path = DEFAULT_DB_PATH
    remote_url: str | None = None
    tick_interval: float = DEFAULT_TICK_SECONDS

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigError(
                f"Unknown storage backend {self.backend!r}. "
                f"Expected one of: {', '.join(BACKENDS)}"
            )
        if self.backend == "http" and not self.remote_url:
            raise ConfigError(
                "A remote URL is required for the http backend. "
                "Pass it directly or set USAGE_TRACKER_URL in your environment."
            )
        if self.tick_interval <= 0:
            raise ConfigError(f"Tick interval must be positive, got {self.tick_interval}")
        self.db_path = Path(self.db_path)

    @classmethod
    def from_env(cls) -> TrackerConfig:
        """Build a config from USAGE_TRACKER_* environment variables."""
        raw_tick = os.environ.get("USAGE_TRACKER_TICK_SECONDS")
        tick_interval = DEFAULT_TICK_SECONDS
        if raw_tick:
            try:
                tick_interval = float(raw_tick)
            except ValueError as e:
                raise ConfigError(
                    f"USAGE_TRACKER_TICK_SECONDS must be a number, got {raw_tick!r}"
                ) from e
        return cls(
            backend=os.environ.get("USAGE_TRACKER_BACKEND", DEFAULT_BACKEND),
            db_path=Path(os.environ.get("USAGE_TRACKER_DB", DEFAULT_DB_PATH)),
            remote_url=os.environ.get("USAGE_TRACKER_URL") or None,
            tick_interval=tick_interval,
        )
