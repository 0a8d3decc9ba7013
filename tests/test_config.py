"""Tests for tracker configuration."""

from pathlib import Path

import pytest

from usage_tracker.config import DEFAULT_TICK_SECONDS, TrackerConfig
from usage_tracker.exceptions import ConfigError


def test_defaults():
    config = TrackerConfig(backend="memory")
    assert config.tick_interval == DEFAULT_TICK_SECONDS
    assert isinstance(config.db_path, Path)


def test_unknown_backend():
    with pytest.raises(ConfigError, match="Unknown storage backend"):
        TrackerConfig(backend="redis")


def test_http_backend_requires_url():
    with pytest.raises(ConfigError, match="remote URL is required"):
        TrackerConfig(backend="http")


def test_tick_must_be_positive():
    with pytest.raises(ConfigError, match="must be positive"):
        TrackerConfig(backend="memory", tick_interval=0)


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("USAGE_TRACKER_BACKEND", "sqlite")
    monkeypatch.setenv("USAGE_TRACKER_DB", str(tmp_path / "usage.db"))
    monkeypatch.setenv("USAGE_TRACKER_TICK_SECONDS", "2.5")
    monkeypatch.delenv("USAGE_TRACKER_URL", raising=False)
    config = TrackerConfig.from_env()
    assert config.backend == "sqlite"
    assert config.db_path == tmp_path / "usage.db"
    assert config.tick_interval == 2.5
    assert config.remote_url is None


def test_from_env_bad_tick(monkeypatch):
    monkeypatch.setenv("USAGE_TRACKER_BACKEND", "memory")
    monkeypatch.setenv("USAGE_TRACKER_TICK_SECONDS", "soon")
    with pytest.raises(ConfigError, match="must be a number"):
        TrackerConfig.from_env()
