"""Tests for exception hierarchy."""

from usage_tracker.exceptions import (
    ConfigError,
    InvalidDeltaError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    TabLookupError,
    UsageTrackerError,
)


def test_all_inherit_from_base():
    for exc_class in [
        StorageError, StorageReadError, StorageWriteError,
        InvalidDeltaError,
        TabLookupError,
        ConfigError,
    ]:
        assert issubclass(exc_class, UsageTrackerError)


def test_storage_hierarchy():
    assert issubclass(StorageReadError, StorageError)
    assert issubclass(StorageWriteError, StorageError)


def test_invalid_delta_is_value_error():
    assert issubclass(InvalidDeltaError, ValueError)


def test_exception_message():
    e = StorageWriteError("disk full")
    assert str(e) == "disk full"
