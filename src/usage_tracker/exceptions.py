"""Unified exception hierarchy for usage-tracker."""


class UsageTrackerError(Exception):
    """Base exception for all usage-tracker errors."""


# Storage
class StorageError(UsageTrackerError):
    """Base exception for key-value persistence operations."""


class StorageReadError(StorageError):
    """Failed to read a value from the persistence backend."""


class StorageWriteError(StorageError):
    """Failed to write a value to the persistence backend."""


# Aggregate
class InvalidDeltaError(UsageTrackerError, ValueError):
    """A record delta carried a negative or malformed value."""


# Host
class TabLookupError(UsageTrackerError):
    """The host could not resolve a tab by ID."""


# Config
class ConfigError(UsageTrackerError):
    """Invalid tracker configuration."""
