"""Display helpers for accumulated durations."""

from __future__ import annotations


def format_duration(ms: int) -> str:
    """Format milliseconds as ``HH:MM:SS``; hours are not capped at 24."""
    seconds = max(0, int(ms)) // 1000
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
