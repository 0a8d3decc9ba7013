"""Tracked-site classification."""

from usage_tracker.sites.classifier import TRACKED_SITES, classify_url, is_tracked_site

__all__ = [
    "TRACKED_SITES",
    "classify_url",
    "is_tracked_site",
]
