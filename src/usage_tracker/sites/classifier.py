"""Map page URLs onto tracked-site display identities."""

from __future__ import annotations

from urllib.parse import urlparse

# Domain fragment -> display identity. Checked in order; first hit wins.
TRACKED_SITES: dict[str, str] = {
    "chatgpt.com": "ChatGPT",
    "claude.ai": "Claude",
    "gemini.google.com": "Gemini",
    "bard.google.com": "Bard",
}


def classify_url(url: str | None) -> str | None:
    """Return the tracked-site identity for a URL, or None.

    Matching is a substring test against the hostname exactly as it appears
    in the URL (no case folding). Malformed input yields None, never an error.
    """
    host = _hostname(url)
    if not host:
        return None
    for domain, site in TRACKED_SITES.items():
        if domain in host:
            return site
    return None


def is_tracked_site(site: str | None) -> bool:
    """True if ``site`` is one of the display identities in TRACKED_SITES."""
    return site in TRACKED_SITES.values()


def _hostname(url: str | None) -> str:
    if not isinstance(url, str) or not url:
        return ""
    try:
        netloc = urlparse(url).netloc
    except ValueError:
        return ""
    # urlparse().hostname lowercases; keep the host as provided.
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        return host.partition("]")[0].lstrip("[")
    return host.partition(":")[0]
