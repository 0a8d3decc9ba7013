"""Remote key-value backend over HTTP."""

from __future__ import annotations

import logging
from urllib.parse import quote

from usage_tracker.exceptions import StorageReadError, StorageWriteError
from usage_tracker.storage.base import BaseKeyValueStore

logger = logging.getLogger(__name__)


class HttpKeyValueStore(BaseKeyValueStore):
    """Key-value store served at ``{base_url}/{key}``.

    ``GET`` returns the JSON value (404 when absent), ``PUT`` replaces it,
    and ``GET {base_url}`` returns the JSON list of keys.

    Args:
        base_url: Service root, e.g. "http://localhost:8700/kv".
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(self, base_url: str, timeout: float = 5.0, transport=None):
        try:
            import httpx
        except ImportError:
            raise ImportError(
                "httpx is required for HttpKeyValueStore. "
                "Install with: pip install ai-usage-tracker[remote]"
            )
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"User-Agent": "UsageTracker/1.0"},
            transport=transport,
        )

    @property
    def client(self):
        """Access the underlying httpx client."""
        return self._client

    async def get(self, key: str) -> dict | None:
        try:
            response = await self._client.get(f"/{quote(key)}")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except Exception as e:
            raise StorageReadError(f"Remote read of {key} failed: {e}") from e

    async def set(self, key: str, value: dict) -> None:
        try:
            response = await self._client.put(f"/{quote(key)}", json=value)
            response.raise_for_status()
        except Exception as e:
            raise StorageWriteError(f"Remote write of {key} failed: {e}") from e

    async def keys(self) -> list[str]:
        try:
            response = await self._client.get("")
            response.raise_for_status()
            return sorted(response.json())
        except Exception as e:
            raise StorageReadError(f"Remote key listing failed: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client connection."""
        await self._client.aclose()
