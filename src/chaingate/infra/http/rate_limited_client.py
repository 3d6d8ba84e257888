import asyncio
import time
from typing import Any

import httpx

from chaingate.exceptions import ExternalServiceError


class RateLimitedClient:
    """Async HTTP client with simple interval-based rate limiting.

    Transport failures and 5xx/429 responses surface as ExternalServiceError so callers can retry them.
    """

    def __init__(self, rate_per_second: float = 5.0, timeout: float = 30.0) -> None:
        self._min_interval = 1.0 / rate_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(timeout=timeout)

    async def _wait_for_slot(self) -> None:
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        await self._wait_for_slot()
        try:
            resp = await self._client.get(url, params=params)
        except httpx.TransportError as e:
            raise ExternalServiceError(f"GET {url} failed: {e}") from e

        if resp.status_code == 429 or resp.status_code >= 500:
            raise ExternalServiceError(f"GET {url} returned HTTP {resp.status_code}")
        if resp.status_code >= 400:
            raise ExternalServiceError(f"GET {url} rejected with HTTP {resp.status_code}: {resp.text[:200]}")
        return resp.json()

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RateLimitedClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
