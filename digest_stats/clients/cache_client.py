"""Best-effort writer for the Redis cache cloud function."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from digest_stats.config.settings import Settings
from digest_stats.utils.log_sanitizer import sanitize_for_log, sanitize_log_extra

logger = logging.getLogger(__name__)


class CacheClient:
    """POSTs summaries to the cache service; failures are logged, never raised."""

    def __init__(
        self,
        *,
        cache_endpoint: str,
        token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._cache_endpoint = cache_endpoint
        self._token = token
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "CacheClient":
        return cls(
            cache_endpoint=settings.NIGHTLY_DIGEST_CACHE_ENDPOINT,
            token=settings.REDIS_CACHE_TOKEN,
            timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "CacheClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def cache_result(
        self,
        endpoint: str,
        params: Any,
        data: Any,
        start_date: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """Store `data` under `params` (and `start_date` when it is a bucket key).

        Returns the decoded cache response body, `{}` for a non-JSON body, or
        None when the write failed.
        """
        payload: dict[str, Any] = {"endpoint": endpoint, "params": params, "data": data}
        if start_date is not None:
            payload["startDate"] = start_date

        try:
            client = await self._ensure_client()
            response = await client.post(self._cache_endpoint, json=payload)
            response.raise_for_status()
        except Exception as exc:
            logger.warning(
                f"Cache upload error: {sanitize_for_log(str(exc))}",
                extra=sanitize_log_extra(cache_endpoint=self._cache_endpoint, params=params, start_date=start_date),
            )
            return None

        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"body": body}

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client:
            return self._client

        headers: dict[str, str] = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=self._timeout_seconds,
            transport=self._transport,
        )
        return self._client
