"""Async client for the Nightly Digest exposures API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from digest_stats.config.settings import Settings
from digest_stats.models.digest import NightlyDigestResponse
from digest_stats.utils.log_sanitizer import sanitize_log_extra

logger = logging.getLogger(__name__)


class NightlyDigestClient:
    """Fetches exposure digests for `[dayObsStart, dayObsEnd)` windows.

    Errors are not retried or recovered here: transport failures and non-2xx
    responses surface as `httpx.HTTPError` so the caller decides whether a
    failed window is fatal.
    """

    def __init__(
        self,
        *,
        endpoint: str,
        token: Optional[str] = None,
        instrument: str = "LSSTCam",
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._endpoint = endpoint
        self._token = token
        self._instrument = instrument
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "NightlyDigestClient":
        return cls(
            endpoint=settings.NIGHTLY_DIGEST_API_ENDPOINT,
            token=settings.BEARER_TOKEN,
            instrument=settings.INSTRUMENT,
            timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "NightlyDigestClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_digest(self, start_date: str, end_date: str) -> NightlyDigestResponse:
        """GET the digest for one window. Dates are `YYYYMMDD` strings."""
        client = await self._ensure_client()
        params: dict[str, Any] = {
            "instrument": self._instrument,
            "dayObsStart": start_date,
            "dayObsEnd": end_date,
        }
        logger.debug(
            "Fetching nightly digest",
            extra=sanitize_log_extra(endpoint=self._endpoint, params=params),
        )

        response = await client.get(self._endpoint, params=params)
        response.raise_for_status()
        return response.json()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client:
            return self._client

        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=self._timeout_seconds,
            transport=self._transport,
        )
        return self._client
