"""Request parameter resolution and dispatch for the digest stats endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from digest_stats.clients.cache_client import CacheClient
from digest_stats.clients.digest_client import NightlyDigestClient
from digest_stats.config.settings import Settings, resolve_first
from digest_stats.models.digest import CleanedSummary
from digest_stats.services.reaccumulator import reaccumulate
from digest_stats.services.window_processor import process_window
from digest_stats.utils.dates import parse_date_string, today
from digest_stats.utils.log_sanitizer import sanitize_log_extra

logger = logging.getLogger(__name__)

DEFAULT_MODE = "current"
OVERRIDE_RUN_DATE_PARAM = "overrideRunDate"


class InvalidStatsRequest(ValueError):
    """Raised when request parameters cannot be resolved into a valid window."""


@dataclass(frozen=True, slots=True)
class StatsRequest:
    mode: str
    start_date: str
    end_date: str
    override_run_date: bool


def resolve_stats_request(
    settings: Settings,
    query: Mapping[str, Any] | None,
    *,
    now: Optional[datetime] = None,
) -> StatsRequest:
    """Resolve mode, window and override flag: forced config > query > default."""
    params = query or {}

    mode = resolve_first(settings.MODE, params.get("mode"), default=DEFAULT_MODE)
    start_date = resolve_first(settings.DAY_OBS_START, params.get("startDate"), default=today(-1, now=now))
    end_date = resolve_first(settings.DAY_OBS_END, params.get("endDate"), default=today(0, now=now))
    override_run_date = resolve_first(
        settings.OVERRIDE_RUN_DATE,
        True if OVERRIDE_RUN_DATE_PARAM in params else None,
        default=False,
    )

    for label, value in (("startDate", start_date), ("endDate", end_date)):
        try:
            parse_date_string(value)
        except ValueError as exc:
            raise InvalidStatsRequest(f"Invalid {label}: {value!r}") from exc

    return StatsRequest(
        mode=str(mode),
        start_date=str(start_date).strip(),
        end_date=str(end_date).strip(),
        override_run_date=bool(override_run_date),
    )


def resolve_reaccumulation_start(settings: Settings, request: StatsRequest) -> datetime:
    """The span starts at the survey start date, or the request start when unset."""
    survey_start = resolve_first(settings.SURVEY_START_DATE, request.start_date)
    try:
        return parse_date_string(survey_start)
    except ValueError as exc:
        raise InvalidStatsRequest(f"Invalid SURVEY_START_DATE: {survey_start!r}") from exc


async def run_digest_stats(
    settings: Settings,
    query: Mapping[str, Any] | None = None,
    *,
    digest_client_factory: Optional[Callable[[], Any]] = None,
    cache_client_factory: Optional[Callable[[], Any]] = None,
    now: Optional[datetime] = None,
) -> CleanedSummary:
    """Run the current-status path, or the reaccumulation path when overridden."""
    request = resolve_stats_request(settings, query, now=now)
    digest_factory = digest_client_factory or (lambda: NightlyDigestClient.from_settings(settings))
    cache_factory = cache_client_factory or (lambda: CacheClient.from_settings(settings))

    logger.info(
        "Digest stats run started",
        extra=sanitize_log_extra(
            mode=request.mode,
            start_date=request.start_date,
            end_date=request.end_date,
            override_run_date=request.override_run_date,
        ),
    )

    async with digest_factory() as digest_client, cache_factory() as cache_client:
        if not request.override_run_date:
            return await process_window(
                settings,
                request.start_date,
                request.end_date,
                request.mode,
                digest_client=digest_client,
                cache_client=cache_client,
            )

        summary = await reaccumulate(
            settings,
            resolve_reaccumulation_start(settings, request),
            parse_date_string(request.end_date),
            settings.REACCUMULATE_WINDOW_DAYS,
            digest_client=digest_client,
            cache_client=cache_client,
        )
        await cache_client.cache_result(
            settings.NIGHTLY_DIGEST_API_ENDPOINT,
            request.mode,
            summary.to_dict(),
        )
        return summary
