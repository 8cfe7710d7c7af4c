"""Fetch, summarize and cache a single day-obs window."""

from __future__ import annotations

import logging
from typing import Any

from digest_stats.config.settings import Settings
from digest_stats.models.digest import CleanedSummary
from digest_stats.services.extractor import extract_current
from digest_stats.utils.dates import is_next_day
from digest_stats.utils.log_sanitizer import sanitize_log_extra

logger = logging.getLogger(__name__)


def bucket_date_for(start_date: str, end_date: str) -> str | None:
    """A window exactly one day wide is cached under its start day."""
    return start_date if is_next_day(start_date, end_date) else None


async def process_window(
    settings: Settings,
    start_date: str,
    end_date: str,
    mode: str,
    *,
    digest_client: Any,
    cache_client: Any,
) -> CleanedSummary:
    """Summarize `[start_date, end_date)` and write the summary to the cache.

    Fetch errors propagate. The cache write is best effort and never changes
    the returned summary.
    """
    data = await digest_client.fetch_digest(start_date, end_date)
    current = extract_current(data)

    summary = CleanedSummary(
        dome_open=current.last_can_see_sky,
        exposure_count=current.exposures_count,
    )

    bucket_date = bucket_date_for(start_date, end_date)
    cached = await cache_client.cache_result(
        settings.NIGHTLY_DIGEST_API_ENDPOINT,
        mode,
        summary.to_dict(),
        bucket_date,
    )
    logger.info(
        "Processed nightly digest window",
        extra=sanitize_log_extra(
            window_start=start_date,
            window_end=end_date,
            mode=mode,
            bucket_date=bucket_date,
            cached=cached is not None,
            exposure_count=summary.exposure_count,
        ),
    )
    return summary
