"""Re-derive a cumulative exposure count by replaying fixed-size windows."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from digest_stats.config.settings import Settings
from digest_stats.models.digest import CleanedSummary
from digest_stats.services.extractor import coerce_count
from digest_stats.services.window_processor import process_window
from digest_stats.utils.dates import format_date, offset_date
from digest_stats.utils.log_sanitizer import sanitize_for_log, sanitize_log_extra

logger = logging.getLogger(__name__)

REACCUMULATE_MODE = "reaccumulate"


async def reaccumulate(
    settings: Settings,
    range_start: datetime,
    range_end: datetime,
    window_size_days: int,
    *,
    digest_client: Any,
    cache_client: Any,
) -> CleanedSummary:
    """Sum exposure counts over `[range_start, range_end)` one window at a time.

    Windows run sequentially. A failing window is logged and contributes
    nothing; the remaining windows still run. `dome_open` is never updated,
    so accumulated results always report None.
    """
    if window_size_days < 1:
        raise ValueError(f"window_size_days must be >= 1, got {window_size_days}")

    accumulator = CleanedSummary(dome_open=None, exposure_count=0)
    windows = 0
    failed_windows: list[str] = []

    cursor = range_start
    while cursor < range_end:
        window_end = offset_date(cursor, window_size_days)
        window_start_str = format_date(cursor)
        window_end_str = format_date(window_end)
        windows += 1

        try:
            result = await process_window(
                settings,
                window_start_str,
                window_end_str,
                REACCUMULATE_MODE,
                digest_client=digest_client,
                cache_client=cache_client,
            )
        except Exception as exc:
            failed_windows.append(window_start_str)
            logger.warning(
                f"Reaccumulation window starting {window_start_str} failed: {sanitize_for_log(str(exc))}",
                extra=sanitize_log_extra(window_start=window_start_str, window_end=window_end_str),
            )
        else:
            accumulator.exposure_count += coerce_count(result.exposure_count) or 0

        cursor = window_end

    completion = sanitize_log_extra(
        windows=windows,
        failed_windows=failed_windows,
        exposure_count=accumulator.exposure_count,
    )
    expected = settings.TOTAL_EXPECTED_EXPOSURES
    if expected:
        completion["expected_fraction"] = round(accumulator.exposure_count / expected, 4)
    logger.info("Reaccumulation completed", extra=completion)
    return accumulator
