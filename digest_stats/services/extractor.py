"""Reduce a Nightly Digest response to its current status."""

from __future__ import annotations

import math
from typing import Any, Mapping

from digest_stats.models.digest import CurrentStatus

# Populated count fields are read in this order; the first usable one wins.
COUNT_FIELDS = ("exposures_count", "on_sky_exposures_count")


def coerce_count(value: Any) -> int | None:
    """Convert a count-like value to int, or None when it is absent or unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number)


def extract_current(response: Mapping[str, Any] | None) -> CurrentStatus:
    """Get the last exposure, its sky visibility and the window exposure count.

    Missing fields fall back to defaults (None for the exposure and the
    indicator, 0 for the count); this never raises on malformed payloads.
    """
    payload = response if isinstance(response, Mapping) else {}

    exposures = payload.get("exposures")
    if not isinstance(exposures, list):
        exposures = []

    last_exposure = exposures[-1] if exposures else None
    last_can_see_sky = last_exposure.get("can_see_sky") if isinstance(last_exposure, Mapping) else None

    exposures_count = 0
    for field in COUNT_FIELDS:
        count = coerce_count(payload.get(field))
        if count is not None:
            exposures_count = count
            break

    return CurrentStatus(
        last_exposure=last_exposure,
        last_can_see_sky=last_can_see_sky,
        exposures_count=exposures_count,
    )
