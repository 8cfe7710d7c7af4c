"""Nightly Digest payload shapes and the summaries derived from them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, TypedDict


class NightlyDigestExposure(TypedDict, total=False):
    """One exposure as returned by the Nightly Digest API. Every field may be null."""

    exposure_id: Optional[int]
    exposure_name: Optional[str]
    exp_time: Optional[float]
    img_type: Optional[str]
    observation_reason: Optional[str]
    science_program: Optional[str]
    target_name: Optional[str]
    can_see_sky: Optional[bool]
    band: Optional[str]
    obs_start: Optional[str]
    physical_filter: Optional[str]
    day_obs: Optional[int]
    seq_num: Optional[int]
    obs_end: Optional[str]
    overhead: Optional[float]
    zero_point_median: Optional[float]
    visit_id: Optional[int]
    pixel_scale_median: Optional[float]
    psf_sigma_median: Optional[float]
    visit_gap: Optional[float]


class NightlyDigestResponse(TypedDict, total=False):
    """Per-window payload. Exposures are chronological; extra keys pass through untouched."""

    exposures: list[NightlyDigestExposure]
    exposures_count: Optional[int]
    on_sky_exposures_count: Optional[int]
    sum_exposure_time: Optional[float]
    total_on_sky_exposure_time: Optional[float]
    open_dome_times: list[dict[str, Any]]


@dataclass(frozen=True, slots=True)
class CurrentStatus:
    """Latest state of a window, before it is cleaned for output."""

    last_exposure: Optional[dict[str, Any]]
    last_can_see_sky: Optional[Any]
    exposures_count: int


@dataclass(slots=True)
class CleanedSummary:
    """Externally visible result of a window or an accumulated span."""

    dome_open: Optional[bool] = None
    exposure_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"dome_open": self.dome_open, "exposure_count": self.exposure_count}
