from __future__ import annotations

from typing import Any

import pytest

from digest_stats.services.extractor import coerce_count, extract_current
from tests.digest.fakes import DIGEST_PAYLOAD


def test_empty_exposures_yield_no_last_exposure() -> None:
    result = extract_current({"exposures": []})

    assert result.last_exposure is None
    assert result.last_can_see_sky is None
    assert result.exposures_count == 0


def test_last_exposure_is_final_element_without_reordering() -> None:
    exposures = [
        {"id": 3, "can_see_sky": False, "obs_start": "2026-01-06T23:00:00"},
        {"id": 1, "can_see_sky": True, "obs_start": "2026-01-06T20:00:00"},
    ]

    result = extract_current({"exposures": exposures, "exposures_count": 2})

    assert result.last_exposure == {"id": 1, "can_see_sky": True, "obs_start": "2026-01-06T20:00:00"}
    assert result.last_can_see_sky is True
    assert result.exposures_count == 2


def test_explicit_false_sky_indicator_is_kept() -> None:
    result = extract_current(DIGEST_PAYLOAD)

    assert result.last_can_see_sky is False
    assert result.exposures_count == 95


def test_missing_indicator_and_count_fall_back_to_defaults() -> None:
    result = extract_current({"exposures": [{"id": 1}], "exposures_count": None})

    assert result.last_can_see_sky is None
    assert result.exposures_count == 0


def test_total_count_wins_over_on_sky_count() -> None:
    result = extract_current({"exposures": [], "exposures_count": 95, "on_sky_exposures_count": 89})

    assert result.exposures_count == 95


def test_on_sky_count_used_when_total_absent() -> None:
    result = extract_current({"exposures": [], "exposures_count": None, "on_sky_exposures_count": 89})

    assert result.exposures_count == 89


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {},
        {"exposures": None},
        {"exposures": "not-a-list", "exposures_count": "many"},
        {"exposures": [None], "exposures_count": float("nan")},
    ],
)
def test_malformed_payloads_never_raise(payload: Any) -> None:
    result = extract_current(payload)

    assert result.last_can_see_sky is None
    assert result.exposures_count == 0


def test_coerce_count_handles_numbers_strings_and_garbage() -> None:
    assert coerce_count(12) == 12
    assert coerce_count(12.0) == 12
    assert coerce_count("7") == 7
    assert coerce_count(None) is None
    assert coerce_count(True) is None
    assert coerce_count("seven") is None
    assert coerce_count([1]) is None
