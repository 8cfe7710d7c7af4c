from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import httpx
import pytest

from digest_stats.jobs.digest_stats_job import (
    InvalidStatsRequest,
    resolve_stats_request,
    run_digest_stats,
)
from tests.digest.fakes import DIGEST_PAYLOAD, FakeCacheClient, FakeDigestClient

NOW = datetime(2026, 1, 7, 1, 30, tzinfo=UTC)


def _counts(*values: int) -> list[dict]:
    return [{"exposures": [{"can_see_sky": True}], "exposures_count": value} for value in values]


def test_defaults_are_current_mode_yesterday_to_today(make_settings) -> None:
    request = resolve_stats_request(make_settings(), {}, now=NOW)

    assert request.mode == "current"
    assert request.start_date == "20260106"
    assert request.end_date == "20260107"
    assert request.override_run_date is False


def test_query_values_override_defaults(make_settings) -> None:
    request = resolve_stats_request(
        make_settings(),
        {"mode": "full_history", "startDate": "20251201", "endDate": "20251202", "overrideRunDate": ""},
        now=NOW,
    )

    assert request.mode == "full_history"
    assert (request.start_date, request.end_date) == ("20251201", "20251202")
    assert request.override_run_date is True


def test_forced_config_wins_over_query(make_settings) -> None:
    settings = make_settings(MODE="forced", DAY_OBS_START="20250101", DAY_OBS_END="20250102", OVERRIDE_RUN_DATE=False)

    request = resolve_stats_request(
        settings,
        {"mode": "full_history", "startDate": "20251201", "endDate": "20251202", "overrideRunDate": "1"},
        now=NOW,
    )

    assert request.mode == "forced"
    assert (request.start_date, request.end_date) == ("20250101", "20250102")
    assert request.override_run_date is False


def test_missing_query_is_treated_as_empty(make_settings) -> None:
    request = resolve_stats_request(make_settings(), None, now=NOW)

    assert request.mode == "current"


@pytest.mark.parametrize("query", [{"startDate": "2026-01-06"}, {"endDate": "tomorrow"}])
def test_invalid_dates_are_rejected(make_settings, query: dict) -> None:
    with pytest.raises(InvalidStatsRequest):
        resolve_stats_request(make_settings(), query, now=NOW)


def test_single_window_path_fetches_once_and_caches_by_mode(make_settings) -> None:
    digest = FakeDigestClient([DIGEST_PAYLOAD])
    cache = FakeCacheClient()

    summary = asyncio.run(
        run_digest_stats(
            make_settings(),
            {"startDate": "20260106", "endDate": "20260107"},
            digest_client_factory=lambda: digest,
            cache_client_factory=lambda: cache,
            now=NOW,
        )
    )

    assert summary.to_dict() == {"dome_open": False, "exposure_count": 95}
    assert digest.calls == [("20260106", "20260107")]
    assert len(cache.calls) == 1
    assert cache.calls[0]["params"] == "current"
    assert cache.calls[0]["start_date"] == "20260106"


def test_single_window_fetch_failure_propagates(make_settings) -> None:
    digest = FakeDigestClient([httpx.ConnectError("upstream down")])

    with pytest.raises(httpx.ConnectError):
        asyncio.run(
            run_digest_stats(
                make_settings(),
                {},
                digest_client_factory=lambda: digest,
                cache_client_factory=lambda: FakeCacheClient(),
                now=NOW,
            )
        )


def test_override_reaccumulates_from_survey_start(make_settings) -> None:
    settings = make_settings(SURVEY_START_DATE="20251001", REACCUMULATE_WINDOW_DAYS=30, TOTAL_EXPECTED_EXPOSURES=1000)
    digest = FakeDigestClient(_counts(10, 20, 30))
    cache = FakeCacheClient()

    summary = asyncio.run(
        run_digest_stats(
            settings,
            {"endDate": "20251230", "overrideRunDate": "true"},
            digest_client_factory=lambda: digest,
            cache_client_factory=lambda: cache,
            now=NOW,
        )
    )

    assert summary.to_dict() == {"dome_open": None, "exposure_count": 60}
    assert digest.calls == [
        ("20251001", "20251031"),
        ("20251031", "20251130"),
        ("20251130", "20251230"),
    ]
    assert [call["params"] for call in cache.calls] == ["reaccumulate"] * 3 + ["current"]
    assert cache.calls[-1]["data"] == {"dome_open": None, "exposure_count": 60}
    assert cache.calls[-1]["start_date"] is None


def test_override_without_survey_start_uses_request_start(make_settings) -> None:
    digest = FakeDigestClient(_counts(4, 5))

    summary = asyncio.run(
        run_digest_stats(
            make_settings(REACCUMULATE_WINDOW_DAYS=1),
            {"startDate": "20260105", "endDate": "20260107", "overrideRunDate": ""},
            digest_client_factory=lambda: digest,
            cache_client_factory=lambda: FakeCacheClient(),
            now=NOW,
        )
    )

    assert summary.exposure_count == 9
    assert digest.calls == [("20260105", "20260106"), ("20260106", "20260107")]


def test_invalid_survey_start_is_rejected(make_settings) -> None:
    with pytest.raises(InvalidStatsRequest):
        asyncio.run(
            run_digest_stats(
                make_settings(SURVEY_START_DATE="2025-10-01"),
                {"overrideRunDate": ""},
                digest_client_factory=lambda: FakeDigestClient(),
                cache_client_factory=lambda: FakeCacheClient(),
                now=NOW,
            )
        )
