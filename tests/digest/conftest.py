from __future__ import annotations

from typing import Any, Callable

import pytest

from digest_stats.config.settings import Settings
from tests.digest.fakes import API_ENDPOINT, CACHE_ENDPOINT

SETTINGS_ENV_VARS = (
    "NIGHTLY_DIGEST_API_ENDPOINT",
    "NIGHTLY_DIGEST_CACHE_ENDPOINT",
    "BEARER_TOKEN",
    "REDIS_CACHE_TOKEN",
    "AUTH_TOKEN",
    "MODE",
    "DAY_OBS_START",
    "DAY_OBS_END",
    "OVERRIDE_RUN_DATE",
    "SURVEY_START_DATE",
    "REACCUMULATE_WINDOW_DAYS",
    "TOTAL_EXPECTED_EXPOSURES",
    "INSTRUMENT",
    "HTTP_TIMEOUT_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def make_settings(clean_env: pytest.MonkeyPatch) -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "NIGHTLY_DIGEST_API_ENDPOINT": API_ENDPOINT,
            "NIGHTLY_DIGEST_CACHE_ENDPOINT": CACHE_ENDPOINT,
            "BEARER_TOKEN": "upstream-token",
            "REDIS_CACHE_TOKEN": "cache-token",
            "AUTH_TOKEN": "inbound-token",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
