"""Application settings and configuration"""

from typing import Any, Optional

from pydantic_settings import BaseSettings


DEFAULT_API_ENDPOINT = "https://usdf-rsp-dev.slac.stanford.edu/nightlydigest/api/exposures"
DEFAULT_CACHE_ENDPOINT = "https://us-west1-skyviewer.cloudfunctions.net/redis-client/nightly-digest-stats"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Endpoints
    NIGHTLY_DIGEST_API_ENDPOINT: str = DEFAULT_API_ENDPOINT
    NIGHTLY_DIGEST_CACHE_ENDPOINT: str = DEFAULT_CACHE_ENDPOINT

    # Tokens
    BEARER_TOKEN: Optional[str] = None  # upstream Nightly Digest API
    REDIS_CACHE_TOKEN: Optional[str] = None
    AUTH_TOKEN: Optional[str] = None  # inbound requests

    # Forced overrides (win over query parameters when set)
    MODE: Optional[str] = None
    DAY_OBS_START: Optional[str] = None
    DAY_OBS_END: Optional[str] = None
    OVERRIDE_RUN_DATE: Optional[bool] = None

    # Reaccumulation
    SURVEY_START_DATE: Optional[str] = None
    REACCUMULATE_WINDOW_DAYS: int = 30
    TOTAL_EXPECTED_EXPOSURES: Optional[int] = None

    # Upstream query
    INSTRUMENT: str = "LSSTCam"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env
        env_ignore_empty = True  # Blank variables count as unset


def get_settings() -> Settings:
    """Load settings from the environment. Called once per request, never cached."""
    return Settings()


def resolve_first(*candidates: Any, default: Any = None) -> Any:
    """Return the first candidate that is not None (or empty string), else `default`.

    Candidates are passed in precedence order, e.g.
    ``resolve_first(settings.MODE, query_mode, default="current")``.
    """
    for candidate in candidates:
        if candidate is None:
            continue
        if isinstance(candidate, str) and not candidate.strip():
            continue
        return candidate
    return default
