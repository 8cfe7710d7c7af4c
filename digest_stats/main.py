"""FastAPI application entry point"""

from typing import Optional
import logging

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from digest_stats.clients.cache_client import CacheClient
from digest_stats.clients.digest_client import NightlyDigestClient
from digest_stats.config.settings import Settings, get_settings
from digest_stats.jobs.digest_stats_job import InvalidStatsRequest, run_digest_stats
from digest_stats.middleware.auth import AuthenticationError, verify_bearer_token

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

LIVENESS_BODY = "🐈‍⬛"
BAD_REQUEST_BODY = {"status": "error", "reason": "bad request"}
UPSTREAM_ERROR_BODY = {"status": "error", "reason": "upstream request failed"}
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

app = FastAPI(
    title="Nightly Digest Stats",
    description="Dome status and exposure counts from the Nightly Digest API",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    dependencies=[Depends(verify_bearer_token)],
)


def get_http_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Outbound transport override; None uses the default network transport."""
    return None


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.get("/")
async def root():
    """Liveness check"""
    return PlainTextResponse(LIVENESS_BODY)


@app.api_route("/nightly-digest-stats", methods=["GET", "POST"])
@app.api_route("/accumulated-exposure-count", methods=["GET", "POST"])
async def digest_stats(
    request: Request,
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
):
    """
    Current dome status and exposure count for a day-obs window

    Query params:
        startDate: YYYYMMDD, inclusive (default: yesterday UTC)
        endDate: YYYYMMDD, exclusive (default: today UTC)
        mode: cache tag (default: "current")
        overrideRunDate: when present, reaccumulate from the survey start date
    """
    try:
        summary = await run_digest_stats(
            settings,
            request.query_params,
            digest_client_factory=lambda: NightlyDigestClient.from_settings(settings, transport=transport),
            cache_client_factory=lambda: CacheClient.from_settings(settings, transport=transport),
        )
    except InvalidStatsRequest as e:
        logger.warning(f"Rejected digest stats request: {e}")
        return JSONResponse(status_code=400, content=BAD_REQUEST_BODY)
    except httpx.HTTPError as e:
        logger.error(f"Nightly digest fetch failed: {e}", exc_info=True)
        return JSONResponse(status_code=502, content=UPSTREAM_ERROR_BODY)

    return summary.to_dict()


@app.api_route("/{path:path}", methods=ALL_METHODS)
async def unknown_path(path: str):
    """Anything else is a bad request"""
    logger.info(f"Unknown path requested: /{path}")
    return JSONResponse(status_code=400, content=BAD_REQUEST_BODY)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "digest_stats.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
