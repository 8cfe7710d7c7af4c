"""
Serverless entrypoint for Nightly Digest Stats

Adapts API Gateway / function URL events to the FastAPI app with Mangum.
"""

import logging
from typing import Any, Dict

from mangum import Mangum

from digest_stats.main import app

logger = logging.getLogger(__name__)

# Instantiate the adapter once per execution environment; settings are still read per request
asgi_handler = Mangum(app, lifespan="off")


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Serverless entrypoint.

    Args:
        event: HTTP event payload (API Gateway v1/v2 or function URL)
        context: runtime context object

    Returns:
        HTTP response dictionary produced by the ASGI app
    """
    path = (event or {}).get("rawPath") or (event or {}).get("path")
    logger.info(f"Invoked for path: {path}")
    return asgi_handler(event, context)
