"""Bearer-token gate for every inbound request."""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from digest_stats.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

MISSING_TOKEN_DETAIL = "Unauthorized: Missing Bearer Token"
INVALID_TOKEN_DETAIL = "Unauthorized: Invalid Token"


class AuthenticationError(HTTPException):
    """Custom exception for authentication failures."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def verify_bearer_token(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> str:
    """Verify the bearer token from the Authorization header.

    Args:
        authorization: Authorization header value (format: "Bearer <token>")
        settings: per-request settings holding AUTH_TOKEN

    Returns:
        The validated token

    Raises:
        AuthenticationError: If the token is missing, malformed or wrong
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError(MISSING_TOKEN_DETAIL)

    token = authorization[7:].strip()  # Remove "Bearer " prefix
    if not token:
        raise AuthenticationError(MISSING_TOKEN_DETAIL)

    expected_token = settings.AUTH_TOKEN
    if not expected_token:
        logger.error("AUTH_TOKEN is not configured; rejecting request")
        raise AuthenticationError(INVALID_TOKEN_DETAIL)

    if not hmac.compare_digest(token.encode("utf-8"), expected_token.encode("utf-8")):
        logger.warning("Rejected request with invalid bearer token")
        raise AuthenticationError(INVALID_TOKEN_DETAIL)

    return token
