# tcommerce/core/rate_limit.py
"""
Request rate limiting.

The counters live in a `limits` storage backend chosen by
RATE_LIMIT_STORAGE_URI ("memory://" for a single process, "redis://..."
when several workers must share counts). Windows expire in the storage
itself, so nothing here keeps per-client state.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from tcommerce.core.config import Settings
from tcommerce.core.security import InvalidTokenError, decode_access_token

logger = logging.getLogger(__name__)


def client_identity(request: Request) -> str:
    """
    Rate-limit key: the authenticated user id when a valid bearer token
    is present, otherwise the client address.
    """
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            return f"user:{decode_access_token(token)['sub']}"
        except InvalidTokenError:
            logger.debug("Rate limit key falls back to address (bad token)")
    return f"ip:{get_remote_address(request)}"


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=client_identity,
        default_limits=[settings.RATE_LIMIT],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded for %s (%s)", client_identity(request), exc.detail)
    response = JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "Too many requests, please try again later.",
            "code": "RATE_LIMITED",
            "limit": exc.detail,
        },
    )
    return request.app.state.limiter._inject_headers(
        response, request.state.view_rate_limit
    )
