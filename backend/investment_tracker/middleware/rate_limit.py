# backend/investment_tracker/middleware/rate_limit.py
"""
Per-client rate limiting with slowapi (in-memory storage).

Clients are keyed by their X-User-Id header when present, so users behind
one NAT do not share a budget, and by client IP otherwise. Forwarded IP
headers are only honored from trusted proxies.

Limits per endpoint kind live in services/constants.py. Analytics gets the
tightest read limit because a cache miss recomputes the whole history.

Usage:
    @router.post("/acquisitions")
    @limiter.limit(RATE_LIMIT_WRITE)
    def create_acquisition(request: Request, ...):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from investment_tracker.config import settings
from investment_tracker.schemas.errors import ErrorDetail
from investment_tracker.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_ANALYTICS,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60
USER_ID_HEADER = "X-User-Id"


def client_ip(request: Request) -> str:
    peer = get_remote_address(request)
    if settings.trust_proxy_headers or peer in settings.trusted_proxy_ips:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip.strip()
    return peer


def rate_limit_key(request: Request) -> str:
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    if user_id:
        return f"user:{user_id}"
    return f"ip:{client_ip(request)}"


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[RATE_LIMIT_DEFAULT],
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the ErrorDetail shape, with Retry-After."""
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"
    logger.warning(f"Rate limit exceeded for {rate_limit_key(request)}: {limit_info}")

    body = ErrorDetail(
        error="RateLimitError",
        message=f"Too many requests. {limit_info}",
        details={"retry_after": RETRY_AFTER_SECONDS},
    )
    return JSONResponse(
        status_code=429,
        content=body.model_dump(),
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_HEALTH",
    "RATE_LIMIT_ANALYTICS",
]
