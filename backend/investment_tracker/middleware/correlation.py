# backend/investment_tracker/middleware/correlation.py
"""
Correlation id middleware.

Every request gets an id that ends up on each log line written while
handling it and in the X-Correlation-ID response header. An upstream id is
reused when it looks sane (X-Correlation-ID first, then X-Request-ID);
otherwise a UUID4 is generated.
"""

import logging
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from investment_tracker.utils.context import (
    clear_correlation_id,
    clear_user_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
MAX_CORRELATION_ID_LENGTH = 128


def resolve_correlation_id(request: Request) -> str:
    for header in (CORRELATION_ID_HEADER, REQUEST_ID_HEADER):
        candidate = (request.headers.get(header) or "").strip()
        if not candidate:
            continue
        if len(candidate) <= MAX_CORRELATION_ID_LENGTH and candidate.isprintable():
            return candidate
        logger.debug(f"Ignoring malformed {header} header")
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind the correlation id for the request and clear request context after."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        correlation_id = resolve_correlation_id(request)
        set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
            clear_user_id()

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
