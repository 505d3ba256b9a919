# backend/investment_tracker/middleware/__init__.py
"""
ASGI middleware:
- Correlation ID tracking for request tracing
- Rate limiting for API protection

Usage:
    from investment_tracker.middleware import CorrelationIdMiddleware, limiter

    app.add_middleware(CorrelationIdMiddleware)
    app.state.limiter = limiter
"""

from investment_tracker.middleware.correlation import CorrelationIdMiddleware
from investment_tracker.middleware.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_ANALYTICS,
)

__all__ = [
    "CorrelationIdMiddleware",
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_HEALTH",
    "RATE_LIMIT_ANALYTICS",
]
