# backend/investment_tracker/utils/context.py
"""
Request context management.

Thread- and async-safe storage for request-scoped data:
- Correlation ID for request tracing
- Current user id, once resolved by the HTTP layer

Both values are attached to every log record by the logging filter.

Usage:
    from investment_tracker.utils.context import get_correlation_id, set_correlation_id

    set_correlation_id("abc-123")
    correlation_id = get_correlation_id()  # "abc-123"
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """Get the current request's correlation ID, or None if not set."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current request.

    Called by CorrelationIdMiddleware at the start of each request.
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID at the end of a request."""
    _correlation_id_var.set(None)


# =============================================================================
# USER ID
# =============================================================================

def get_user_id() -> str | None:
    """Get the user id resolved for the current request."""
    return _user_id_var.get()


def set_user_id(user_id: str) -> None:
    _user_id_var.set(user_id)


def clear_user_id() -> None:
    _user_id_var.set(None)
