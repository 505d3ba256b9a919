# backend/investment_tracker/utils/__init__.py
"""
Cross-cutting utilities:
- logging: Logging configuration with correlation ID support
- context: Request context (correlation ID, user id)
- money: Decimal rounding helpers

Usage:
    from investment_tracker.utils import setup_logging
    from investment_tracker.utils import get_correlation_id, set_correlation_id
"""

from investment_tracker.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    get_user_id,
    set_user_id,
    clear_user_id,
)
from investment_tracker.utils.logging import setup_logging

__all__ = [
    # Logging
    "setup_logging",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "get_user_id",
    "set_user_id",
    "clear_user_id",
]
