# backend/investment_tracker/utils/sql.py
"""
Helpers for building LIKE filters from user input.

Usage:
    from investment_tracker.utils.sql import contains_pattern, LIKE_ESCAPE

    query = query.where(Asset.name.ilike(contains_pattern(text), escape=LIKE_ESCAPE))
"""

LIKE_ESCAPE = "\\"


def escape_like_pattern(value: str) -> str:
    """
    Escape LIKE wildcards so user input matches literally.

    The escape character is escaped first so existing backslashes are not
    reinterpreted as escapes for the wildcards that follow.

    Example:
        >>> escape_like_pattern("50% off")
        '50\\\\% off'
    """
    return (
        value
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains_pattern(value: str) -> str:
    """Return a '%value%' pattern with wildcards in value escaped."""
    return f"%{escape_like_pattern(value.strip())}%"
