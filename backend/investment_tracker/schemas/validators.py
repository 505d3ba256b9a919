# backend/investment_tracker/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

- Symbol validation and normalization
- Currency code validation
- Date range validation

Each raises ValueError so pydantic reports it as a 422 field error.
"""

import re
from datetime import date

# Symbol: letters/digits, may contain . - / = and start with ^ (indices)
SYMBOL_PATTERN = re.compile(r'^[\^]?[A-Z0-9][A-Z0-9./=-]{0,31}$')
SYMBOL_MAX_LENGTH = 32

# Currency: ISO 4217 format (3 uppercase letters)
CURRENCY_PATTERN = re.compile(r'^[A-Z]{3}$')

MIN_VALID_DATE = date(1970, 1, 1)


def validate_symbol(value: str) -> str:
    """
    Validate and normalize an asset symbol.

    Valid formats:
    - Equities and funds: AAPL, THYAO, BRK.B
    - FX pairs: USDTRY, EUR/TRY
    - Metals: XAU, GAU=X

    Returns:
        Normalized symbol (uppercase, trimmed)

    Raises:
        ValueError: If the symbol format is invalid
    """
    if not value or not value.strip():
        raise ValueError("Symbol cannot be empty")

    normalized = value.strip().upper()

    if len(normalized) > SYMBOL_MAX_LENGTH:
        raise ValueError(f"Symbol cannot exceed {SYMBOL_MAX_LENGTH} characters")

    if not SYMBOL_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid symbol format: '{normalized}'. "
            "Symbol must be alphanumeric and may include . - / = or a leading ^"
        )

    return normalized


def validate_currency(value: str) -> str:
    """
    Validate and normalize an ISO 4217 currency code.

    Raises:
        ValueError: If not exactly three letters
    """
    normalized = (value or "").strip().upper()
    if not CURRENCY_PATTERN.match(normalized):
        raise ValueError(f"Invalid currency code: '{value}'. Must be 3 letters (e.g. USD)")
    return normalized


def validate_date_not_future(value: date, field_name: str = "Date") -> date:
    if value > date.today():
        raise ValueError(f"{field_name} cannot be in the future")
    if value < MIN_VALID_DATE:
        raise ValueError(f"{field_name} cannot be before {MIN_VALID_DATE}")
    return value


def validate_date_range(from_date: date, to_date: date) -> tuple[date, date]:
    """
    Raises:
        ValueError: If from_date is after to_date
    """
    if from_date > to_date:
        raise ValueError("from_date must be before or equal to to_date")
    return from_date, to_date
