# backend/investment_tracker/utils/money.py
"""
Decimal rounding helpers.

All monetary amounts and display percentages are rounded half-up to two
decimal places. Exchange rates keep six decimal places.

The precision constants are defined here and re-exported by
services.constants, so this module has no dependency on the service layer.
"""

from decimal import Decimal, ROUND_HALF_UP

# Currency amounts and display percentages: 2 decimal places
CURRENCY_PRECISION: Decimal = Decimal("0.01")
DISPLAY_PERCENTAGE_PRECISION: Decimal = Decimal("0.01")

# Exchange rates: 6 decimal places
RATE_PRECISION: Decimal = Decimal("0.000001")

_ZERO = Decimal("0")
_ONE_HUNDRED = Decimal("100")


def round_money(value: Decimal) -> Decimal:
    """Round a monetary amount to 2 decimal places (half-up)."""
    return value.quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)


def round_percent(value: Decimal) -> Decimal:
    """Round a percentage to 2 decimal places (half-up)."""
    return value.quantize(DISPLAY_PERCENTAGE_PRECISION, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    """Round an exchange rate to 6 decimal places (half-up)."""
    return value.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """
    Return part / whole * 100, rounded for display.

    A zero (or negative) denominator yields 0 instead of raising.
    """
    if whole <= _ZERO:
        return round_percent(_ZERO)
    return round_percent(part / whole * _ONE_HUNDRED)
