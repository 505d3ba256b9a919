# backend/investment_tracker/services/constants.py
"""
Centralized constants for the Investment Tracker services.

Single source of truth for business constants used across valuation,
analytics, pricing and the HTTP layer. Values that operators may want to
tune per deployment live in config.Settings instead.

Usage:
    from investment_tracker.services.constants import (
        TRADING_DAYS_PER_YEAR,
        CURRENCY_PRECISION,
        HISTORY_PERIOD_DAYS,
    )
"""

from decimal import Decimal

from investment_tracker.utils.money import (  # noqa: F401  re-exported
    CURRENCY_PRECISION,
    DISPLAY_PERCENTAGE_PRECISION,
    RATE_PRECISION,
)


# =============================================================================
# FINANCIAL CALENDAR CONSTANTS
# =============================================================================

# Used for annualizing volatility
TRADING_DAYS_PER_YEAR: int = 252

# Day-count windows for the supported history periods.
# 1Y and ALL are calendar years, resolved with date arithmetic.
HISTORY_PERIOD_DAYS: dict[str, int] = {
    "7D": 7,
    "30D": 30,
    "90D": 90,
}
HISTORY_PERIOD_YEARS: dict[str, int] = {
    "1Y": 1,
    "ALL": 5,
}
DEFAULT_HISTORY_PERIOD: str = "30D"

# Amplitude of the sinusoidal perturbation applied to synthesized history
HISTORY_PERTURBATION_AMPLITUDE: Decimal = Decimal("0.05")


# =============================================================================
# CURRENCY CONSTANTS
# =============================================================================

# Pivot currency for cross rates and seed of the rate table
PIVOT_CURRENCY: str = "TRY"

# Seed rates, each quoted as 1 unit of the currency in TRY
SEED_EXCHANGE_RATES: dict[tuple[str, str], Decimal] = {
    ("USD", "TRY"): Decimal("31.50"),
    ("EUR", "TRY"): Decimal("34.20"),
    ("GBP", "TRY"): Decimal("39.80"),
    ("JPY", "TRY"): Decimal("0.21"),
}

SUPPORTED_CURRENCIES: frozenset[str] = frozenset({"TRY", "USD", "EUR", "GBP", "JPY"})

CURRENCY_SYMBOLS: dict[str, str] = {
    "TRY": "₺",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

# Currencies displayed without minor units
ZERO_DECIMAL_CURRENCIES: frozenset[str] = frozenset({"JPY"})

# Fraction of a foreign position's value attributed to currency movement.
# Fixed approximation, not a measured FX impact.
FX_VOLATILITY_FACTORS: dict[str, Decimal] = {
    "USD": Decimal("0.05"),
    "EUR": Decimal("0.04"),
    "GBP": Decimal("0.06"),
}
DEFAULT_FX_VOLATILITY_FACTOR: Decimal = Decimal("0.03")

DEFAULT_ACQUISITION_CURRENCY: str = "USD"


# =============================================================================
# PRICE CONSTANTS
# =============================================================================

# Placeholder price stored when an asset has never been priced
DEFAULT_PLACEHOLDER_PRICE: Decimal = Decimal("100")

PRICE_SOURCE_DEFAULT: str = "DEFAULT"
PRICE_SOURCE_REAL_TIME: str = "REAL_TIME_UPDATE"
PRICE_SOURCE_MANUAL: str = "MANUAL"

# Simulated quote ranges by asset type (low, high)
SIMULATED_PRICE_RANGES: dict[str, tuple[Decimal, Decimal]] = {
    "EQUITY": (Decimal("100"), Decimal("500")),
    "FX": (Decimal("25"), Decimal("35")),
    "PRECIOUS_METAL": (Decimal("2000"), Decimal("3000")),
    "FUND": (Decimal("50"), Decimal("150")),
}
DEFAULT_SIMULATED_PRICE_RANGE: tuple[Decimal, Decimal] = (Decimal("10"), Decimal("100"))

# Maximum relative move of a simulated quote (±2%)
SIMULATED_PRICE_MAX_MOVE: Decimal = Decimal("0.02")
MIN_SIMULATED_PRICE: Decimal = Decimal("0.01")

# Simulated upstream latency range in seconds
SIMULATED_LATENCY_SECONDS: tuple[float, float] = (0.1, 0.3)


# =============================================================================
# ALLOCATION & MOVERS
# =============================================================================

# Chart palette assigned to allocation slices in first-seen order
ALLOCATION_COLORS: tuple[str, ...] = (
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
)

# Approximate daily move applied to every position in the movers view
TOP_MOVER_CHANGE_RATE: Decimal = Decimal("0.03")
DEFAULT_TOP_MOVERS_LIMIT: int = 5
MAX_TOP_MOVERS_LIMIT: int = 50


# =============================================================================
# CACHE VIEW NAMES
# =============================================================================

VIEW_SUMMARY: str = "summary"
VIEW_HISTORY: str = "history"
VIEW_ALLOCATION: str = "allocation"
VIEW_TOP_MOVERS: str = "top_movers"
VIEW_ANALYTICS: str = "analytics"
VIEW_PRICE: str = "price"
VIEW_ASSET: str = "asset"

# Views evicted when a user records a new acquisition.
# History is not evicted and expires on its own.
VIEWS_INVALIDATED_ON_ACQUISITION: tuple[str, ...] = (
    VIEW_SUMMARY,
    VIEW_ANALYTICS,
    VIEW_ALLOCATION,
    VIEW_TOP_MOVERS,
)


# =============================================================================
# DECIMAL PRECISION CONSTANTS
# =============================================================================

# CURRENCY_PRECISION, DISPLAY_PERCENTAGE_PRECISION and RATE_PRECISION are
# imported from utils.money at the top of this module.

ZERO: Decimal = Decimal("0")
ONE_HUNDRED: Decimal = Decimal("100")


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format follows slowapi/limits syntax: "100/minute", "10/hour", etc.

RATE_LIMIT_DEFAULT: str = "100/minute"

# Write endpoints (recording acquisitions, prices, rates)
RATE_LIMIT_WRITE: str = "30/minute"

# Higher limit for monitoring tools that poll frequently
RATE_LIMIT_HEALTH: str = "300/minute"

# Analytics and history are CPU-intensive on a cache miss
RATE_LIMIT_ANALYTICS: str = "30/minute"


# =============================================================================
# RESOURCE LIMIT CONSTANTS
# =============================================================================

DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

# Maximum span of a price range query
MAX_PRICE_RANGE_DAYS: int = 366 * 5
