# backend/investment_tracker/services/__init__.py
"""
Service layer for business logic.

Services have no knowledge of HTTP. They raise domain exceptions from
services.exceptions and receive database sessions as parameters.

Usage:
    from investment_tracker.services import CurrencyService, PriceService
    from investment_tracker.services import PortfolioService, AcquisitionRequest
    from investment_tracker.services import ValidationError, AssetNotFoundError

Architecture:
    services/
    ├── exceptions.py          # Domain exceptions
    ├── constants.py           # Business constants and limits
    ├── protocols.py           # Structural interfaces for injection
    ├── cache.py               # ViewCache (TTL + LRU, single-flight)
    ├── currency_service.py    # Exchange rates and conversion
    ├── price_service.py       # Price snapshots
    ├── asset_service.py       # Asset lookup and search
    ├── portfolio_service.py   # Acquisitions and cached portfolio views
    ├── valuation/             # Aggregation, summary, history
    ├── analytics/             # Risk, allocation, top movers
    └── market_data/           # Quote sources and price refresh
"""

from investment_tracker.services.asset_service import AssetInfo, AssetSearchResult, AssetService
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.currency_service import CurrencyService
from investment_tracker.services.exceptions import (
    ServiceError,
    ValidationError,
    InvalidPeriodError,
    UnsupportedCurrencyError,
    NotFoundError,
    AssetNotFoundError,
    MarketDataError,
    PriceUnavailableError,
    QuoteSourceError,
)
from investment_tracker.services.market_data import (
    PriceRefreshResult,
    PriceRefreshService,
    QuoteSource,
    SimulatedQuoteSource,
)
from investment_tracker.services.portfolio_service import AcquisitionRequest, PortfolioService
from investment_tracker.services.price_service import PriceService
from investment_tracker.services.valuation import HistorySynthesizer, ValuationService

__all__ = [
    # Services
    "AssetService",
    "CurrencyService",
    "PriceService",
    "PortfolioService",
    "ValuationService",
    "HistorySynthesizer",
    "PriceRefreshService",
    "ViewCache",
    # Market data
    "QuoteSource",
    "SimulatedQuoteSource",
    "PriceRefreshResult",
    # Data classes
    "AcquisitionRequest",
    "AssetInfo",
    "AssetSearchResult",
    # Exceptions
    "ServiceError",
    "ValidationError",
    "InvalidPeriodError",
    "UnsupportedCurrencyError",
    "NotFoundError",
    "AssetNotFoundError",
    "MarketDataError",
    "PriceUnavailableError",
    "QuoteSourceError",
]
