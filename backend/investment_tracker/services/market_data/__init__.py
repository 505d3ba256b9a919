# backend/investment_tracker/services/market_data/__init__.py
"""
Market data package.

- Abstract quote source interface with retry (base.py)
- Simulated random-walk quote source (simulated.py)
- Refresh orchestration over held assets (refresh_service.py)

Architecture:
    QuoteSource (ABC)
    └── SimulatedQuoteSource (concrete)

    PriceRefreshService
    └── Uses QuoteSource for new quotes
    └── Uses PriceService to record snapshots
"""

from investment_tracker.services.market_data.base import QuoteSource
from investment_tracker.services.market_data.refresh_service import (
    PriceRefreshResult,
    PriceRefreshService,
)
from investment_tracker.services.market_data.simulated import SimulatedQuoteSource

__all__ = [
    "QuoteSource",
    "SimulatedQuoteSource",
    "PriceRefreshService",
    "PriceRefreshResult",
]
