# backend/investment_tracker/routers/__init__.py
"""
API routers for the Investment Tracker.

Each router handles a specific domain:
- portfolio: Acquisitions and derived portfolio views for the current user
- assets: Global asset registry and prices
- currency: Exchange rates and conversion
"""

from investment_tracker.routers.assets import router as assets_router
from investment_tracker.routers.currency import router as currency_router
from investment_tracker.routers.portfolio import router as portfolio_router

__all__ = [
    "portfolio_router",
    "assets_router",
    "currency_router",
]
