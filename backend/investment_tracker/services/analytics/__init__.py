# backend/investment_tracker/services/analytics/__init__.py
"""
Analytics package.

- risk: volatility, Sharpe ratio, max drawdown, total return
- allocation: allocation by asset type, top movers
"""

from investment_tracker.services.analytics.allocation import (
    calculate_allocation,
    calculate_top_movers,
)
from investment_tracker.services.analytics.risk import RiskCalculator

__all__ = [
    "RiskCalculator",
    "calculate_allocation",
    "calculate_top_movers",
]
