# backend/investment_tracker/services/valuation/__init__.py
"""
Valuation package.

- PositionAggregator: groups lots per asset
- ValuationService: summary and per-asset current values
- HistorySynthesizer: daily value series for a period
"""

from investment_tracker.services.valuation.aggregator import PositionAggregator
from investment_tracker.services.valuation.history import HistorySynthesizer
from investment_tracker.services.valuation.service import ValuationService
from investment_tracker.services.valuation.types import (
    AllocationSlice,
    AnalyticsBundle,
    HistoryPoint,
    PerformanceStatus,
    PortfolioSummary,
    PositionAggregate,
    PositionValue,
    RiskSummary,
    TopMover,
)

__all__ = [
    "PositionAggregator",
    "ValuationService",
    "HistorySynthesizer",
    "AllocationSlice",
    "AnalyticsBundle",
    "HistoryPoint",
    "PerformanceStatus",
    "PortfolioSummary",
    "PositionAggregate",
    "PositionValue",
    "RiskSummary",
    "TopMover",
]
