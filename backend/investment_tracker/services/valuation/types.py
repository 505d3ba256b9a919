# backend/investment_tracker/services/valuation/types.py
"""
Internal data types for valuation and analytics.

These dataclasses are NOT Pydantic schemas; those live in
schemas/portfolio.py for API serialization. Routers map one to the other.

Design Principles:
- Immutable (frozen=True) projections, safe to share from the view cache
- Decimal for ALL financial values (never float)
- Monetary values in the portfolio base currency unless a field says otherwise
- Warnings accumulate for data quality tracking

Type Hierarchy:
    PositionAggregate   - Lots of one asset summed per lot currency
    PositionValue       - One asset valued in base currency
    PortfolioSummary    - Totals, P&L, today change, FX influence
    HistoryPoint        - Single day of the synthesized value series
    AllocationSlice     - Share of value per asset type
    TopMover            - Per-asset approximate move
    AnalyticsBundle     - History + allocation + movers + risk metrics
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from investment_tracker.models import AssetType

if TYPE_CHECKING:
    from investment_tracker.models import AcquisitionLot


class PerformanceStatus(str, enum.Enum):
    UP = "UP"
    DOWN = "DOWN"
    NEUTRAL = "NEUTRAL"


# =============================================================================
# POSITIONS
# =============================================================================

@dataclass
class PositionAggregate:
    """
    All lots a user holds in one asset.

    Cost and fees stay in each lot's own currency; the valuation engine
    converts lot by lot before summing.

    Attributes:
        asset_id: Database ID of the asset
        quantity: Sum of lot quantities
        lots: The contributing lots, in input order
    """

    asset_id: int
    quantity: Decimal = Decimal("0")
    lots: list[AcquisitionLot] = field(default_factory=list)


@dataclass(frozen=True)
class PositionValue:
    """Current value of one asset position in base currency."""

    asset_id: int
    symbol: str
    name: str
    asset_type: AssetType
    currency: str
    quantity: Decimal
    price: Decimal | None
    value: Decimal


# =============================================================================
# SUMMARY
# =============================================================================

@dataclass(frozen=True)
class PortfolioSummary:
    """
    Point-in-time summary of a user's portfolio in base currency.

    fx_influence is an approximation: each foreign position's value times a
    fixed per-currency volatility factor.
    """

    base_currency: str
    total_value: Decimal
    total_cost: Decimal
    total_fees: Decimal
    unrealized_pl: Decimal
    unrealized_pl_percent: Decimal
    today_change: Decimal
    today_change_percent: Decimal
    fx_influence: Decimal
    estimated_proceeds: Decimal
    status: PerformanceStatus
    position_count: int
    warnings: tuple[str, ...] = ()

    @classmethod
    def empty(cls, base_currency: str) -> "PortfolioSummary":
        zero = Decimal("0.00")
        return cls(
            base_currency=base_currency,
            total_value=zero,
            total_cost=zero,
            total_fees=zero,
            unrealized_pl=zero,
            unrealized_pl_percent=zero,
            today_change=zero,
            today_change_percent=zero,
            fx_influence=zero,
            estimated_proceeds=zero,
            status=PerformanceStatus.NEUTRAL,
            position_count=0,
        )


# =============================================================================
# HISTORY
# =============================================================================

@dataclass(frozen=True)
class HistoryPoint:
    """
    One day of portfolio history.

    change and change_percent compare against the previous point
    (zero for the first point).
    """

    date: date
    value: Decimal
    change: Decimal
    change_percent: Decimal


# =============================================================================
# ALLOCATION & MOVERS
# =============================================================================

@dataclass(frozen=True)
class AllocationSlice:
    asset_type: AssetType
    value: Decimal
    percent: Decimal
    color: str


@dataclass(frozen=True)
class TopMover:
    """
    Approximate mover entry.

    change is value × TOP_MOVER_CHANGE_RATE, not a measured daily move.
    """

    asset_id: int
    symbol: str
    name: str
    value: Decimal
    change: Decimal
    change_percent: Decimal
    direction: PerformanceStatus


# =============================================================================
# ANALYTICS
# =============================================================================

@dataclass(frozen=True)
class RiskSummary:
    """Risk metrics computed from a history series (percent units)."""

    total_return: Decimal
    total_return_percent: Decimal
    volatility: Decimal
    sharpe_ratio: Decimal
    max_drawdown: Decimal


@dataclass(frozen=True)
class AnalyticsBundle:
    period: str
    base_currency: str
    history: tuple[HistoryPoint, ...]
    allocation: tuple[AllocationSlice, ...]
    top_movers: tuple[TopMover, ...]
    risk: RiskSummary
