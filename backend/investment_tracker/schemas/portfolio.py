# backend/investment_tracker/schemas/portfolio.py
"""
Pydantic schemas for acquisitions and portfolio views.

These schemas handle:
- Recording acquisitions (request + response)
- Portfolio summary (P&L, today change, FX influence)
- Value history (daily series)
- Allocation by asset type and top movers
- Analytics bundle (history + allocation + movers + risk)

IMPORTANT: All financial values use Decimal for precision.
Monetary view fields are in the response's base_currency.
"""

import datetime as dt
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from investment_tracker.models import AssetType
from investment_tracker.schemas.validators import (
    validate_currency,
    validate_date_not_future,
    validate_symbol,
)
from investment_tracker.services.valuation.types import PerformanceStatus


# =============================================================================
# ACQUISITION SCHEMAS
# =============================================================================

class AcquisitionCreate(BaseModel):
    """
    Schema for recording a purchase.

    The asset is found by symbol, or created on first use with the given
    name, type and currency.
    """

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Asset symbol (case-insensitive)",
        examples=["AAPL", "THYAO", "XAU"]
    )
    asset_name: str | None = Field(
        default=None,
        max_length=255,
        description="Display name used when the asset is created"
    )
    asset_type: AssetType = Field(
        default=AssetType.EQUITY,
        description="Asset category used when the asset is created"
    )
    quantity: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Units acquired (must be positive)",
        examples=["10", "0.5"]
    )
    unit_price: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Price per unit in the lot currency (must be positive)",
        examples=["150.50"]
    )
    currency: str = Field(
        default="USD",
        description="Lot currency (ISO 4217)",
        examples=["USD", "TRY", "EUR"]
    )
    fee: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=18,
        decimal_places=8,
        description="Commission paid, in the lot currency (0 or positive)"
    )
    acquisition_date: dt.date = Field(
        ...,
        description="Trade date (not in the future)",
        examples=["2026-01-15"]
    )
    fx_rate_at_acquisition: Decimal | None = Field(
        default=None,
        gt=0,
        description="Broker FX rate on the trade date, stored for reference"
    )
    notes: str | None = Field(default=None, max_length=1000)
    tags: list[str] = Field(default_factory=list, max_length=20)

    @field_validator('symbol')
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return validate_symbol(v)

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return validate_currency(v)

    @field_validator('acquisition_date')
    @classmethod
    def validate_date(cls, v: date) -> date:
        return validate_date_not_future(v, "Acquisition date")

    @field_validator('tags')
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        """Trim tags and drop blanks and duplicates, keeping order."""
        cleaned: list[str] = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in cleaned:
                cleaned.append(tag)
        return cleaned


class AcquisitionResponse(BaseModel):
    """A recorded acquisition lot."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    asset_id: int
    symbol: str
    quantity: Decimal
    unit_price: Decimal
    currency: str
    fee: Decimal
    acquisition_date: dt.date
    fx_rate_at_acquisition: Decimal | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime


class AcquisitionListResponse(BaseModel):
    items: list[AcquisitionResponse]
    total: int = Field(..., description="Number of lots the user holds")


# =============================================================================
# SUMMARY SCHEMAS
# =============================================================================

class PortfolioSummaryResponse(BaseModel):
    """
    Point-in-time portfolio summary.

    fx_influence is an approximation based on fixed per-currency factors.
    """

    model_config = ConfigDict(from_attributes=True)

    base_currency: str = Field(..., description="Currency of all monetary fields")
    total_value: Decimal = Field(..., description="Σ quantity × current price")
    total_cost: Decimal = Field(..., description="Σ quantity × unit price + fee")
    total_fees: Decimal
    unrealized_pl: Decimal = Field(..., description="total_value - total_cost")
    unrealized_pl_percent: Decimal
    today_change: Decimal
    today_change_percent: Decimal
    fx_influence: Decimal
    estimated_proceeds: Decimal = Field(..., description="total_value - total_fees")
    status: PerformanceStatus
    position_count: int
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# HISTORY SCHEMAS
# =============================================================================

class HistoryPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    value: Decimal
    change: Decimal
    change_percent: Decimal


class HistoryResponse(BaseModel):
    """Daily value series, ascending, one point per calendar day."""

    period: str
    base_currency: str
    points: list[HistoryPointResponse]


# =============================================================================
# ALLOCATION & MOVERS SCHEMAS
# =============================================================================

class AllocationSliceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    asset_type: AssetType
    value: Decimal
    percent: Decimal = Field(..., description="Share of total value (0-100)")
    color: str = Field(..., description="Chart color (hex)")


class AllocationResponse(BaseModel):
    base_currency: str
    slices: list[AllocationSliceResponse]


class TopMoverResponse(BaseModel):
    """change is an approximation (3% of value), not a measured move."""

    model_config = ConfigDict(from_attributes=True)

    asset_id: int
    symbol: str
    name: str
    value: Decimal
    change: Decimal
    change_percent: Decimal
    direction: PerformanceStatus


class TopMoversResponse(BaseModel):
    base_currency: str
    movers: list[TopMoverResponse]


# =============================================================================
# ANALYTICS SCHEMAS
# =============================================================================

class RiskMetricsResponse(BaseModel):
    """Risk metrics over the period's history (percent units)."""

    model_config = ConfigDict(from_attributes=True)

    total_return: Decimal = Field(..., description="Last value - first value")
    total_return_percent: Decimal
    volatility: Decimal = Field(..., description="Annualized, in percent")
    sharpe_ratio: Decimal
    max_drawdown: Decimal = Field(..., description="Largest peak-to-trough decline (0-100)")


class AnalyticsResponse(BaseModel):
    period: str
    base_currency: str
    history: list[HistoryPointResponse]
    allocation: list[AllocationSliceResponse]
    top_movers: list[TopMoverResponse]
    risk: RiskMetricsResponse
