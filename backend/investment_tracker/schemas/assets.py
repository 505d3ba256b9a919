# backend/investment_tracker/schemas/assets.py
"""
Pydantic schemas for assets and their prices.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from investment_tracker.models import AssetType
from investment_tracker.schemas.pagination import PaginationMeta
from investment_tracker.schemas.validators import validate_currency


# =============================================================================
# ASSET SCHEMAS
# =============================================================================

class AssetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier")
    symbol: str
    name: str
    asset_type: AssetType
    currency: str = Field(..., description="Native trading currency")
    description: str | None = None


class AssetListResponse(BaseModel):
    """Paginated asset search results."""

    items: list[AssetResponse]
    pagination: PaginationMeta


# =============================================================================
# PRICE SCHEMAS
# =============================================================================

class AssetPriceResponse(BaseModel):
    """Current price of an asset in the requested currency."""

    asset_id: int
    symbol: str
    price: Decimal
    currency: str
    formatted: str = Field(..., description="Price with currency symbol, e.g. '₺3150.00'")


class PriceSnapshotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    asset_id: int
    price: Decimal
    currency: str
    as_of: datetime
    source: str


class PriceHistoryResponse(BaseModel):
    asset_id: int
    snapshots: list[PriceSnapshotResponse]


class PriceRecordCreate(BaseModel):
    """Manually recorded price."""

    price: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="Price per unit (must be positive)"
    )
    currency: str = Field(..., description="Price currency (ISO 4217)", examples=["TRY"])
    as_of: datetime | None = Field(
        default=None,
        description="Observation time (defaults to now)"
    )

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return validate_currency(v)
