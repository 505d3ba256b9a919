# backend/investment_tracker/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

- assets: Asset lookup, search and prices
- currency: Exchange rates and conversion
- errors: Error response formats
- pagination: Pagination metadata for list endpoints
- portfolio: Acquisitions and portfolio views (summary, history, analytics)
- validators: Reusable validation functions (symbol, currency, dates)
"""

from investment_tracker.schemas.assets import (
    AssetListResponse,
    AssetPriceResponse,
    AssetResponse,
    PriceHistoryResponse,
    PriceRecordCreate,
    PriceSnapshotResponse,
)
from investment_tracker.schemas.currency import (
    ConversionResponse,
    ExchangeRateResponse,
    ExchangeRateUpdate,
    SupportedCurrenciesResponse,
)
from investment_tracker.schemas.errors import ErrorDetail, ValidationErrorDetail
from investment_tracker.schemas.pagination import PaginationMeta
from investment_tracker.schemas.portfolio import (
    AcquisitionCreate,
    AcquisitionListResponse,
    AcquisitionResponse,
    AllocationResponse,
    AllocationSliceResponse,
    AnalyticsResponse,
    HistoryPointResponse,
    HistoryResponse,
    PortfolioSummaryResponse,
    RiskMetricsResponse,
    TopMoverResponse,
    TopMoversResponse,
)

__all__ = [
    # Assets
    "AssetResponse",
    "AssetListResponse",
    "AssetPriceResponse",
    "PriceSnapshotResponse",
    "PriceHistoryResponse",
    "PriceRecordCreate",
    # Currency
    "ConversionResponse",
    "ExchangeRateResponse",
    "ExchangeRateUpdate",
    "SupportedCurrenciesResponse",
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Pagination
    "PaginationMeta",
    # Portfolio
    "AcquisitionCreate",
    "AcquisitionResponse",
    "AcquisitionListResponse",
    "PortfolioSummaryResponse",
    "HistoryPointResponse",
    "HistoryResponse",
    "AllocationSliceResponse",
    "AllocationResponse",
    "TopMoverResponse",
    "TopMoversResponse",
    "RiskMetricsResponse",
    "AnalyticsResponse",
]
