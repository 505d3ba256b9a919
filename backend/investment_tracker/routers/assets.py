# backend/investment_tracker/routers/assets.py
"""
Asset lookup and price endpoints.

- GET  /assets - Search assets (symbol/name, type, currency)
- GET  /assets/{id} - Asset details
- GET  /assets/{id}/price - Current price in a currency
- GET  /assets/{id}/prices - Recorded snapshots in a date range
- POST /assets/{id}/prices - Record a manual price

Assets are global reference data, so these endpoints do not require the
X-User-Id header.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from investment_tracker.config import settings
from investment_tracker.database import get_db
from investment_tracker.dependencies import (
    get_asset_service,
    get_currency_service,
    get_price_service,
)
from investment_tracker.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT, RATE_LIMIT_WRITE
from investment_tracker.models import AssetType
from investment_tracker.schemas.assets import (
    AssetListResponse,
    AssetPriceResponse,
    AssetResponse,
    PriceHistoryResponse,
    PriceRecordCreate,
    PriceSnapshotResponse,
)
from investment_tracker.schemas.pagination import PaginationMeta
from investment_tracker.services.asset_service import AssetInfo, AssetService
from investment_tracker.services.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_PRICE_RANGE_DAYS,
)
from investment_tracker.services.currency_service import CurrencyService
from investment_tracker.services.price_service import PriceService

logger = logging.getLogger(__name__)

DEFAULT_PRICE_RANGE_DAYS = 30

router = APIRouter(
    prefix="/assets",
    tags=["Assets"],
)


def _map_asset(asset: AssetInfo) -> AssetResponse:
    return AssetResponse(
        id=asset.id,
        symbol=asset.symbol,
        name=asset.name,
        asset_type=asset.asset_type,
        currency=asset.currency,
        description=asset.description,
    )


# =============================================================================
# ASSETS
# =============================================================================

@router.get(
    "",
    response_model=AssetListResponse,
    summary="Search assets",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_assets(
        request: Request,  # Required for rate limiting
        search: str | None = Query(
            default=None,
            max_length=100,
            description="Partial symbol or name (case-insensitive)",
        ),
        asset_type: AssetType | None = Query(default=None),
        currency: str | None = Query(default=None, min_length=3, max_length=3),
        skip: int = Query(default=0, ge=0),
        limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
        db: Session = Depends(get_db),
        service: AssetService = Depends(get_asset_service),
) -> AssetListResponse:
    result = service.search_assets(
        db,
        search=search,
        asset_type=asset_type,
        currency=currency,
        limit=limit,
        offset=skip,
    )
    return AssetListResponse(
        items=[_map_asset(a) for a in result.items],
        pagination=PaginationMeta.create(total=result.total, skip=skip, limit=limit),
    )


@router.get(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Get asset",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_asset(
        request: Request,  # Required for rate limiting
        asset_id: int,
        db: Session = Depends(get_db),
        service: AssetService = Depends(get_asset_service),
) -> AssetResponse:
    """Raises **404** if the asset does not exist."""
    return _map_asset(service.get_asset(db, asset_id))


# =============================================================================
# PRICES
# =============================================================================

@router.get(
    "/{asset_id}/price",
    response_model=AssetPriceResponse,
    summary="Get current price",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_current_price(
        request: Request,  # Required for rate limiting
        asset_id: int,
        currency: str = Query(
            default=settings.base_currency,
            min_length=3,
            max_length=3,
            description="Currency of the returned price",
        ),
        db: Session = Depends(get_db),
        asset_service: AssetService = Depends(get_asset_service),
        price_service: PriceService = Depends(get_price_service),
        currency_service: CurrencyService = Depends(get_currency_service),
) -> AssetPriceResponse:
    """
    Latest recorded price, converted when it was recorded in another currency.

    An asset that has never been priced gets a placeholder price of 100.
    """
    asset = asset_service.get_asset(db, asset_id)
    code = currency.strip().upper()
    price = price_service.get_current_price(db, asset.id, code)
    return AssetPriceResponse(
        asset_id=asset.id,
        symbol=asset.symbol,
        price=price,
        currency=code,
        formatted=currency_service.format_currency(price, code),
    )


@router.get(
    "/{asset_id}/prices",
    response_model=PriceHistoryResponse,
    summary="Get recorded prices",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_price_history(
        request: Request,  # Required for rate limiting
        asset_id: int,
        from_date: date | None = Query(default=None, description="Start date (default: 30 days before to_date)"),
        to_date: date | None = Query(default=None, description="End date, inclusive (default: today)"),
        db: Session = Depends(get_db),
        asset_service: AssetService = Depends(get_asset_service),
        price_service: PriceService = Depends(get_price_service),
) -> PriceHistoryResponse:
    """Snapshots recorded between the two dates, oldest first."""
    asset = asset_service.get_asset(db, asset_id)

    end = to_date or date.today()
    start = from_date or end - timedelta(days=DEFAULT_PRICE_RANGE_DAYS)
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from_date must be before or equal to to_date",
        )
    if (end - start).days > MAX_PRICE_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range cannot exceed {MAX_PRICE_RANGE_DAYS} days",
        )

    snapshots = price_service.get_price_history(
        db,
        asset.id,
        datetime.combine(start, time.min, tzinfo=timezone.utc),
        datetime.combine(end, time.max, tzinfo=timezone.utc),
    )
    return PriceHistoryResponse(
        asset_id=asset.id,
        snapshots=[PriceSnapshotResponse.model_validate(s) for s in snapshots],
    )


@router.post(
    "/{asset_id}/prices",
    response_model=PriceSnapshotResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a price",
)
@limiter.limit(RATE_LIMIT_WRITE)
def record_price(
        request: Request,  # Required for rate limiting
        asset_id: int,
        payload: PriceRecordCreate,
        db: Session = Depends(get_db),
        asset_service: AssetService = Depends(get_asset_service),
        price_service: PriceService = Depends(get_price_service),
) -> PriceSnapshotResponse:
    """
    Record a manual price snapshot. It becomes the current price when its
    as_of is the latest for the asset.
    """
    asset = asset_service.get_asset(db, asset_id)
    snapshot = price_service.update_price_for_asset(
        db,
        asset.id,
        payload.price,
        payload.currency,
        as_of=payload.as_of,
    )
    return PriceSnapshotResponse.model_validate(snapshot)
