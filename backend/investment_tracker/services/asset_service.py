# backend/investment_tracker/services/asset_service.py
"""
Asset Service - global asset registry shared by all users.

Responsibilities:
- Find-or-create assets by symbol when an acquisition references them
- Look up asset details (memoized for CACHE_REFERENCE_TTL_SECONDS)
- Search assets by symbol or name with optional type/currency filters

Symbols are normalized to upper case on write and on lookup, so "thyao"
and "THYAO" resolve to the same asset.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from investment_tracker.models import Asset, AssetType
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.constants import (
    DEFAULT_ACQUISITION_CURRENCY,
    DEFAULT_PAGE_SIZE,
    VIEW_ASSET,
)
from investment_tracker.services.currency_service import normalize_currency
from investment_tracker.services.exceptions import AssetNotFoundError, ValidationError
from investment_tracker.utils.sql import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class AssetInfo:
    """Session-independent snapshot of an asset row."""

    id: int
    symbol: str
    name: str
    asset_type: AssetType
    currency: str
    description: str | None = None

    @classmethod
    def from_model(cls, asset: Asset) -> "AssetInfo":
        return cls(
            id=asset.id,
            symbol=asset.symbol,
            name=asset.name,
            asset_type=asset.asset_type,
            currency=asset.currency,
            description=asset.description,
        )


@dataclass(frozen=True)
class AssetSearchResult:
    """One page of search results plus the total match count."""

    items: list[AssetInfo]
    total: int
    limit: int
    offset: int


def normalize_symbol(symbol: str) -> str:
    """
    Return the canonical (stripped, upper-case) symbol.

    Raises:
        ValidationError: If the symbol is blank
    """
    normalized = (symbol or "").strip().upper()
    if not normalized:
        raise ValidationError("Asset symbol must not be empty", field="symbol")
    return normalized


# =============================================================================
# SERVICE
# =============================================================================

class AssetService:
    """Registry operations over the assets table."""

    def __init__(self, cache: ViewCache, reference_ttl_seconds: float = 3600) -> None:
        self._cache = cache
        self._ttl = reference_ttl_seconds

    def find_by_symbol(self, db: Session, symbol: str) -> Asset | None:
        query = select(Asset).where(Asset.symbol == normalize_symbol(symbol))
        return db.scalars(query).first()

    def find_or_create(
            self,
            db: Session,
            symbol: str,
            name: str | None = None,
            asset_type: AssetType = AssetType.EQUITY,
            currency: str | None = None,
    ) -> Asset:
        """
        Return the asset with this symbol, creating it when unknown.

        New assets default their name to the symbol and their currency to USD.
        The row is flushed, not committed; the caller owns the transaction.
        Call this before staging other rows: a lost creation race rolls the
        session back.
        """
        symbol = normalize_symbol(symbol)
        existing = self.find_by_symbol(db, symbol)
        if existing is not None:
            return existing

        asset = Asset(
            symbol=symbol,
            name=(name or "").strip() or symbol,
            asset_type=asset_type,
            currency=normalize_currency(currency or DEFAULT_ACQUISITION_CURRENCY),
        )
        try:
            db.add(asset)
            db.flush()
        except IntegrityError:
            # Another request created the same symbol first
            db.rollback()
            logger.debug(f"Asset {symbol} created concurrently, reloading")
            existing = self.find_by_symbol(db, symbol)
            if existing is None:
                raise
            return existing

        logger.info(f"Created asset {symbol} ({asset.asset_type.value}, {asset.currency})")
        return asset

    def get_asset(self, db: Session, asset_id: int) -> AssetInfo:
        """
        Get asset details by id.

        Raises:
            AssetNotFoundError: If no asset has this id
        """
        return self._cache.get_or_compute(
            (VIEW_ASSET, asset_id),
            lambda: self._load_asset(db, asset_id),
            self._ttl,
        )

    def search_assets(
            self,
            db: Session,
            search: str | None = None,
            asset_type: AssetType | None = None,
            currency: str | None = None,
            limit: int = DEFAULT_PAGE_SIZE,
            offset: int = 0,
    ) -> AssetSearchResult:
        """Search by partial symbol or name (case-insensitive), ordered by symbol."""
        conditions = []
        if search and search.strip():
            pattern = contains_pattern(search)
            conditions.append(
                or_(
                    Asset.symbol.ilike(pattern, escape=LIKE_ESCAPE),
                    Asset.name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        if asset_type is not None:
            conditions.append(Asset.asset_type == asset_type)
        if currency:
            conditions.append(Asset.currency == normalize_currency(currency))

        count_query = select(func.count(Asset.id)).where(*conditions)
        total = db.scalar(count_query) or 0

        query = (
            select(Asset)
            .where(*conditions)
            .order_by(Asset.symbol.asc())
            .offset(offset)
            .limit(limit)
        )
        items = [AssetInfo.from_model(asset) for asset in db.scalars(query).all()]
        return AssetSearchResult(items=items, total=total, limit=limit, offset=offset)

    def _load_asset(self, db: Session, asset_id: int) -> AssetInfo:
        asset = db.get(Asset, asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_id)
        return AssetInfo.from_model(asset)
