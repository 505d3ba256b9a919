# backend/investment_tracker/services/price_service.py
"""
Price Service - current and historical prices from price snapshots.

Snapshots are append-only; the current price of an asset is the snapshot
with the latest as_of. Current prices are memoized per (asset, currency)
for CACHE_PRICE_TTL_SECONDS and evicted whenever a new snapshot is recorded
for the asset.

When an asset has never been priced, get_current_price() stores a
placeholder snapshot (source "DEFAULT", price 100 in the requested currency)
so the asset can still be valued. A real quote replaces it on the next
refresh cycle.

Usage:
    service = PriceService(currency_service=CurrencyService(), cache=ViewCache())

    price = service.get_current_price(db, asset_id=1, currency="TRY")
    service.update_price_for_asset(db, asset_id=1, price=Decimal("105.20"), currency="USD")
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from investment_tracker.models import PriceSnapshot
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.constants import (
    DEFAULT_PLACEHOLDER_PRICE,
    PRICE_SOURCE_DEFAULT,
    PRICE_SOURCE_MANUAL,
    VIEW_PRICE,
    ZERO,
)
from investment_tracker.services.currency_service import normalize_currency
from investment_tracker.services.exceptions import PriceUnavailableError, ValidationError
from investment_tracker.services.protocols import CurrencyConverterProtocol

logger = logging.getLogger(__name__)


class PriceService:
    """
    Reads and records price snapshots.

    Attributes:
        _converter: Converts snapshot prices into the requested currency
        _cache: Shared view cache holding memoized current prices
        _ttl: Expiry of memoized prices in seconds
    """

    def __init__(
            self,
            currency_service: CurrencyConverterProtocol,
            cache: ViewCache,
            price_ttl_seconds: float = 120,
    ) -> None:
        self._converter = currency_service
        self._cache = cache
        self._ttl = price_ttl_seconds

    # =========================================================================
    # READS
    # =========================================================================

    def get_current_price(self, db: Session, asset_id: int, currency: str) -> Decimal:
        """
        Get the current price of an asset expressed in currency.

        Raises:
            PriceUnavailableError: If no snapshot exists and none can be stored
        """
        currency = currency.upper()
        return self._cache.get_or_compute(
            (VIEW_PRICE, asset_id, currency),
            lambda: self._load_current_price(db, asset_id, currency),
            self._ttl,
        )

    def get_latest_snapshot(self, db: Session, asset_id: int) -> PriceSnapshot | None:
        query = (
            select(PriceSnapshot)
            .where(PriceSnapshot.asset_id == asset_id)
            .order_by(PriceSnapshot.as_of.desc(), PriceSnapshot.id.desc())
            .limit(1)
        )
        return db.scalars(query).first()

    def get_previous_close(
            self,
            db: Session,
            asset_id: int,
            before: datetime,
    ) -> PriceSnapshot | None:
        """Latest snapshot strictly before the given instant."""
        query = (
            select(PriceSnapshot)
            .where(
                PriceSnapshot.asset_id == asset_id,
                PriceSnapshot.as_of < before,
            )
            .order_by(PriceSnapshot.as_of.desc(), PriceSnapshot.id.desc())
            .limit(1)
        )
        return db.scalars(query).first()

    def get_price_history(
            self,
            db: Session,
            asset_id: int,
            start: datetime,
            end: datetime,
    ) -> list[PriceSnapshot]:
        """Snapshots with start <= as_of <= end, oldest first."""
        query = (
            select(PriceSnapshot)
            .where(
                PriceSnapshot.asset_id == asset_id,
                PriceSnapshot.as_of >= start,
                PriceSnapshot.as_of <= end,
            )
            .order_by(PriceSnapshot.as_of.asc(), PriceSnapshot.id.asc())
        )
        return list(db.scalars(query).all())

    # =========================================================================
    # WRITES
    # =========================================================================

    def update_price_for_asset(
            self,
            db: Session,
            asset_id: int,
            price: Decimal,
            currency: str,
            source: str = PRICE_SOURCE_MANUAL,
            as_of: datetime | None = None,
    ) -> PriceSnapshot:
        """
        Record a new price snapshot and evict the asset's memoized prices.

        Raises:
            ValidationError: If price is not positive
            UnsupportedCurrencyError: If currency is malformed
        """
        if price <= ZERO:
            raise ValidationError(f"Price must be positive, got {price}", field="price")

        snapshot = self._record(db, asset_id, price, normalize_currency(currency), source, as_of)
        self._cache.invalidate((VIEW_PRICE, asset_id))

        logger.info(
            f"Recorded price for asset {asset_id}: {snapshot.price} {snapshot.currency} "
            f"(source={source})"
        )
        return snapshot

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _load_current_price(self, db: Session, asset_id: int, currency: str) -> Decimal:
        snapshot = self.get_latest_snapshot(db, asset_id)

        if snapshot is None:
            logger.warning(
                f"No price found for asset {asset_id}, storing placeholder "
                f"{DEFAULT_PLACEHOLDER_PRICE} {currency}"
            )
            try:
                snapshot = self._record(
                    db, asset_id, DEFAULT_PLACEHOLDER_PRICE, currency, PRICE_SOURCE_DEFAULT, None
                )
            except SQLAlchemyError as e:
                db.rollback()
                raise PriceUnavailableError(asset_id, f"could not store placeholder price: {e}") from e

        if snapshot.currency.upper() == currency:
            return snapshot.price
        return self._converter.convert(snapshot.price, snapshot.currency, currency)

    def _record(
            self,
            db: Session,
            asset_id: int,
            price: Decimal,
            currency: str,
            source: str,
            as_of: datetime | None,
    ) -> PriceSnapshot:
        snapshot = PriceSnapshot(
            asset_id=asset_id,
            price=price,
            currency=currency,
            source=source,
            as_of=as_of or datetime.now(timezone.utc),
        )
        db.add(snapshot)
        db.commit()
        db.refresh(snapshot)
        return snapshot
