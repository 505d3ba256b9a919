# backend/investment_tracker/services/market_data/refresh_service.py
"""
Price refresh for every held asset.

One cycle:
1. Collect the distinct asset ids that appear in any acquisition lot
2. For each asset, ask the quote source for a new price
3. Record it as a REAL_TIME_UPDATE snapshot in the refresh currency
4. Sleep briefly between assets to pace the upstream source

A failure on one asset is logged and counted; the cycle continues with the
next asset. Cached portfolio views are not evicted here and pick up the new
prices when they expire.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from investment_tracker.models import AcquisitionLot, Asset
from investment_tracker.services.constants import PIVOT_CURRENCY, PRICE_SOURCE_REAL_TIME
from investment_tracker.services.exceptions import ServiceError
from investment_tracker.services.market_data.base import QuoteSource
from investment_tracker.services.price_service import PriceService

logger = logging.getLogger(__name__)


@dataclass
class PriceRefreshResult:
    """Outcome of one refresh cycle."""

    started_at: datetime
    attempted: int = 0
    succeeded: int = 0
    failed_asset_ids: list[int] = field(default_factory=list)
    completed_at: datetime | None = None

    @property
    def failed(self) -> int:
        return len(self.failed_asset_ids)

    @property
    def all_successful(self) -> bool:
        return not self.failed_asset_ids


class PriceRefreshService:
    """
    Pulls fresh quotes for held assets and stores them as snapshots.

    Attributes:
        _prices: Snapshot store
        _source: Quote source
        _currency: Currency of recorded refresh prices
        _pacing: Pause between assets in seconds
    """

    def __init__(
            self,
            price_service: PriceService,
            quote_source: QuoteSource,
            currency: str = PIVOT_CURRENCY,
            pacing_seconds: float = 0.1,
    ) -> None:
        self._prices = price_service
        self._source = quote_source
        self._currency = currency
        self._pacing = pacing_seconds

        logger.info(
            f"PriceRefreshService initialized "
            f"(source={self._source.name}, currency={self._currency}, pacing={self._pacing}s)"
        )

    def get_held_asset_ids(self, db: Session) -> list[int]:
        """Distinct asset ids referenced by any acquisition lot, ascending."""
        query = select(AcquisitionLot.asset_id).distinct().order_by(AcquisitionLot.asset_id)
        return list(db.scalars(query).all())

    def refresh_all_prices(self, db: Session) -> PriceRefreshResult:
        """Run one refresh cycle over every held asset."""
        result = PriceRefreshResult(started_at=datetime.now(timezone.utc))
        asset_ids = self.get_held_asset_ids(db)

        logger.info(f"Starting price refresh for {len(asset_ids)} held assets")

        for index, asset_id in enumerate(asset_ids):
            result.attempted += 1
            if self.refresh_asset_price(db, asset_id):
                result.succeeded += 1
            else:
                result.failed_asset_ids.append(asset_id)

            if self._pacing > 0 and index < len(asset_ids) - 1:
                time.sleep(self._pacing)

        result.completed_at = datetime.now(timezone.utc)
        logger.info(
            f"Price refresh finished: {result.succeeded}/{result.attempted} updated, "
            f"{result.failed} failed"
        )
        return result

    def refresh_asset_price(self, db: Session, asset_id: int) -> bool:
        """
        Fetch and record a new price for one asset.

        Returns:
            True if a snapshot was recorded, False on any failure (logged)
        """
        asset = db.get(Asset, asset_id)
        if asset is None:
            logger.warning(f"Asset not found for ID: {asset_id}")
            return False

        try:
            last_price = None
            if self._prices.get_latest_snapshot(db, asset_id) is not None:
                last_price = self._prices.get_current_price(db, asset_id, self._currency)

            new_price = self._source.fetch_price(asset, last_price)
            self._prices.update_price_for_asset(
                db,
                asset_id,
                new_price,
                self._currency,
                source=PRICE_SOURCE_REAL_TIME,
            )
            logger.debug(f"Updated price for {asset.symbol} ({asset_id}): {new_price}")
            return True

        except ServiceError as e:
            logger.error(f"Failed to update price for {asset.symbol} ({asset_id}): {e}")
            return False
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error updating price for asset {asset_id}: {e}")
            return False
        except Exception as e:
            db.rollback()
            logger.error(
                f"Unexpected error updating price for {asset.symbol} ({asset_id}): {e}",
                exc_info=True,
            )
            return False
