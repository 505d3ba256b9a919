# backend/investment_tracker/jobs/price_refresh.py
"""Scheduled price refresh over every held asset."""

import logging

from investment_tracker.database import SessionLocal
from investment_tracker.services.market_data import PriceRefreshResult

logger = logging.getLogger(__name__)


def run_price_refresh() -> PriceRefreshResult:
    """
    Run one refresh cycle in its own database session, after giving the
    rate table a chance to refresh.

    Per-asset failures are counted in the result. Errors outside the
    per-asset loop propagate so the scheduler listener records them.
    """
    from investment_tracker.dependencies import get_currency_service, get_price_refresh_service

    get_currency_service().refresh_exchange_rates()
    service = get_price_refresh_service()
    db = SessionLocal()
    try:
        result = service.refresh_all_prices(db)
        if result.failed_asset_ids:
            logger.warning(f"Price refresh failed for assets: {result.failed_asset_ids}")
        return result
    finally:
        db.close()
