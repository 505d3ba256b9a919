# backend/investment_tracker/dependencies.py
"""
Dependency injection module for FastAPI services.

Services are singletons shared across all requests, so the view cache and
the exchange rate table are shared too. They are lazily initialized on
first use to avoid import-time side effects.

Usage in routers:
    from investment_tracker.dependencies import get_portfolio_service, get_current_user_id

    @router.get("/summary")
    def get_summary(
        user_id: str = Depends(get_current_user_id),
        service: PortfolioService = Depends(get_portfolio_service),
    ):
        ...
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Header, HTTPException, status

from investment_tracker.config import settings
from investment_tracker.services.asset_service import AssetService
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.currency_service import CurrencyService
from investment_tracker.services.market_data import (
    PriceRefreshService,
    QuoteSource,
    SimulatedQuoteSource,
)
from investment_tracker.services.portfolio_service import PortfolioService
from investment_tracker.services.price_service import PriceService
from investment_tracker.services.valuation import HistorySynthesizer, ValuationService
from investment_tracker.utils.context import set_user_id

logger = logging.getLogger(__name__)

USER_ID_MAX_LENGTH = 64


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_view_cache, get_currency_service, get_quote_source (no deps)
# 2. get_price_service, get_asset_service (cache, currency)
# 3. get_valuation_service (price, currency)
# 4. get_history_synthesizer (valuation)
# 5. get_portfolio_service (asset, valuation, history, cache)
# 6. get_price_refresh_service (price, quote source)


@lru_cache(maxsize=1)
def get_view_cache() -> ViewCache:
    """Shared cache for every derived view, price and asset lookup."""
    logger.debug("Initializing singleton ViewCache")
    return ViewCache(
        max_size=settings.cache_max_size,
        default_ttl_seconds=settings.cache_analytics_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_currency_service() -> CurrencyService:
    logger.debug("Initializing singleton CurrencyService")
    return CurrencyService(pivot_currency=settings.base_currency)


@lru_cache(maxsize=1)
def get_quote_source() -> QuoteSource:
    logger.debug("Initializing singleton SimulatedQuoteSource")
    return SimulatedQuoteSource()


@lru_cache(maxsize=1)
def get_price_service() -> PriceService:
    logger.debug("Initializing singleton PriceService")
    return PriceService(
        currency_service=get_currency_service(),
        cache=get_view_cache(),
        price_ttl_seconds=settings.cache_price_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_asset_service() -> AssetService:
    logger.debug("Initializing singleton AssetService")
    return AssetService(
        cache=get_view_cache(),
        reference_ttl_seconds=settings.cache_reference_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_valuation_service() -> ValuationService:
    logger.debug("Initializing singleton ValuationService")
    return ValuationService(
        price_service=get_price_service(),
        currency_service=get_currency_service(),
        base_currency=settings.base_currency,
    )


@lru_cache(maxsize=1)
def get_history_synthesizer() -> HistorySynthesizer:
    logger.debug("Initializing singleton HistorySynthesizer")
    return HistorySynthesizer(valuation_service=get_valuation_service())


@lru_cache(maxsize=1)
def get_portfolio_service() -> PortfolioService:
    """
    Get the singleton PortfolioService instance.

    Shares a single view cache across all requests so that invalidation
    after an acquisition is seen by every reader.
    """
    logger.debug("Initializing singleton PortfolioService")
    return PortfolioService(
        asset_service=get_asset_service(),
        valuation_service=get_valuation_service(),
        history_synthesizer=get_history_synthesizer(),
        cache=get_view_cache(),
        analytics_ttl_seconds=settings.cache_analytics_ttl_seconds,
        risk_free_rate_percent=settings.risk_free_rate_percent,
    )


@lru_cache(maxsize=1)
def get_price_refresh_service() -> PriceRefreshService:
    logger.debug("Initializing singleton PriceRefreshService")
    return PriceRefreshService(
        price_service=get_price_service(),
        quote_source=get_quote_source(),
        currency=settings.base_currency,
        pacing_seconds=settings.price_refresh_pacing_seconds,
    )


# =============================================================================
# CURRENT USER
# =============================================================================


def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """
    Read the already-authenticated user id from the X-User-Id header.

    Identity is resolved upstream (gateway or auth proxy); this service
    trusts the header.

    Raises:
        HTTPException 401: If the header is missing, blank or too long
    """
    user_id = (x_user_id or "").strip()
    if not user_id or len(user_id) > USER_ID_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid X-User-Id header",
        )

    set_user_id(user_id)
    return user_id
