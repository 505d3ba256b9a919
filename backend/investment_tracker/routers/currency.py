# backend/investment_tracker/routers/currency.py
"""
Currency endpoints.

- GET /currency/convert - Convert an amount between currencies
- GET /currency/rate - Exchange rate for a pair
- PUT /currency/rates - Override a rate (inverse stored too)
- GET /currency/supported - Currencies with a rate path to the base currency

Unknown pairs resolve to a rate of 1 (logged), so conversion never fails
for well-formed codes.
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request

from investment_tracker.dependencies import get_currency_service, get_view_cache
from investment_tracker.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT, RATE_LIMIT_WRITE
from investment_tracker.schemas.currency import (
    ConversionResponse,
    ExchangeRateResponse,
    ExchangeRateUpdate,
    SupportedCurrenciesResponse,
)
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.constants import VIEW_PRICE
from investment_tracker.services.currency_service import CurrencyService, normalize_currency

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/currency",
    tags=["Currency"],
)


@router.get(
    "/convert",
    response_model=ConversionResponse,
    summary="Convert an amount",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def convert_amount(
        request: Request,  # Required for rate limiting
        amount: Decimal = Query(..., description="Amount in from_currency"),
        from_currency: str = Query(..., alias="from", examples=["USD"]),
        to_currency: str = Query(..., alias="to", examples=["TRY"]),
        service: CurrencyService = Depends(get_currency_service),
) -> ConversionResponse:
    """
    Convert using the current rate table, rounded to 2 decimal places.

    Example: 100 USD -> TRY = **3150.00** with the seeded rates.

    Raises **400** for a malformed currency code.
    """
    source = normalize_currency(from_currency)
    target = normalize_currency(to_currency)
    converted = service.convert(amount, source, target)
    return ConversionResponse(
        amount=amount,
        from_currency=source,
        to_currency=target,
        rate=service.get_exchange_rate(source, target),
        converted=converted,
        formatted=service.format_currency(converted, target),
    )


@router.get(
    "/rate",
    response_model=ExchangeRateResponse,
    summary="Get an exchange rate",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_rate(
        request: Request,  # Required for rate limiting
        from_currency: str = Query(..., alias="from"),
        to_currency: str = Query(..., alias="to"),
        service: CurrencyService = Depends(get_currency_service),
) -> ExchangeRateResponse:
    source = normalize_currency(from_currency)
    target = normalize_currency(to_currency)
    return ExchangeRateResponse(
        from_currency=source,
        to_currency=target,
        rate=service.get_exchange_rate(source, target),
    )


@router.put(
    "/rates",
    response_model=ExchangeRateResponse,
    summary="Update an exchange rate",
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_rate(
        request: Request,  # Required for rate limiting
        payload: ExchangeRateUpdate,
        service: CurrencyService = Depends(get_currency_service),
        cache: ViewCache = Depends(get_view_cache),
) -> ExchangeRateResponse:
    """
    Store a rate and its inverse.

    Memoized converted prices are evicted. Portfolio views pick up the new
    rate when their cache entries expire.
    """
    service.update_exchange_rate(payload.from_currency, payload.to_currency, payload.rate)
    evicted = cache.invalidate((VIEW_PRICE,))
    logger.info(f"Evicted {evicted} memoized prices after rate update")

    return ExchangeRateResponse(
        from_currency=payload.from_currency,
        to_currency=payload.to_currency,
        rate=service.get_exchange_rate(payload.from_currency, payload.to_currency),
    )


@router.get(
    "/supported",
    response_model=SupportedCurrenciesResponse,
    summary="List supported currencies",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_supported(
        request: Request,  # Required for rate limiting
        service: CurrencyService = Depends(get_currency_service),
) -> SupportedCurrenciesResponse:
    return SupportedCurrenciesResponse(
        base_currency=service.pivot_currency,
        currencies=service.supported_currencies(),
    )
