# backend/investment_tracker/services/market_data/simulated.py
"""
Simulated quote source.

Stands in for a real market data feed. Each quote starts from the last
stored price (or a random base drawn from the asset type's range when the
asset has never been quoted) and moves it by up to ±2%, never below 0.01.

An optional sleep imitates upstream latency; pass latency_range=None to
disable it (tests do).
"""

import logging
import random
import time
from decimal import Decimal

from investment_tracker.models import Asset
from investment_tracker.services.constants import (
    CURRENCY_PRECISION,
    DEFAULT_SIMULATED_PRICE_RANGE,
    MIN_SIMULATED_PRICE,
    SIMULATED_LATENCY_SECONDS,
    SIMULATED_PRICE_MAX_MOVE,
    SIMULATED_PRICE_RANGES,
)
from investment_tracker.services.market_data.base import QuoteSource
from investment_tracker.utils.money import round_money

logger = logging.getLogger(__name__)


class SimulatedQuoteSource(QuoteSource):
    """
    Random-walk quote generator.

    Example:
        source = SimulatedQuoteSource(rng=random.Random(42), latency_range=None)
        price = source.fetch_price(asset, last_price=Decimal("150.00"))
        # 147.00 <= price <= 153.00
    """

    def __init__(
            self,
            rng: random.Random | None = None,
            latency_range: tuple[float, float] | None = SIMULATED_LATENCY_SECONDS,
    ) -> None:
        self._rng = rng or random.Random()
        self._latency_range = latency_range

    @property
    def name(self) -> str:
        return "SIMULATED"

    def _quote(self, asset: Asset, last_price: Decimal | None) -> Decimal:
        if self._latency_range is not None:
            time.sleep(self._rng.uniform(*self._latency_range))

        base = last_price if last_price is not None and last_price > 0 else self._random_base(asset)

        # Uniform move in [-MAX_MOVE, +MAX_MOVE]
        move = Decimal(str(self._rng.uniform(-1.0, 1.0))) * SIMULATED_PRICE_MAX_MOVE
        price = max(base * (Decimal("1") + move), MIN_SIMULATED_PRICE)

        quoted = max(round_money(price), CURRENCY_PRECISION)
        logger.debug(f"Simulated quote for {asset.symbol}: {base} -> {quoted}")
        return quoted

    def _random_base(self, asset: Asset) -> Decimal:
        type_name = getattr(asset.asset_type, "value", asset.asset_type)
        low, high = SIMULATED_PRICE_RANGES.get(type_name, DEFAULT_SIMULATED_PRICE_RANGE)
        return low + (high - low) * Decimal(str(self._rng.random()))
