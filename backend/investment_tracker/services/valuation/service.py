# backend/investment_tracker/services/valuation/service.py
"""
Valuation Service - point-in-time valuation of a user's portfolio.

Entry points:
- compute_summary(): totals, unrealized P&L, today change, FX influence
- compute_position_values(): per-asset current values (allocation, movers)
- fetch_lots() / get_current_prices(): shared loaders used by history

Design Principles:
- Dependency Injection: price lookup and currency converter via constructor
- No HTTP Knowledge: never raises for missing prices; a position without a
  price is valued at zero and a warning is attached to the result
- Each asset's current price is looked up once per computation

Usage:
    service = ValuationService(price_service, currency_service, base_currency="TRY")
    summary = service.compute_summary(db, user_id="user-1")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from investment_tracker.models import AcquisitionLot, Asset, AssetType, PriceSnapshot
from investment_tracker.services.constants import (
    DEFAULT_FX_VOLATILITY_FACTOR,
    FX_VOLATILITY_FACTORS,
    ZERO,
)
from investment_tracker.services.exceptions import PriceUnavailableError
from investment_tracker.services.protocols import CurrencyConverterProtocol, PriceLookupProtocol
from investment_tracker.services.valuation.aggregator import PositionAggregator, lot_cost
from investment_tracker.services.valuation.types import (
    PerformanceStatus,
    PortfolioSummary,
    PositionAggregate,
    PositionValue,
)
from investment_tracker.utils.money import percent_of, round_money

logger = logging.getLogger(__name__)


class ValuationService:
    """
    Values a user's positions in the base currency.

    Attributes:
        base_currency: Currency every result is reported in
        _prices: Current/previous price lookup
        _converter: Currency conversion for costs and snapshot prices
        _aggregator: Groups lots into positions
    """

    def __init__(
            self,
            price_service: PriceLookupProtocol,
            currency_service: CurrencyConverterProtocol,
            base_currency: str = "TRY",
            aggregator: PositionAggregator | None = None,
    ) -> None:
        self.base_currency = base_currency.upper()
        self._prices = price_service
        self._converter = currency_service
        self._aggregator = aggregator or PositionAggregator()

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def compute_summary(self, db: Session, user_id: str) -> PortfolioSummary:
        """
        Compute the portfolio summary for a user.

        A user with no lots gets a NEUTRAL summary with every amount zero.
        """
        lots = self.fetch_lots(db, user_id)
        if not lots:
            return PortfolioSummary.empty(self.base_currency)

        positions = self._aggregator.aggregate(lots)
        assets = self._fetch_assets(db, set(positions))
        prices, warnings = self.get_current_prices(db, positions.keys())

        total_cost, total_fees = self._cost_basis(positions)

        values = self._value_positions(positions, assets, prices)
        total_value = sum((v.value for v in values), ZERO)

        unrealized_pl = total_value - total_cost
        today_change, today_change_percent = self._today_change(db, positions, prices)

        summary = PortfolioSummary(
            base_currency=self.base_currency,
            total_value=round_money(total_value),
            total_cost=round_money(total_cost),
            total_fees=round_money(total_fees),
            unrealized_pl=round_money(unrealized_pl),
            unrealized_pl_percent=percent_of(unrealized_pl, total_cost),
            today_change=round_money(today_change),
            today_change_percent=today_change_percent,
            fx_influence=round_money(self._fx_influence(values)),
            estimated_proceeds=round_money(total_value - total_fees),
            status=PerformanceStatus.UP if unrealized_pl >= ZERO else PerformanceStatus.DOWN,
            position_count=len(positions),
            warnings=tuple(warnings),
        )

        logger.debug(
            f"Summary for user {user_id}: value={summary.total_value} "
            f"cost={summary.total_cost} status={summary.status.value}"
        )
        return summary

    def compute_position_values(
            self,
            db: Session,
            user_id: str,
    ) -> tuple[list[PositionValue], list[str]]:
        """
        Current value of each held asset, in first-acquired order.

        Returns:
            (position values, warnings for positions valued at zero)
        """
        lots = self.fetch_lots(db, user_id)
        if not lots:
            return [], []

        positions = self._aggregator.aggregate(lots)
        assets = self._fetch_assets(db, set(positions))
        prices, warnings = self.get_current_prices(db, positions.keys())
        return self._value_positions(positions, assets, prices), warnings

    def fetch_lots(self, db: Session, user_id: str) -> list[AcquisitionLot]:
        """All lots owned by the user, oldest acquisition first."""
        query = (
            select(AcquisitionLot)
            .where(AcquisitionLot.user_id == user_id)
            .order_by(AcquisitionLot.acquisition_date.asc(), AcquisitionLot.id.asc())
        )
        return list(db.scalars(query).all())

    def get_current_prices(
            self,
            db: Session,
            asset_ids: Iterable[int],
    ) -> tuple[dict[int, Decimal | None], list[str]]:
        """
        Look up each asset's current price in base currency once.

        Unavailable prices map to None and produce a warning.
        """
        prices: dict[int, Decimal | None] = {}
        warnings: list[str] = []

        for asset_id in asset_ids:
            try:
                prices[asset_id] = self._prices.get_current_price(db, asset_id, self.base_currency)
            except PriceUnavailableError as e:
                logger.warning(f"Valuing asset {asset_id} at zero: {e}")
                warnings.append(f"No price available for asset {asset_id}; valued at zero")
                prices[asset_id] = None

        return prices, warnings

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _fetch_assets(self, db: Session, asset_ids: set[int]) -> dict[int, Asset]:
        if not asset_ids:
            return {}
        query = select(Asset).where(Asset.id.in_(asset_ids))
        return {asset.id: asset for asset in db.scalars(query).all()}

    def _cost_basis(self, positions: dict[int, PositionAggregate]) -> tuple[Decimal, Decimal]:
        """Total cost and fees in base currency; each lot is converted before summation."""
        total_cost = ZERO
        total_fees = ZERO
        for position in positions.values():
            for lot in position.lots:
                total_cost += self._converter.convert(lot_cost(lot), lot.currency, self.base_currency)
                total_fees += self._converter.convert(lot.fee, lot.currency, self.base_currency)
        return total_cost, total_fees

    def _value_positions(
            self,
            positions: dict[int, PositionAggregate],
            assets: dict[int, Asset],
            prices: dict[int, Decimal | None],
    ) -> list[PositionValue]:
        values = []
        for asset_id, position in positions.items():
            asset = assets.get(asset_id)
            price = prices.get(asset_id)
            value = round_money(position.quantity * price) if price is not None else round_money(ZERO)
            values.append(PositionValue(
                asset_id=asset_id,
                symbol=asset.symbol if asset else str(asset_id),
                name=asset.name if asset else str(asset_id),
                asset_type=asset.asset_type if asset else AssetType.EQUITY,
                currency=asset.currency if asset else self.base_currency,
                quantity=position.quantity,
                price=price,
                value=value,
            ))
        return values

    def _today_change(
            self,
            db: Session,
            positions: dict[int, PositionAggregate],
            prices: dict[int, Decimal | None],
    ) -> tuple[Decimal, Decimal]:
        """
        Compare each asset's latest snapshot with its previous close.

        The previous close is the latest snapshot strictly before the start
        of the latest snapshot's calendar day. An asset without one uses its
        current value as its own baseline.
        """
        current_total = ZERO
        previous_total = ZERO

        for asset_id, position in positions.items():
            if prices.get(asset_id) is None:
                continue
            latest = self._prices.get_latest_snapshot(db, asset_id)
            if latest is None:
                continue

            day_start = latest.as_of.replace(hour=0, minute=0, second=0, microsecond=0)
            previous = self._prices.get_previous_close(db, asset_id, day_start)

            current_value = position.quantity * self._price_in_base(latest)
            current_total += current_value
            if previous is None:
                previous_total += current_value
            else:
                previous_total += position.quantity * self._price_in_base(previous)

        change = current_total - previous_total
        return change, percent_of(change, previous_total)

    def _price_in_base(self, snapshot: PriceSnapshot) -> Decimal:
        if snapshot.currency.upper() == self.base_currency:
            return snapshot.price
        return self._converter.convert(snapshot.price, snapshot.currency, self.base_currency)

    def _fx_influence(self, values: list[PositionValue]) -> Decimal:
        influence = ZERO
        for position in values:
            currency = position.currency.upper()
            if currency == self.base_currency:
                continue
            factor = FX_VOLATILITY_FACTORS.get(currency, DEFAULT_FX_VOLATILITY_FACTOR)
            influence += position.value * factor
        return influence
