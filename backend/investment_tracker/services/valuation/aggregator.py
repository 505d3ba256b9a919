# backend/investment_tracker/services/valuation/aggregator.py
"""
Position aggregation: group a user's acquisition lots by asset.

Pure calculation, no database access and no currency conversion.
"""

from collections.abc import Iterable
from decimal import Decimal

from investment_tracker.models import AcquisitionLot
from investment_tracker.services.constants import ZERO
from investment_tracker.services.valuation.types import PositionAggregate


def lot_cost(lot: AcquisitionLot) -> Decimal:
    """Cost of one lot in its own currency: quantity × unit price + fee."""
    return lot.quantity * lot.unit_price + (lot.fee or ZERO)


class PositionAggregator:
    """
    Builds per-asset positions from acquisition lots.

    Invariant: for every asset, the aggregate quantity equals the sum of the
    lot quantities, and the position keeps every contributing lot so its cost
    basis can be taken per lot, in that lot's own currency.
    """

    def aggregate(self, lots: Iterable[AcquisitionLot]) -> dict[int, PositionAggregate]:
        """
        Group lots by asset id.

        Returns:
            Mapping asset_id -> PositionAggregate, in first-seen order.
            No lots yields an empty mapping.
        """
        positions: dict[int, PositionAggregate] = {}

        for lot in lots:
            position = positions.get(lot.asset_id)
            if position is None:
                position = positions[lot.asset_id] = PositionAggregate(asset_id=lot.asset_id)

            position.quantity += lot.quantity
            position.lots.append(lot)

        return positions
