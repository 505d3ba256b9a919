# backend/investment_tracker/services/analytics/allocation.py
"""
Allocation and top-mover calculations over per-asset position values.

Both are pure functions of PositionValue lists produced by
ValuationService.compute_position_values().

Top movers use a fixed approximation (3% of each position's value) rather
than a measured daily move; the ranking is therefore by position size in
practice. See TOP_MOVER_CHANGE_RATE.
"""

from collections.abc import Sequence
from decimal import Decimal

from investment_tracker.models import AssetType
from investment_tracker.services.constants import (
    ALLOCATION_COLORS,
    DEFAULT_TOP_MOVERS_LIMIT,
    TOP_MOVER_CHANGE_RATE,
    ZERO,
)
from investment_tracker.services.exceptions import ValidationError
from investment_tracker.services.valuation.types import (
    AllocationSlice,
    PerformanceStatus,
    PositionValue,
    TopMover,
)
from investment_tracker.utils.money import percent_of, round_money


def calculate_allocation(positions: Sequence[PositionValue]) -> list[AllocationSlice]:
    """
    Group position values by asset type.

    Colors come from the palette in first-seen order of asset type and
    wrap around when there are more types than colors. The result is
    sorted by value, largest first. Percentages are 0 when the total is 0.
    """
    totals: dict[AssetType, Decimal] = {}
    for position in positions:
        totals[position.asset_type] = totals.get(position.asset_type, ZERO) + position.value

    grand_total = sum(totals.values(), ZERO)

    slices = [
        AllocationSlice(
            asset_type=asset_type,
            value=round_money(value),
            percent=percent_of(value, grand_total),
            color=ALLOCATION_COLORS[index % len(ALLOCATION_COLORS)],
        )
        for index, (asset_type, value) in enumerate(totals.items())
    ]
    slices.sort(key=lambda s: s.value, reverse=True)
    return slices


def calculate_top_movers(
        positions: Sequence[PositionValue],
        limit: int = DEFAULT_TOP_MOVERS_LIMIT,
) -> list[TopMover]:
    """
    Rank positions by absolute change percent (ties: larger value first).

    Raises:
        ValidationError: If limit < 1
    """
    if limit < 1:
        raise ValidationError(f"limit must be at least 1, got {limit}", field="limit")

    movers = []
    for position in positions:
        change = position.value * TOP_MOVER_CHANGE_RATE
        movers.append(TopMover(
            asset_id=position.asset_id,
            symbol=position.symbol,
            name=position.name,
            value=round_money(position.value),
            change=round_money(change),
            change_percent=percent_of(change, position.value),
            direction=PerformanceStatus.UP if change >= ZERO else PerformanceStatus.DOWN,
        ))

    movers.sort(key=lambda m: (abs(m.change_percent), m.value), reverse=True)
    return movers[:limit]
