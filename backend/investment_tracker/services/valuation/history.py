# backend/investment_tracker/services/valuation/history.py
"""
History Synthesizer - daily portfolio value series for a period.

This is a placeholder for true historical valuation. Every day is valued
with TODAY's prices:

    value(d) = Σ_{lots acquired on or before d} quantity × current_price
    value(d) = value(d) × (1 + sin(epoch_day(d)) × 0.05)

The sinusoidal perturbation gives charts a realistic-looking shape. Callers
rely only on the output contract: one point per calendar day from the
period start to the end date inclusive, ascending, no gaps, with
day-over-day change and change percent.

Periods:
    7D, 30D, 90D  → that many days before end_date
    1Y            → one calendar year before end_date
    ALL           → five calendar years before end_date
"""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from investment_tracker.services.constants import (
    HISTORY_PERIOD_DAYS,
    HISTORY_PERIOD_YEARS,
    HISTORY_PERTURBATION_AMPLITUDE,
    ZERO,
)
from investment_tracker.services.exceptions import InvalidPeriodError
from investment_tracker.services.valuation.service import ValuationService
from investment_tracker.services.valuation.types import HistoryPoint
from investment_tracker.utils.money import percent_of, round_money

logger = logging.getLogger(__name__)

_EPOCH = date(1970, 1, 1)


def normalize_period(period: str) -> str:
    """
    Return the canonical period code (case-insensitive input).

    Raises:
        InvalidPeriodError: If the period is not supported
    """
    code = (period or "").strip().upper()
    if code not in HISTORY_PERIOD_DAYS and code not in HISTORY_PERIOD_YEARS:
        raise InvalidPeriodError(period)
    return code


def period_start(period: str, end_date: date) -> date:
    """First day of the window ending on end_date for a (normalized) period."""
    code = normalize_period(period)
    if code in HISTORY_PERIOD_DAYS:
        return end_date - timedelta(days=HISTORY_PERIOD_DAYS[code])

    years = HISTORY_PERIOD_YEARS[code]
    try:
        return end_date.replace(year=end_date.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return end_date.replace(year=end_date.year - years, day=28)


def perturbation_factor(day: date) -> Decimal:
    """1 + sin(days since 1970-01-01) × amplitude."""
    epoch_day = (day - _EPOCH).days
    return Decimal("1") + Decimal(str(math.sin(epoch_day))) * HISTORY_PERTURBATION_AMPLITUDE


class HistorySynthesizer:
    """Builds the synthesized daily value series for a user."""

    def __init__(self, valuation_service: ValuationService) -> None:
        self._valuation = valuation_service

    def compute_history(
            self,
            db: Session,
            user_id: str,
            period: str,
            end_date: date | None = None,
    ) -> list[HistoryPoint]:
        """
        Compute the daily series for period ending on end_date (default today).

        Raises:
            InvalidPeriodError: If the period is not supported
        """
        code = normalize_period(period)
        end = end_date or date.today()
        start = period_start(code, end)

        lots = self._valuation.fetch_lots(db, user_id)
        prices, _ = self._valuation.get_current_prices(db, {lot.asset_id for lot in lots})

        # Lots arrive oldest first; walk them once while stepping through days
        lot_values = [
            (lot.acquisition_date, lot.quantity * prices[lot.asset_id])
            for lot in lots
            if prices.get(lot.asset_id) is not None
        ]
        lot_values.sort(key=lambda item: item[0])

        points: list[HistoryPoint] = []
        held_value = ZERO
        next_lot = 0
        previous_value: Decimal | None = None

        day = start
        while day <= end:
            while next_lot < len(lot_values) and lot_values[next_lot][0] <= day:
                held_value += lot_values[next_lot][1]
                next_lot += 1

            value = round_money(held_value * perturbation_factor(day))
            if previous_value is None:
                change = round_money(ZERO)
                change_percent = round_money(ZERO)
            else:
                change = value - previous_value
                change_percent = percent_of(change, previous_value)

            points.append(HistoryPoint(
                date=day,
                value=value,
                change=change,
                change_percent=change_percent,
            ))
            previous_value = value
            day += timedelta(days=1)

        logger.debug(
            f"History for user {user_id}: period={code} {start}..{end} ({len(points)} points)"
        )
        return points
