# backend/tests/services/valuation/test_history.py
"""
Tests for the history synthesizer.

This module tests:
- Period parsing and window start dates
- One point per calendar day, ascending, no gaps
- Lots only count from their acquisition date
- Day-over-day change fields
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from investment_tracker.services.exceptions import InvalidPeriodError
from investment_tracker.services.valuation.history import (
    normalize_period,
    perturbation_factor,
    period_start,
)
from investment_tracker.utils.money import round_money
from tests.conftest import create_asset, create_lot, create_snapshot

END = date(2024, 5, 10)


class TestPeriods:
    """Tests for normalize_period and period_start."""

    @pytest.mark.parametrize("period", ["7D", "30d", " 90D ", "1y", "ALL"])
    def test_valid_periods(self, period):
        assert normalize_period(period) == period.strip().upper()

    @pytest.mark.parametrize("period", ["", "2W", "365D", "MAX"])
    def test_invalid_periods(self, period):
        with pytest.raises(InvalidPeriodError) as exc_info:
            normalize_period(period)

        assert exc_info.value.period == period

    def test_day_windows(self):
        assert period_start("7D", END) == date(2024, 5, 3)
        assert period_start("30D", END) == date(2024, 4, 10)
        assert period_start("90D", END) == date(2024, 2, 10)

    def test_year_windows(self):
        assert period_start("1Y", END) == date(2023, 5, 10)
        assert period_start("ALL", END) == date(2019, 5, 10)

    def test_leap_day(self):
        """Feb 29 maps to Feb 28 in a non-leap year."""
        assert period_start("1Y", date(2024, 2, 29)) == date(2023, 2, 28)


class TestComputeHistory:
    """Tests for HistorySynthesizer.compute_history."""

    def test_point_count(self, db, history_synthesizer):
        """7D gives 8 points and 30D gives 31 (both ends inclusive)."""
        seven = history_synthesizer.compute_history(db, "user-1", "7D", END)
        thirty = history_synthesizer.compute_history(db, "user-1", "30D", END)

        assert len(seven) == 8
        assert len(thirty) == 31

    def test_ascending_without_gaps(self, db, history_synthesizer):
        points = history_synthesizer.compute_history(db, "user-1", "30D", END)

        assert points[0].date == date(2024, 4, 10)
        assert points[-1].date == END
        for previous, current in zip(points, points[1:]):
            assert current.date - previous.date == timedelta(days=1)

    def test_empty_portfolio_all_zero(self, db, history_synthesizer):
        points = history_synthesizer.compute_history(db, "nobody", "7D", END)

        assert all(p.value == Decimal("0.00") for p in points)
        assert all(p.change_percent == Decimal("0.00") for p in points)

    def test_lot_counts_from_acquisition_date(self, db, history_synthesizer):
        """Value is zero before the lot and quantity × price × perturbation after."""
        asset = create_asset(db)
        create_lot(db, asset, quantity=Decimal("10"), acquisition_date=date(2024, 5, 5))
        create_snapshot(db, asset, Decimal("100"))

        points = {p.date: p for p in history_synthesizer.compute_history(db, "user-1", "7D", END)}

        assert points[date(2024, 5, 4)].value == Decimal("0.00")
        for day in (date(2024, 5, 5), END):
            expected = round_money(Decimal("1000") * perturbation_factor(day))
            assert points[day].value == expected

    def test_change_fields(self, db, history_synthesizer):
        """change compares to the previous point; the first point has none."""
        asset = create_asset(db)
        create_lot(db, asset, quantity=Decimal("10"), acquisition_date=date(2024, 1, 1))
        create_snapshot(db, asset, Decimal("100"))

        points = history_synthesizer.compute_history(db, "user-1", "7D", END)

        assert points[0].change == Decimal("0.00")
        assert points[0].change_percent == Decimal("0.00")
        for previous, current in zip(points, points[1:]):
            assert current.change == current.value - previous.value

    def test_invalid_period(self, db, history_synthesizer):
        with pytest.raises(InvalidPeriodError):
            history_synthesizer.compute_history(db, "user-1", "2W", END)
