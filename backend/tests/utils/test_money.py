# backend/tests/utils/test_money.py
"""
Tests for Decimal rounding helpers.
"""

from decimal import Decimal

from investment_tracker.utils.money import percent_of, round_money, round_percent, round_rate


class TestRounding:
    """All rounding is half-up, never banker's rounding."""

    def test_round_money_half_up(self):
        assert round_money(Decimal("2.675")) == Decimal("2.68")
        assert round_money(Decimal("2.665")) == Decimal("2.67")
        assert round_money(Decimal("-1.005")) == Decimal("-1.01")

    def test_round_percent(self):
        assert round_percent(Decimal("9.4527")) == Decimal("9.45")

    def test_round_rate_six_places(self):
        assert round_rate(Decimal("1") / Decimal("31.50")) == Decimal("0.031746")


class TestPercentOf:
    def test_basic(self):
        assert percent_of(Decimal("95"), Decimal("1005")) == Decimal("9.45")

    def test_zero_denominator(self):
        """Division by zero yields 0 instead of raising."""
        assert percent_of(Decimal("10"), Decimal("0")) == Decimal("0.00")

    def test_negative_part(self):
        assert percent_of(Decimal("-50"), Decimal("200")) == Decimal("-25.00")
