# backend/tests/services/market_data/test_simulated.py
"""
Tests for the simulated quote source and the shared retry behavior.

Test Coverage:
- Random walk bounded to ±2% of the last price
- Random base from the asset type's range when never quoted
- Floor at 0.01
- Retry of QuoteSourceError via tenacity; other errors not retried
"""

import random
from decimal import Decimal

import pytest

from investment_tracker.models import Asset, AssetType
from investment_tracker.services.exceptions import QuoteSourceError
from investment_tracker.services.market_data import QuoteSource, SimulatedQuoteSource


def make_asset(asset_type: AssetType = AssetType.EQUITY) -> Asset:
    return Asset(id=1, symbol="TEST", name="Test", asset_type=asset_type, currency="TRY")


@pytest.fixture
def source() -> SimulatedQuoteSource:
    return SimulatedQuoteSource(rng=random.Random(42), latency_range=None)


class TestSimulatedQuoteSource:
    """Tests for SimulatedQuoteSource.fetch_price."""

    def test_name(self, source):
        assert source.name == "SIMULATED"

    def test_moves_within_two_percent(self, source):
        for _ in range(50):
            price = source.fetch_price(make_asset(), Decimal("150.00"))
            assert Decimal("147.00") <= price <= Decimal("153.00")

    def test_two_decimal_places(self, source):
        price = source.fetch_price(make_asset(), Decimal("123.45"))

        assert price == price.quantize(Decimal("0.01"))

    @pytest.mark.parametrize(
        "asset_type,low,high",
        [
            (AssetType.EQUITY, "98", "510"),
            (AssetType.FX, "24.5", "35.7"),
            (AssetType.PRECIOUS_METAL, "1960", "3060"),
            (AssetType.FUND, "49", "153"),
        ],
    )
    def test_random_base_by_type(self, source, asset_type, low, high):
        """Never-quoted assets start inside their type's range (±2%)."""
        price = source.fetch_price(make_asset(asset_type))

        assert Decimal(low) <= price <= Decimal(high)

    def test_never_below_minimum(self, source):
        price = source.fetch_price(make_asset(), Decimal("0.001"))

        assert price >= Decimal("0.01")

    def test_deterministic_with_seed(self):
        first = SimulatedQuoteSource(rng=random.Random(7), latency_range=None)
        second = SimulatedQuoteSource(rng=random.Random(7), latency_range=None)

        assert first.fetch_price(make_asset(), Decimal("100")) == second.fetch_price(
            make_asset(), Decimal("100")
        )


class FlakyQuoteSource(QuoteSource):
    """Fails a fixed number of times before returning a price."""

    RETRY_MIN_WAIT = 0
    RETRY_MAX_WAIT = 0

    def __init__(self, failures: int, error: Exception | None = None) -> None:
        self.failures = failures
        self.error = error
        self.calls = 0

    @property
    def name(self) -> str:
        return "FLAKY"

    def _quote(self, asset, last_price):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error or QuoteSourceError(self.name, asset.id, "timeout")
        return Decimal("42.00")


class TestRetry:
    """Tests for retries around QuoteSource._quote."""

    def test_recovers_after_transient_failures(self):
        flaky = FlakyQuoteSource(failures=2)

        assert flaky.fetch_price(make_asset()) == Decimal("42.00")
        assert flaky.calls == 3

    def test_gives_up_after_max_attempts(self):
        flaky = FlakyQuoteSource(failures=10)

        with pytest.raises(QuoteSourceError):
            flaky.fetch_price(make_asset())

        assert flaky.calls == QuoteSource.MAX_RETRY_ATTEMPTS

    def test_other_errors_not_retried(self):
        flaky = FlakyQuoteSource(failures=1, error=ValueError("bad data"))

        with pytest.raises(ValueError):
            flaky.fetch_price(make_asset())

        assert flaky.calls == 1

    def test_non_positive_quote_rejected(self):
        flaky = FlakyQuoteSource(failures=0)
        flaky._quote = lambda asset, last_price: Decimal("0")

        with pytest.raises(QuoteSourceError, match="non-positive"):
            flaky.fetch_price(make_asset())
