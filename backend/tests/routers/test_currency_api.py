# backend/tests/routers/test_currency_api.py
"""
Integration tests for Currency API endpoints.

Rates start from the default TRY-quoted table (1 USD = 31.50 TRY).
"""

from decimal import Decimal

from tests.conftest import create_asset, create_snapshot


class TestConvert:
    """Tests for GET /currency/convert."""

    def test_usd_to_try(self, client):
        response = client.get("/currency/convert?amount=100&from=USD&to=TRY")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["converted"]) == Decimal("3150.00")
        assert Decimal(data["rate"]) == Decimal("31.50")
        assert data["formatted"] == "₺3150.00"

    def test_codes_normalized(self, client):
        data = client.get("/currency/convert?amount=10&from=usd&to=eur").json()

        assert data["from_currency"] == "USD"
        assert data["to_currency"] == "EUR"

    def test_malformed_code(self, client):
        response = client.get("/currency/convert?amount=100&from=US&to=TRY")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "ValidationError"
        assert data["details"] == {"field": "currency"}

    def test_unknown_pair_converts_at_one(self, client):
        data = client.get("/currency/convert?amount=10&from=CHF&to=TRY").json()

        assert Decimal(data["converted"]) == Decimal("10.00")

    def test_missing_amount(self, client):
        assert client.get("/currency/convert?from=USD&to=TRY").status_code == 422


class TestRates:
    """Tests for GET /currency/rate and PUT /currency/rates."""

    def test_inverse_rate(self, client):
        data = client.get("/currency/rate?from=TRY&to=USD").json()

        assert Decimal(data["rate"]) == Decimal("0.031746")

    def test_update_stores_inverse(self, client):
        response = client.put(
            "/currency/rates",
            json={"from_currency": "USD", "to_currency": "TRY", "rate": "32"},
        )

        assert response.status_code == 200
        assert Decimal(response.json()["rate"]) == Decimal("32")

        inverse = client.get("/currency/rate?from=TRY&to=USD").json()
        assert Decimal(inverse["rate"]) == Decimal("0.031250")

    def test_update_rejects_non_positive(self, client):
        response = client.put(
            "/currency/rates",
            json={"from_currency": "USD", "to_currency": "TRY", "rate": "0"},
        )

        assert response.status_code == 422

    def test_update_rejects_same_currency(self, client):
        response = client.put(
            "/currency/rates",
            json={"from_currency": "TRY", "to_currency": "TRY", "rate": "2"},
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "to_currency"}

    def test_update_reprices_memoized_prices(self, client, db):
        asset = create_asset(db, "AAPL", currency="USD")
        create_snapshot(db, asset, Decimal("10"))
        before = client.get(f"/assets/{asset.id}/price?currency=TRY").json()

        client.put(
            "/currency/rates",
            json={"from_currency": "USD", "to_currency": "TRY", "rate": "40"},
        )
        after = client.get(f"/assets/{asset.id}/price?currency=TRY").json()

        assert Decimal(before["price"]) == Decimal("315.00")
        assert Decimal(after["price"]) == Decimal("400.00")


class TestSupported:
    def test_supported(self, client):
        data = client.get("/currency/supported").json()

        assert data["base_currency"] == "TRY"
        assert data["currencies"] == ["EUR", "GBP", "JPY", "TRY", "USD"]
