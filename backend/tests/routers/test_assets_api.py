# backend/tests/routers/test_assets_api.py
"""
Integration tests for Asset API endpoints.

These tests verify full HTTP request/response cycles for:
- GET /assets (search, filters, pagination)
- GET /assets/{id}
- GET /assets/{id}/price (conversion, placeholder price)
- GET /assets/{id}/prices (date range validation)
- POST /assets/{id}/prices
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from investment_tracker.models import AssetType
from tests.conftest import create_asset, create_snapshot


@pytest.fixture
def assets(db):
    return {
        "thyao": create_asset(db, "THYAO", "Turk Hava Yollari"),
        "aapl": create_asset(db, "AAPL", "Apple Inc.", currency="USD"),
        "xau": create_asset(db, "XAU", "Gold", asset_type=AssetType.COMMODITY, currency="USD"),
    }


class TestListAssets:
    """Tests for GET /assets."""

    def test_list_all(self, client, assets):
        response = client.get("/assets")

        assert response.status_code == 200
        data = response.json()
        assert data["pagination"]["total"] == 3
        assert len(data["items"]) == 3

    def test_search_symbol_or_name(self, client, assets):
        by_symbol = client.get("/assets?search=aap").json()
        by_name = client.get("/assets?search=hava").json()

        assert [a["symbol"] for a in by_symbol["items"]] == ["AAPL"]
        assert [a["symbol"] for a in by_name["items"]] == ["THYAO"]

    def test_filter_by_type_and_currency(self, client, assets):
        commodities = client.get("/assets?asset_type=COMMODITY").json()
        usd = client.get("/assets?currency=usd").json()

        assert [a["symbol"] for a in commodities["items"]] == ["XAU"]
        assert {a["symbol"] for a in usd["items"]} == {"AAPL", "XAU"}

    def test_pagination(self, client, assets):
        data = client.get("/assets?skip=2&limit=2").json()

        assert len(data["items"]) == 1
        assert data["pagination"]["page"] == 2
        assert data["pagination"]["has_next"] is False

    def test_limit_out_of_range(self, client):
        assert client.get("/assets?limit=0").status_code == 422


class TestGetAsset:
    """Tests for GET /assets/{id}."""

    def test_found(self, client, assets):
        data = client.get(f"/assets/{assets['xau'].id}").json()

        assert data["symbol"] == "XAU"
        assert data["asset_type"] == "COMMODITY"
        assert data["currency"] == "USD"

    def test_not_found(self, client):
        response = client.get("/assets/999")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "AssetNotFoundError"
        assert data["details"] == {"asset": 999}


class TestCurrentPrice:
    """Tests for GET /assets/{id}/price."""

    def test_native_currency(self, client, db, assets):
        create_snapshot(db, assets["aapl"], Decimal("60"))

        data = client.get(f"/assets/{assets['aapl'].id}/price?currency=USD").json()

        assert Decimal(data["price"]) == Decimal("60")
        assert data["formatted"] == "$60.00"

    def test_converted_to_base_by_default(self, client, db, assets):
        create_snapshot(db, assets["aapl"], Decimal("60"))

        data = client.get(f"/assets/{assets['aapl'].id}/price").json()

        assert data["currency"] == "TRY"
        assert Decimal(data["price"]) == Decimal("1890.00")
        assert data["formatted"] == "₺1890.00"

    def test_placeholder_for_unpriced_asset(self, client, assets):
        data = client.get(f"/assets/{assets['thyao'].id}/price").json()

        assert Decimal(data["price"]) == Decimal("100")

    def test_unknown_asset(self, client):
        assert client.get("/assets/999/price").status_code == 404


class TestPriceHistory:
    """Tests for GET /assets/{id}/prices."""

    def test_range(self, client, db, assets):
        now = datetime.now(timezone.utc)
        create_snapshot(db, assets["thyao"], Decimal("100"), as_of=now - timedelta(days=40))
        create_snapshot(db, assets["thyao"], Decimal("105"), as_of=now - timedelta(days=5))
        create_snapshot(db, assets["thyao"], Decimal("110"), as_of=now)

        data = client.get(f"/assets/{assets['thyao'].id}/prices").json()

        assert [Decimal(s["price"]) for s in data["snapshots"]] == [Decimal("105"), Decimal("110")]

    def test_from_after_to(self, client, assets):
        response = client.get(
            f"/assets/{assets['thyao'].id}/prices?from_date=2024-02-01&to_date=2024-01-01"
        )

        assert response.status_code == 400
        assert response.json()["error"] == "BadRequestError"

    def test_range_too_long(self, client, assets):
        response = client.get(
            f"/assets/{assets['thyao'].id}/prices?from_date=2000-01-01&to_date=2024-01-01"
        )

        assert response.status_code == 400


class TestRecordPrice:
    """Tests for POST /assets/{id}/prices."""

    def test_recorded_and_becomes_current(self, client, assets):
        asset_id = assets["thyao"].id
        client.get(f"/assets/{asset_id}/price")

        response = client.post(f"/assets/{asset_id}/prices", json={"price": "123.45", "currency": "try"})

        assert response.status_code == 201
        data = response.json()
        assert data["currency"] == "TRY"
        assert data["source"] == "MANUAL"

        current = client.get(f"/assets/{asset_id}/price").json()
        assert Decimal(current["price"]) == Decimal("123.45")

    def test_rejects_non_positive(self, client, assets):
        response = client.post(f"/assets/{assets['thyao'].id}/prices", json={"price": "0", "currency": "TRY"})

        assert response.status_code == 422

    def test_unknown_asset(self, client):
        response = client.post("/assets/999/prices", json={"price": "10", "currency": "TRY"})

        assert response.status_code == 404
