# backend/tests/routers/test_portfolio_api.py
"""
Tests for the portfolio API endpoints.

Uses the shared client fixture: in-memory SQLite, fresh service singletons
and a reset rate limiter per test.

Test Coverage:
- X-User-Id header requirement
- POST /portfolio/acquisitions (201, 422 payload errors)
- GET /portfolio/acquisitions
- GET /portfolio/summary (values, NEUTRAL, per-user isolation)
- GET /portfolio/history (periods, 400 on unknown period)
- GET /portfolio/allocation, /top-movers, /analytics
"""

from decimal import Decimal

import pytest


def acquisition_payload(**overrides) -> dict:
    payload = {
        "symbol": "thyao",
        "asset_name": "Turk Hava Yollari",
        "asset_type": "EQUITY",
        "quantity": "10",
        "unit_price": "100",
        "currency": "TRY",
        "fee": "5",
        "acquisition_date": "2024-01-15",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def acquired(client, user_headers) -> dict:
    """One THYAO lot (10 @ 100 TRY, fee 5) priced at 110 TRY."""
    response = client.post("/portfolio/acquisitions", json=acquisition_payload(), headers=user_headers)
    assert response.status_code == 201
    lot = response.json()

    price = client.post(f"/assets/{lot['asset_id']}/prices", json={"price": "110", "currency": "TRY"})
    assert price.status_code == 201
    return lot


class TestUserHeader:
    """The user id header is required on every portfolio endpoint."""

    @pytest.mark.parametrize(
        "path",
        [
            "/portfolio/summary",
            "/portfolio/history",
            "/portfolio/allocation",
            "/portfolio/top-movers",
            "/portfolio/analytics",
            "/portfolio/acquisitions",
        ],
    )
    def test_missing_header(self, client, path):
        response = client.get(path)

        assert response.status_code == 401
        assert response.json()["error"] == "UnauthorizedError"

    def test_blank_header(self, client):
        response = client.get("/portfolio/summary", headers={"X-User-Id": "   "})

        assert response.status_code == 401

    def test_post_requires_header(self, client):
        response = client.post("/portfolio/acquisitions", json=acquisition_payload())

        assert response.status_code == 401


class TestCreateAcquisition:
    """Tests for POST /portfolio/acquisitions."""

    def test_created(self, client, user_headers):
        response = client.post(
            "/portfolio/acquisitions",
            json=acquisition_payload(tags=["airline", "airline"]),
            headers=user_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["symbol"] == "THYAO"
        assert data["currency"] == "TRY"
        assert Decimal(data["quantity"]) == Decimal("10")
        assert Decimal(data["fee"]) == Decimal("5")
        assert data["tags"] == ["airline"]

    def test_asset_created_lazily(self, client, user_headers):
        created = client.post("/portfolio/acquisitions", json=acquisition_payload(), headers=user_headers).json()

        asset = client.get(f"/assets/{created['asset_id']}").json()

        assert asset["symbol"] == "THYAO"
        assert asset["name"] == "Turk Hava Yollari"
        assert asset["currency"] == "TRY"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"quantity": "0"},
            {"unit_price": "-5"},
            {"fee": "-1"},
            {"currency": "LIRA"},
            {"symbol": ""},
            {"acquisition_date": "2999-01-01"},
        ],
    )
    def test_invalid_payload(self, client, user_headers, overrides):
        response = client.post(
            "/portfolio/acquisitions",
            json=acquisition_payload(**overrides),
            headers=user_headers,
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "ValidationError"
        assert data["details"]

    def test_list_newest_first(self, client, user_headers):
        client.post("/portfolio/acquisitions", json=acquisition_payload(acquisition_date="2024-01-01"), headers=user_headers)
        client.post("/portfolio/acquisitions", json=acquisition_payload(acquisition_date="2024-02-01"), headers=user_headers)

        data = client.get("/portfolio/acquisitions", headers=user_headers).json()

        assert data["total"] == 2
        assert [item["acquisition_date"] for item in data["items"]] == ["2024-02-01", "2024-01-01"]


class TestSummary:
    """Tests for GET /portfolio/summary."""

    def test_empty_portfolio(self, client, user_headers):
        data = client.get("/portfolio/summary", headers=user_headers).json()

        assert data["status"] == "NEUTRAL"
        assert Decimal(data["total_value"]) == Decimal("0")
        assert data["position_count"] == 0

    def test_values(self, client, user_headers, acquired):
        response = client.get("/portfolio/summary", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["base_currency"] == "TRY"
        assert Decimal(data["total_cost"]) == Decimal("1005.00")
        assert Decimal(data["total_value"]) == Decimal("1100.00")
        assert Decimal(data["unrealized_pl"]) == Decimal("95.00")
        assert Decimal(data["unrealized_pl_percent"]) == Decimal("9.45")
        assert data["status"] == "UP"

    def test_other_user_sees_nothing(self, client, acquired):
        data = client.get("/portfolio/summary", headers={"X-User-Id": "user-2"}).json()

        assert data["position_count"] == 0
        assert data["status"] == "NEUTRAL"

    def test_refreshed_after_new_acquisition(self, client, user_headers, acquired):
        client.get("/portfolio/summary", headers=user_headers)

        client.post(
            "/portfolio/acquisitions",
            json=acquisition_payload(quantity="5", fee="0"),
            headers=user_headers,
        )
        data = client.get("/portfolio/summary", headers=user_headers).json()

        assert Decimal(data["total_value"]) == Decimal("1650.00")


class TestHistory:
    """Tests for GET /portfolio/history."""

    def test_default_period(self, client, user_headers, acquired):
        data = client.get("/portfolio/history", headers=user_headers).json()

        assert data["period"] == "30D"
        assert len(data["points"]) == 31

    def test_period_case_insensitive(self, client, user_headers):
        data = client.get("/portfolio/history?period=7d", headers=user_headers).json()

        assert data["period"] == "7D"
        assert len(data["points"]) == 8

    def test_invalid_period(self, client, user_headers):
        response = client.get("/portfolio/history?period=2W", headers=user_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "InvalidPeriodError"
        assert data["details"]["valid_options"] == ["7D", "30D", "90D", "1Y", "ALL"]


class TestAllocationAndMovers:
    """Tests for GET /portfolio/allocation and /portfolio/top-movers."""

    def test_allocation(self, client, user_headers, acquired):
        data = client.get("/portfolio/allocation", headers=user_headers).json()

        assert len(data["slices"]) == 1
        assert data["slices"][0]["asset_type"] == "EQUITY"
        assert Decimal(data["slices"][0]["percent"]) == Decimal("100.00")

    def test_top_movers(self, client, user_headers, acquired):
        data = client.get("/portfolio/top-movers?limit=3", headers=user_headers).json()

        assert len(data["movers"]) == 1
        mover = data["movers"][0]
        assert mover["symbol"] == "THYAO"
        assert Decimal(mover["change"]) == Decimal("33.00")
        assert mover["direction"] == "UP"

    def test_top_movers_limit_zero(self, client, user_headers):
        response = client.get("/portfolio/top-movers?limit=0", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "limit"}

    def test_top_movers_limit_too_large(self, client, user_headers):
        response = client.get("/portfolio/top-movers?limit=1000", headers=user_headers)

        assert response.status_code == 422


class TestAnalytics:
    """Tests for GET /portfolio/analytics."""

    def test_bundle(self, client, user_headers, acquired):
        response = client.get("/portfolio/analytics?period=90D", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["period"] == "90D"
        assert len(data["history"]) == 91
        assert len(data["allocation"]) == 1
        assert len(data["top_movers"]) == 1
        assert set(data["risk"]) == {
            "total_return",
            "total_return_percent",
            "volatility",
            "sharpe_ratio",
            "max_drawdown",
        }

    def test_invalid_period(self, client, user_headers):
        response = client.get("/portfolio/analytics?period=1M", headers=user_headers)

        assert response.status_code == 400
