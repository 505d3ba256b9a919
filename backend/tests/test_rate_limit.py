# backend/tests/test_rate_limit.py
"""
Tests for rate limit keys and the 429 response.
"""

from starlette.requests import Request

from investment_tracker.config import settings
from investment_tracker.middleware.correlation import (
    CORRELATION_ID_HEADER,
    resolve_correlation_id,
)
from investment_tracker.middleware.rate_limit import client_ip, rate_limit_key


def make_request(headers: dict[str, str] | None = None, peer: str = "10.0.0.5") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (peer, 40000),
    }
    return Request(scope)


class TestRateLimitKey:
    def test_keyed_by_user_header(self):
        assert rate_limit_key(make_request({"X-User-Id": " user-1 "})) == "user:user-1"

    def test_falls_back_to_ip(self):
        assert rate_limit_key(make_request()) == "ip:10.0.0.5"

    def test_forwarded_header_ignored_from_untrusted_peer(self):
        request = make_request({"X-Forwarded-For": "1.2.3.4"}, peer="10.0.0.5")

        assert client_ip(request) == "10.0.0.5"

    def test_forwarded_header_from_trusted_proxy(self, monkeypatch):
        monkeypatch.setattr(settings, "trusted_proxy_ips", ["10.0.0.1"])
        request = make_request({"X-Forwarded-For": "1.2.3.4, 10.0.0.1"}, peer="10.0.0.1")

        assert client_ip(request) == "1.2.3.4"


class TestCorrelationIdResolution:
    def test_overlong_id_replaced(self):
        request = make_request({CORRELATION_ID_HEADER: "x" * 500})

        resolved = resolve_correlation_id(request)

        assert resolved != "x" * 500
        assert len(resolved) == 36

    def test_falls_through_to_request_id(self):
        request = make_request({CORRELATION_ID_HEADER: "  ", "X-Request-ID": "req-1"})

        assert resolve_correlation_id(request) == "req-1"


class TestRateLimitExceeded:
    def test_write_limit_returns_429(self, client, user_headers):
        payload = {"from_currency": "USD", "to_currency": "TRY", "rate": "31.5"}

        statuses = [
            client.put("/currency/rates", json=payload, headers=user_headers).status_code
            for _ in range(31)
        ]

        assert statuses[:30] == [200] * 30
        assert statuses[30] == 429

    def test_429_body(self, client, user_headers):
        payload = {"from_currency": "USD", "to_currency": "TRY", "rate": "31.5"}
        for _ in range(30):
            client.put("/currency/rates", json=payload, headers=user_headers)

        response = client.put("/currency/rates", json=payload, headers=user_headers)

        assert response.headers["Retry-After"] == "60"
        data = response.json()
        assert data["error"] == "RateLimitError"
        assert data["details"] == {"retry_after": 60}

    def test_budgets_are_per_user(self, client):
        payload = {"from_currency": "USD", "to_currency": "TRY", "rate": "31.5"}
        for _ in range(30):
            client.put("/currency/rates", json=payload, headers={"X-User-Id": "user-1"})

        response = client.put("/currency/rates", json=payload, headers={"X-User-Id": "user-2"})

        assert response.status_code == 200
