# backend/tests/test_correlation_id.py
"""
Tests for request context variables and the correlation id round trip.
"""

import logging
import uuid

import pytest

from investment_tracker.utils.context import (
    clear_correlation_id,
    clear_user_id,
    get_correlation_id,
    get_user_id,
    set_correlation_id,
    set_user_id,
)
from investment_tracker.utils.logging import CorrelationIdFilter, NO_CORRELATION_ID, NO_USER_ID


@pytest.fixture(autouse=True)
def clean_context():
    clear_correlation_id()
    clear_user_id()
    yield
    clear_correlation_id()
    clear_user_id()


class TestRequestContext:
    def test_empty_by_default(self):
        assert get_correlation_id() is None
        assert get_user_id() is None

    def test_round_trip(self):
        set_correlation_id("trace-42")
        set_user_id("user-7")

        assert get_correlation_id() == "trace-42"
        assert get_user_id() == "user-7"

    def test_filter_stamps_records(self):
        set_correlation_id("trace-1")
        set_user_id("user-9")
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert (record.correlation_id, record.user_id) == ("trace-1", "user-9")

    def test_filter_placeholders_outside_request(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

        CorrelationIdFilter().filter(record)

        assert (record.correlation_id, record.user_id) == (NO_CORRELATION_ID, NO_USER_ID)


class TestCorrelationHeader:
    def test_generated_as_uuid(self, client):
        header = client.get("/health").headers["X-Correlation-ID"]

        assert uuid.UUID(header).version == 4

    @pytest.mark.parametrize(
        "headers,expected",
        [
            ({"X-Correlation-ID": "upstream-1"}, "upstream-1"),
            ({"X-Request-ID": "lb-2"}, "lb-2"),
            ({"X-Correlation-ID": "upstream-1", "X-Request-ID": "lb-2"}, "upstream-1"),
        ],
    )
    def test_upstream_id_echoed(self, client, headers, expected):
        assert client.get("/health", headers=headers).headers["X-Correlation-ID"] == expected

    def test_fresh_id_per_request(self, client):
        first = client.get("/").headers["X-Correlation-ID"]
        second = client.get("/").headers["X-Correlation-ID"]

        assert first != second

    def test_on_error_responses(self, client):
        response = client.get("/portfolio/allocation", headers={"X-Correlation-ID": "err-1"})

        assert response.status_code == 401
        assert response.headers["X-Correlation-ID"] == "err-1"
