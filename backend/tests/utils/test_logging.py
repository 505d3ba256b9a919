# backend/tests/utils/test_logging.py
"""
Tests for logging setup and the JSON formatter.
"""

import json
import logging

import pytest

from investment_tracker.utils.context import clear_correlation_id, set_correlation_id
from investment_tracker.utils.logging import CorrelationIdFilter, JsonFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("investment_tracker.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_includes_context(self):
        set_correlation_id("abc-123")
        record = make_record()
        CorrelationIdFilter().filter(record)
        clear_correlation_id()

        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["correlation_id"] == "abc-123"
        assert "extra" not in entry

    def test_extra_values(self):
        record = make_record(asset_id=7, payload=object())

        entry = json.loads(JsonFormatter().format(record))

        assert entry["extra"]["asset_id"] == 7
        assert entry["extra"]["payload"].startswith("<object")


class TestSetupLogging:
    def test_installs_single_handler(self, restore_root_logger):
        setup_logging(level="debug", log_format="json")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)

    def test_quiets_library_loggers(self, restore_root_logger):
        setup_logging(level="DEBUG", log_format="text")

        assert logging.getLogger("apscheduler").level == logging.WARNING

    def test_rejects_unknown_level(self, restore_root_logger):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD")
