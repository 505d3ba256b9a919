# backend/investment_tracker/utils/logging.py
"""
Logging configuration for the valuation API.

One stdout handler on the root logger. Every record carries the request's
correlation id and user id (placeholders outside a request), so a line
from the refresh job and a line from a portfolio request can be told apart.

Usage:
    from investment_tracker.utils import setup_logging

    setup_logging()  # once, before the FastAPI app is created

What gets logged where:
    DEBUG   - cache hits/misses, per-asset price lookups
    INFO    - acquisitions recorded, prices recorded, refresh batches
    WARNING - missing FX pair, unpriced position, job failure below threshold
    ERROR   - repeated job failures, quote source exhausted

LOG_LEVEL and LOG_FORMAT (text|json) come from settings.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from investment_tracker.config import settings
from investment_tracker.utils.context import get_correlation_id, get_user_id

TEXT_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(user_id)s | %(name)s | %(message)s"
)
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_CORRELATION_ID = "no-correlation-id"
NO_USER_ID = "-"

# Library loggers held at WARNING
QUIET_LOGGERS = ("apscheduler", "httpx", "httpcore", "sqlalchemy.engine")

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "correlation_id", "user_id"}


class CorrelationIdFilter(logging.Filter):
    """Stamp correlation_id and user_id on each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        record.user_id = get_user_id() or NO_USER_ID
        return True


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    Keys: timestamp, level, logger, correlation_id, user_id, message, plus
    "exception" when exc_info is set and "extra" for values passed via
    extra=. Extra values that are not JSON serializable are stringified.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
            "user_id": getattr(record, "user_id", NO_USER_ID),
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Install the stdout handler on the root logger, replacing existing handlers.

    Raises:
        ValueError: If the level name is unknown
    """
    level_name = (level or settings.log_level).strip().upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: '{level_name}'")

    format_type = (log_format or settings.log_format).lower()
    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured: level={level_name}, format={format_type}")
