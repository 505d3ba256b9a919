# backend/investment_tracker/services/market_data/base.py
"""
Quote source interface.

A quote source produces the latest price for one asset. The refresh job
only talks to fetch_price(), so a real upstream feed can replace the
simulated one without touching the job or the price store.

Subclasses implement _quote(). fetch_price() wraps it with tenacity:
QuoteSourceError is retried with exponential backoff, anything else
propagates immediately, and a non-positive quote is rejected.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from investment_tracker.models import Asset
from investment_tracker.services.exceptions import QuoteSourceError

logger = logging.getLogger(__name__)


class QuoteSource(ABC):
    """
    Base class for quote sources.

    Retry tuning (class attributes, override per source or in tests):
        MAX_RETRY_ATTEMPTS: total attempts including the first
        RETRY_MIN_WAIT / RETRY_MAX_WAIT: backoff bounds in seconds
        RETRY_MULTIPLIER: exponential multiplier
    """

    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: float = 1
    RETRY_MAX_WAIT: float = 10
    RETRY_MULTIPLIER: float = 1

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in logs and error messages (e.g. "SIMULATED")."""

    @abstractmethod
    def _quote(self, asset: Asset, last_price: Decimal | None) -> Decimal:
        """One upstream attempt. Raise QuoteSourceError for transient failures."""

    def fetch_price(self, asset: Asset, last_price: Decimal | None = None) -> Decimal:
        """
        Latest price for the asset, in the refresh currency.

        Raises:
            QuoteSourceError: Upstream still failing after all attempts, or a
                non-positive quote
        """
        for attempt in self._retrying():
            with attempt:
                price = self._quote(asset, last_price)

        if price <= 0:
            raise QuoteSourceError(self.name, asset.id, f"non-positive quote {price}")
        return price

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.MAX_RETRY_ATTEMPTS),
            wait=wait_exponential(
                multiplier=self.RETRY_MULTIPLIER,
                min=self.RETRY_MIN_WAIT,
                max=self.RETRY_MAX_WAIT,
            ),
            retry=retry_if_exception_type(QuoteSourceError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
