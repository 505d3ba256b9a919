# backend/investment_tracker/services/protocols.py
"""
Protocol interfaces for service dependency injection.

Using typing.Protocol enables structural subtyping:
- Existing classes satisfy protocols without modification
- Test mocks work without explicit inheritance
- Clear documentation of required interfaces
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from investment_tracker.models import PriceSnapshot


class CurrencyConverterProtocol(Protocol):
    """Interface required by PriceService, ValuationService and HistorySynthesizer."""

    def get_exchange_rate(self, from_currency: str, to_currency: str) -> Decimal:
        ...

    def convert(
        self,
        amount: Decimal | None,
        from_currency: str,
        to_currency: str,
    ) -> Decimal:
        ...


class PriceLookupProtocol(Protocol):
    """Interface required by ValuationService and HistorySynthesizer."""

    def get_current_price(self, db: Session, asset_id: int, currency: str) -> Decimal:
        ...

    def get_latest_snapshot(self, db: Session, asset_id: int) -> PriceSnapshot | None:
        ...

    def get_previous_close(
        self,
        db: Session,
        asset_id: int,
        before: datetime,
    ) -> PriceSnapshot | None:
        ...

