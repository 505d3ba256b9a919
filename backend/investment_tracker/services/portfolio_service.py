# backend/investment_tracker/services/portfolio_service.py
"""
Portfolio Service - write path and cached read path for portfolio views.

Write path:
    add_acquisition() validates the request, finds or creates the asset,
    stores the lot, then evicts the user's summary, analytics, allocation
    and top-movers views. History is not evicted; it expires on its own
    after CACHE_ANALYTICS_TTL_SECONDS.

Read path (each cached per user in ViewCache):
    get_summary()      ("summary", user_id)
    get_history()      ("history", user_id, period, end_date)
    get_allocation()   ("allocation", user_id)
    get_top_movers()   ("top_movers", user_id, limit)
    get_analytics()    ("analytics", user_id, period, end_date)

Architecture:
    PortfolioService
        ├── uses → AssetService (find-or-create by symbol)
        ├── uses → ValuationService (summary, per-asset values)
        ├── uses → HistorySynthesizer (daily series)
        ├── uses → RiskCalculator / allocation functions
        └── uses → ViewCache (single-flight, prefix invalidation)
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from investment_tracker.models import AcquisitionLot, AssetType
from investment_tracker.services.analytics.allocation import (
    calculate_allocation,
    calculate_top_movers,
)
from investment_tracker.services.analytics.risk import RiskCalculator
from investment_tracker.services.asset_service import AssetService
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.constants import (
    DEFAULT_ACQUISITION_CURRENCY,
    DEFAULT_TOP_MOVERS_LIMIT,
    VIEW_ALLOCATION,
    VIEW_ANALYTICS,
    VIEW_HISTORY,
    VIEW_SUMMARY,
    VIEW_TOP_MOVERS,
    VIEWS_INVALIDATED_ON_ACQUISITION,
    ZERO,
)
from investment_tracker.services.currency_service import normalize_currency
from investment_tracker.services.exceptions import ValidationError
from investment_tracker.services.valuation.history import HistorySynthesizer, normalize_period
from investment_tracker.services.valuation.service import ValuationService
from investment_tracker.services.valuation.types import (
    AllocationSlice,
    AnalyticsBundle,
    HistoryPoint,
    PortfolioSummary,
    TopMover,
)

logger = logging.getLogger(__name__)


@dataclass
class AcquisitionRequest:
    """Input for recording a purchase. Optional fields fall back to defaults."""

    symbol: str
    quantity: Decimal
    unit_price: Decimal
    acquisition_date: date
    asset_name: str | None = None
    asset_type: AssetType = AssetType.EQUITY
    currency: str | None = None
    fee: Decimal | None = None
    fx_rate_at_acquisition: Decimal | None = None
    notes: str | None = None
    tags: list[str] = field(default_factory=list)


class PortfolioService:
    """
    Facade over valuation, history and analytics with per-user caching.

    Attributes:
        base_currency: Currency of every returned view
    """

    def __init__(
            self,
            asset_service: AssetService,
            valuation_service: ValuationService,
            history_synthesizer: HistorySynthesizer,
            cache: ViewCache,
            analytics_ttl_seconds: float = 300,
            risk_free_rate_percent: Decimal = Decimal("2.0"),
    ) -> None:
        self._assets = asset_service
        self._valuation = valuation_service
        self._history = history_synthesizer
        self._cache = cache
        self._ttl = analytics_ttl_seconds
        self._risk_free_rate = risk_free_rate_percent
        self.base_currency = valuation_service.base_currency

    # =========================================================================
    # WRITE PATH
    # =========================================================================

    def add_acquisition(
            self,
            db: Session,
            user_id: str,
            request: AcquisitionRequest,
    ) -> AcquisitionLot:
        """
        Record a new acquisition lot for the user.

        Raises:
            ValidationError: On non-positive quantity/price, negative fee,
                malformed currency, or blank symbol. Nothing is written.
        """
        self._validate(request)
        currency = normalize_currency(request.currency or DEFAULT_ACQUISITION_CURRENCY)

        asset = self._assets.find_or_create(
            db,
            symbol=request.symbol,
            name=request.asset_name,
            asset_type=request.asset_type,
            currency=currency,
        )

        lot = AcquisitionLot(
            user_id=user_id,
            asset_id=asset.id,
            quantity=request.quantity,
            unit_price=request.unit_price,
            currency=currency,
            fee=request.fee if request.fee is not None else ZERO,
            acquisition_date=request.acquisition_date,
            fx_rate_at_acquisition=request.fx_rate_at_acquisition,
            notes=request.notes,
            tags=list(request.tags),
        )
        db.add(lot)
        db.commit()
        db.refresh(lot)

        evicted = self.invalidate_user_views(user_id)
        logger.info(
            f"Recorded acquisition {lot.id} for user {user_id}: "
            f"{lot.quantity} {asset.symbol} @ {lot.unit_price} {lot.currency} "
            f"({evicted} cached views evicted)"
        )
        return lot

    def list_acquisitions(self, db: Session, user_id: str) -> list[AcquisitionLot]:
        """The user's lots, newest acquisition first."""
        query = (
            select(AcquisitionLot)
            .where(AcquisitionLot.user_id == user_id)
            .order_by(AcquisitionLot.acquisition_date.desc(), AcquisitionLot.id.desc())
        )
        return list(db.scalars(query).all())

    def invalidate_user_views(self, user_id: str) -> int:
        """Evict the views affected by a new acquisition. Returns the count."""
        return sum(
            self._cache.invalidate((view, user_id))
            for view in VIEWS_INVALIDATED_ON_ACQUISITION
        )

    # =========================================================================
    # READ PATH
    # =========================================================================

    def get_summary(self, db: Session, user_id: str) -> PortfolioSummary:
        return self._cache.get_or_compute(
            (VIEW_SUMMARY, user_id),
            lambda: self._valuation.compute_summary(db, user_id),
            self._ttl,
        )

    def get_history(
            self,
            db: Session,
            user_id: str,
            period: str,
            end_date: date | None = None,
    ) -> list[HistoryPoint]:
        """
        Raises:
            InvalidPeriodError: If the period is not supported
        """
        code = normalize_period(period)
        end = end_date or date.today()
        return self._cache.get_or_compute(
            (VIEW_HISTORY, user_id, code, end),
            lambda: self._history.compute_history(db, user_id, code, end),
            self._ttl,
        )

    def get_allocation(self, db: Session, user_id: str) -> list[AllocationSlice]:
        return self._cache.get_or_compute(
            (VIEW_ALLOCATION, user_id),
            lambda: self._compute_allocation(db, user_id),
            self._ttl,
        )

    def get_top_movers(
            self,
            db: Session,
            user_id: str,
            limit: int = DEFAULT_TOP_MOVERS_LIMIT,
    ) -> list[TopMover]:
        """
        Raises:
            ValidationError: If limit < 1
        """
        if limit < 1:
            raise ValidationError(f"limit must be at least 1, got {limit}", field="limit")
        return self._cache.get_or_compute(
            (VIEW_TOP_MOVERS, user_id, limit),
            lambda: self._compute_top_movers(db, user_id, limit),
            self._ttl,
        )

    def get_analytics(
            self,
            db: Session,
            user_id: str,
            period: str,
            end_date: date | None = None,
    ) -> AnalyticsBundle:
        """
        History, allocation, top 5 movers and risk metrics for a period.

        Components are computed fresh, not read from their own cache entries.

        Raises:
            InvalidPeriodError: If the period is not supported
        """
        code = normalize_period(period)
        end = end_date or date.today()
        return self._cache.get_or_compute(
            (VIEW_ANALYTICS, user_id, code, end),
            lambda: self._compute_analytics(db, user_id, code, end),
            self._ttl,
        )

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _validate(self, request: AcquisitionRequest) -> None:
        if not (request.symbol or "").strip():
            raise ValidationError("Asset symbol must not be empty", field="symbol")
        if request.quantity is None or request.quantity <= ZERO:
            raise ValidationError(
                f"Quantity must be positive, got {request.quantity}", field="quantity"
            )
        if request.unit_price is None or request.unit_price <= ZERO:
            raise ValidationError(
                f"Unit price must be positive, got {request.unit_price}", field="unit_price"
            )
        if request.fee is not None and request.fee < ZERO:
            raise ValidationError(f"Fee must not be negative, got {request.fee}", field="fee")
        if request.currency is not None:
            normalize_currency(request.currency)

    def _compute_allocation(self, db: Session, user_id: str) -> list[AllocationSlice]:
        positions, _ = self._valuation.compute_position_values(db, user_id)
        return calculate_allocation(positions)

    def _compute_top_movers(self, db: Session, user_id: str, limit: int) -> list[TopMover]:
        positions, _ = self._valuation.compute_position_values(db, user_id)
        return calculate_top_movers(positions, limit)

    def _compute_analytics(
            self,
            db: Session,
            user_id: str,
            period: str,
            end_date: date,
    ) -> AnalyticsBundle:
        history = self._history.compute_history(db, user_id, period, end_date)
        positions, _ = self._valuation.compute_position_values(db, user_id)

        return AnalyticsBundle(
            period=period,
            base_currency=self.base_currency,
            history=tuple(history),
            allocation=tuple(calculate_allocation(positions)),
            top_movers=tuple(calculate_top_movers(positions, DEFAULT_TOP_MOVERS_LIMIT)),
            risk=RiskCalculator.calculate_all(history, self._risk_free_rate),
        )
