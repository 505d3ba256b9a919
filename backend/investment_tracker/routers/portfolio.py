# backend/investment_tracker/routers/portfolio.py
"""
Portfolio endpoints for the current user.

- POST /portfolio/acquisitions - Record a purchase
- GET  /portfolio/acquisitions - List recorded lots
- GET  /portfolio/summary - Totals, P&L, today change, FX influence
- GET  /portfolio/history - Daily value series for a period
- GET  /portfolio/allocation - Value share per asset type
- GET  /portfolio/top-movers - Largest approximate movers
- GET  /portfolio/analytics - History + allocation + movers + risk

The user is identified by the X-User-Id header. Every view is served from
the shared view cache and recomputed after the user's next acquisition or
when the entry expires.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from investment_tracker.database import get_db
from investment_tracker.dependencies import get_current_user_id, get_portfolio_service
from investment_tracker.middleware.rate_limit import (
    limiter,
    RATE_LIMIT_ANALYTICS,
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
)
from investment_tracker.models import AcquisitionLot
from investment_tracker.schemas.portfolio import (
    AcquisitionCreate,
    AcquisitionListResponse,
    AcquisitionResponse,
    AllocationResponse,
    AllocationSliceResponse,
    AnalyticsResponse,
    HistoryPointResponse,
    HistoryResponse,
    PortfolioSummaryResponse,
    RiskMetricsResponse,
    TopMoverResponse,
    TopMoversResponse,
)
from investment_tracker.services.constants import (
    DEFAULT_HISTORY_PERIOD,
    DEFAULT_TOP_MOVERS_LIMIT,
    MAX_TOP_MOVERS_LIMIT,
)
from investment_tracker.services.portfolio_service import AcquisitionRequest, PortfolioService
from investment_tracker.services.valuation.history import normalize_period
from investment_tracker.services.valuation.types import (
    AllocationSlice,
    HistoryPoint,
    PortfolioSummary,
    TopMover,
)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/portfolio",
    tags=["Portfolio"],
)


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_lot(lot: AcquisitionLot) -> AcquisitionResponse:
    return AcquisitionResponse(
        id=lot.id,
        asset_id=lot.asset_id,
        symbol=lot.asset.symbol,
        quantity=lot.quantity,
        unit_price=lot.unit_price,
        currency=lot.currency,
        fee=lot.fee,
        acquisition_date=lot.acquisition_date,
        fx_rate_at_acquisition=lot.fx_rate_at_acquisition,
        notes=lot.notes,
        tags=list(lot.tags or []),
        created_at=lot.created_at,
    )


def _map_summary(summary: PortfolioSummary) -> PortfolioSummaryResponse:
    return PortfolioSummaryResponse(
        base_currency=summary.base_currency,
        total_value=summary.total_value,
        total_cost=summary.total_cost,
        total_fees=summary.total_fees,
        unrealized_pl=summary.unrealized_pl,
        unrealized_pl_percent=summary.unrealized_pl_percent,
        today_change=summary.today_change,
        today_change_percent=summary.today_change_percent,
        fx_influence=summary.fx_influence,
        estimated_proceeds=summary.estimated_proceeds,
        status=summary.status,
        position_count=summary.position_count,
        warnings=list(summary.warnings),
    )


def _map_history_point(point: HistoryPoint) -> HistoryPointResponse:
    return HistoryPointResponse(
        date=point.date,
        value=point.value,
        change=point.change,
        change_percent=point.change_percent,
    )


def _map_slice(allocation: AllocationSlice) -> AllocationSliceResponse:
    return AllocationSliceResponse(
        asset_type=allocation.asset_type,
        value=allocation.value,
        percent=allocation.percent,
        color=allocation.color,
    )


def _map_mover(mover: TopMover) -> TopMoverResponse:
    return TopMoverResponse(
        asset_id=mover.asset_id,
        symbol=mover.symbol,
        name=mover.name,
        value=mover.value,
        change=mover.change,
        change_percent=mover.change_percent,
        direction=mover.direction,
    )


# =============================================================================
# ACQUISITIONS
# =============================================================================

@router.post(
    "/acquisitions",
    response_model=AcquisitionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an acquisition",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_acquisition(
        request: Request,  # Required for rate limiting
        payload: AcquisitionCreate,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> AcquisitionResponse:
    """
    Record a purchase for the current user.

    The asset is created on first use of its symbol. Cached summary,
    analytics, allocation and top-movers views for the user are evicted.

    Raises **400** for non-positive quantity or price, negative fee or an
    invalid currency code.
    """
    lot = service.add_acquisition(
        db,
        user_id,
        AcquisitionRequest(
            symbol=payload.symbol,
            quantity=payload.quantity,
            unit_price=payload.unit_price,
            acquisition_date=payload.acquisition_date,
            asset_name=payload.asset_name,
            asset_type=payload.asset_type,
            currency=payload.currency,
            fee=payload.fee,
            fx_rate_at_acquisition=payload.fx_rate_at_acquisition,
            notes=payload.notes,
            tags=payload.tags,
        ),
    )
    return _map_lot(lot)


@router.get(
    "/acquisitions",
    response_model=AcquisitionListResponse,
    summary="List acquisitions",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_acquisitions(
        request: Request,  # Required for rate limiting
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> AcquisitionListResponse:
    """The current user's lots, newest acquisition first."""
    lots = service.list_acquisitions(db, user_id)
    return AcquisitionListResponse(items=[_map_lot(lot) for lot in lots], total=len(lots))


# =============================================================================
# VIEWS
# =============================================================================

@router.get(
    "/summary",
    response_model=PortfolioSummaryResponse,
    summary="Get portfolio summary",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_summary(
        request: Request,  # Required for rate limiting
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioSummaryResponse:
    """
    Totals and P&L in the base currency.

    An empty portfolio returns zeros with status **NEUTRAL**. Positions
    whose price cannot be resolved count as zero value and add a warning.
    """
    return _map_summary(service.get_summary(db, user_id))


@router.get(
    "/history",
    response_model=HistoryResponse,
    summary="Get portfolio value history",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_history(
        request: Request,  # Required for rate limiting
        period: str = Query(
            default=DEFAULT_HISTORY_PERIOD,
            description="One of 7D, 30D, 90D, 1Y, ALL (case-insensitive)",
        ),
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> HistoryResponse:
    """
    One point per calendar day from the period start through today.

    Values are synthesized from current prices; they are not a
    reconstruction of past market prices.

    Raises **400** for an unknown period.
    """
    points = service.get_history(db, user_id, period)
    return HistoryResponse(
        period=normalize_period(period),
        base_currency=service.base_currency,
        points=[_map_history_point(p) for p in points],
    )


@router.get(
    "/allocation",
    response_model=AllocationResponse,
    summary="Get allocation by asset type",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_allocation(
        request: Request,  # Required for rate limiting
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> AllocationResponse:
    slices = service.get_allocation(db, user_id)
    return AllocationResponse(
        base_currency=service.base_currency,
        slices=[_map_slice(s) for s in slices],
    )


@router.get(
    "/top-movers",
    response_model=TopMoversResponse,
    summary="Get top movers",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def get_top_movers(
        request: Request,  # Required for rate limiting
        limit: int = Query(
            default=DEFAULT_TOP_MOVERS_LIMIT,
            le=MAX_TOP_MOVERS_LIMIT,
            description="Maximum number of movers (at least 1)",
        ),
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> TopMoversResponse:
    """
    Positions ranked by absolute change percent, largest value first on ties.

    Raises **400** if limit is less than 1.
    """
    movers = service.get_top_movers(db, user_id, limit)
    return TopMoversResponse(
        base_currency=service.base_currency,
        movers=[_map_mover(m) for m in movers],
    )


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    summary="Get portfolio analytics",
)
@limiter.limit(RATE_LIMIT_ANALYTICS)
def get_analytics(
        request: Request,  # Required for rate limiting
        period: str = Query(
            default=DEFAULT_HISTORY_PERIOD,
            description="One of 7D, 30D, 90D, 1Y, ALL (case-insensitive)",
        ),
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> AnalyticsResponse:
    """
    History, allocation, top 5 movers and risk metrics for a period.

    Risk metrics:
    - **volatility**: annualized root mean square of daily returns (%)
    - **sharpe_ratio**: (total return % - risk-free %) / volatility
    - **max_drawdown**: largest peak-to-trough decline (%)

    Raises **400** for an unknown period.
    """
    bundle = service.get_analytics(db, user_id, period)
    risk = bundle.risk
    return AnalyticsResponse(
        period=bundle.period,
        base_currency=bundle.base_currency,
        history=[_map_history_point(p) for p in bundle.history],
        allocation=[_map_slice(s) for s in bundle.allocation],
        top_movers=[_map_mover(m) for m in bundle.top_movers],
        risk=RiskMetricsResponse(
            total_return=risk.total_return,
            total_return_percent=risk.total_return_percent,
            volatility=risk.volatility,
            sharpe_ratio=risk.sharpe_ratio,
            max_drawdown=risk.max_drawdown,
        ),
    )
