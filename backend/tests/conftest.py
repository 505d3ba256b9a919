# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- Service fixtures wired around a fresh view cache
- Sample data factories
- An API client with the database and singletons isolated per test
"""

import os

# Must be set before investment_tracker.config is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("APP_NAME", "Test App")

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from investment_tracker import dependencies
from investment_tracker.database import get_db
from investment_tracker.models import (
    Base,
    AcquisitionLot,
    Asset,
    AssetType,
    PriceSnapshot,
)
from investment_tracker.services.asset_service import AssetService
from investment_tracker.services.cache import ViewCache
from investment_tracker.services.constants import PRICE_SOURCE_MANUAL
from investment_tracker.services.currency_service import CurrencyService
from investment_tracker.services.portfolio_service import PortfolioService
from investment_tracker.services.price_service import PriceService
from investment_tracker.services.valuation import HistorySynthesizer, ValuationService


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=db_engine,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def cache() -> ViewCache:
    return ViewCache(max_size=100, default_ttl_seconds=300)


@pytest.fixture
def currency_service() -> CurrencyService:
    """Rate table seeded with the default TRY-quoted rates."""
    return CurrencyService()


@pytest.fixture
def price_service(currency_service: CurrencyService, cache: ViewCache) -> PriceService:
    return PriceService(currency_service=currency_service, cache=cache)


@pytest.fixture
def asset_service(cache: ViewCache) -> AssetService:
    return AssetService(cache=cache)


@pytest.fixture
def valuation_service(
        price_service: PriceService,
        currency_service: CurrencyService,
) -> ValuationService:
    return ValuationService(price_service, currency_service, base_currency="TRY")


@pytest.fixture
def history_synthesizer(valuation_service: ValuationService) -> HistorySynthesizer:
    return HistorySynthesizer(valuation_service)


@pytest.fixture
def portfolio_service(
        asset_service: AssetService,
        valuation_service: ValuationService,
        history_synthesizer: HistorySynthesizer,
        cache: ViewCache,
) -> PortfolioService:
    return PortfolioService(
        asset_service=asset_service,
        valuation_service=valuation_service,
        history_synthesizer=history_synthesizer,
        cache=cache,
    )


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def create_asset(
        db: Session,
        symbol: str = "THYAO",
        name: str | None = None,
        asset_type: AssetType = AssetType.EQUITY,
        currency: str = "TRY",
) -> Asset:
    """Create and persist an asset."""
    asset = Asset(
        symbol=symbol,
        name=name or f"{symbol} Inc.",
        asset_type=asset_type,
        currency=currency,
    )
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def create_lot(
        db: Session,
        asset: Asset,
        user_id: str = "user-1",
        quantity: Decimal = Decimal("10"),
        unit_price: Decimal = Decimal("100"),
        currency: str | None = None,
        fee: Decimal = Decimal("0"),
        acquisition_date: date = date(2024, 1, 15),
) -> AcquisitionLot:
    """Create and persist an acquisition lot (currency defaults to the asset's)."""
    lot = AcquisitionLot(
        user_id=user_id,
        asset_id=asset.id,
        quantity=quantity,
        unit_price=unit_price,
        currency=currency or asset.currency,
        fee=fee,
        acquisition_date=acquisition_date,
        tags=[],
    )
    db.add(lot)
    db.commit()
    db.refresh(lot)
    return lot


def create_snapshot(
        db: Session,
        asset: Asset,
        price: Decimal,
        currency: str | None = None,
        as_of: datetime | None = None,
        source: str = PRICE_SOURCE_MANUAL,
) -> PriceSnapshot:
    """Create and persist a price snapshot (currency defaults to the asset's)."""
    snapshot = PriceSnapshot(
        asset_id=asset.id,
        price=price,
        currency=currency or asset.currency,
        as_of=as_of or datetime.now(timezone.utc),
        source=source,
    )
    db.add(snapshot)
    db.commit()
    db.refresh(snapshot)
    return snapshot


# =============================================================================
# API FIXTURES
# =============================================================================

_SINGLETON_GETTERS = (
    dependencies.get_view_cache,
    dependencies.get_currency_service,
    dependencies.get_quote_source,
    dependencies.get_price_service,
    dependencies.get_asset_service,
    dependencies.get_valuation_service,
    dependencies.get_history_synthesizer,
    dependencies.get_portfolio_service,
    dependencies.get_price_refresh_service,
)


def _reset_singletons() -> None:
    """Drop cached service singletons so each test gets a fresh cache and rate table."""
    for getter in _SINGLETON_GETTERS:
        getter.cache_clear()


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Create test client with database override and isolated services."""
    from investment_tracker.main import app
    from investment_tracker.middleware.rate_limit import limiter

    def override_get_db():
        try:
            yield db
        finally:
            pass

    _reset_singletons()
    limiter.reset()
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
    _reset_singletons()


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"X-User-Id": "user-1"}
