# backend/investment_tracker/database.py
"""
SQLAlchemy engine, session factory and the request-scoped session dependency.

SQLite (tests and local tinkering) shares one connection through StaticPool.
PostgreSQL gets a QueuePool sized from settings.

Sessions use expire_on_commit=False so ORM objects handed back by the
services stay readable after the write transaction commits.
"""

import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool

from .config import settings

logger = logging.getLogger(__name__)

POOL_TIMEOUT_SECONDS = 30


def _engine_options() -> dict[str, Any]:
    if settings.is_sqlite:
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_pool_max_overflow,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_timeout": POOL_TIMEOUT_SECONDS,
    }


_options = _engine_options()
engine = create_engine(settings.database_url, echo=settings.debug, **_options)
logger.info(f"Database engine ready ({_options['poolclass'].__name__})")

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database_health() -> dict:
    """
    Run SELECT 1 against the engine.

    Returns {"status": "healthy", "database": <dialect>} or
    {"status": "unhealthy", "error": <message>}; never raises.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy", "database": engine.dialect.name}
