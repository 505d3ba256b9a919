# backend/investment_tracker/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application with a lifespan that runs the scheduler
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from investment_tracker import __version__
from investment_tracker.config import settings
from investment_tracker.database import check_database_health
from investment_tracker.jobs import (
    get_job_health_status,
    init_scheduler,
    start_scheduler,
    stop_scheduler,
)
from investment_tracker.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from investment_tracker.routers import assets_router, currency_router, portfolio_router
from investment_tracker.schemas.errors import ErrorDetail, ValidationErrorDetail
from investment_tracker.services.exceptions import (
    AssetNotFoundError,
    InvalidPeriodError,
    MarketDataError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from investment_tracker.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the price refresh scheduler on startup and stop it on shutdown."""
    if settings.scheduler_enabled:
        init_scheduler()
        start_scheduler()
    else:
        logger.info("Background scheduler disabled")

    yield

    stop_scheduler()


# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Portfolio valuation and analytics API",
    version=__version__,
    lifespan=lifespan,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)

# Extracts/generates correlation IDs and adds them to response headers
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Service-layer exceptions carry no HTTP knowledge; they are mapped here.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Status codes for HTTPExceptions raised directly by routes and dependencies
HTTP_ERROR_TYPES: dict[int, str] = {
    400: "BadRequestError",
    401: "UnauthorizedError",
    403: "ForbiddenError",
    404: "NotFoundError",
    429: "RateLimitError",
    503: "ServiceUnavailableError",
}


def _error_response(
        status_code: int,
        error: str,
        message: str,
        details: dict | None = None,
        headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorDetail(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


@app.exception_handler(InvalidPeriodError)
async def invalid_period_handler(request: Request, exc: InvalidPeriodError) -> JSONResponse:
    logger.warning(f"Rejected history period '{exc.period}'")
    return _error_response(
        400,
        "InvalidPeriodError",
        str(exc),
        {"period": exc.period, "valid_options": list(exc.VALID_PERIODS)},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Service-level validation failures map to 400."""
    logger.warning(f"Validation failed on {request.url.path}: {exc}")
    details = {"field": exc.field} if exc.field else None
    return _error_response(400, "ValidationError", str(exc), details)


@app.exception_handler(AssetNotFoundError)
async def asset_not_found_handler(request: Request, exc: AssetNotFoundError) -> JSONResponse:
    logger.warning(f"Unknown asset requested: {exc.identifier}")
    return _error_response(404, "AssetNotFoundError", str(exc), {"asset": exc.identifier})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.warning(f"{exc.resource_type or 'Resource'} {exc.resource_id} not found")
    return _error_response(
        404,
        "NotFoundError",
        str(exc),
        {"resource_type": exc.resource_type, "resource_id": exc.resource_id},
    )


@app.exception_handler(MarketDataError)
async def market_data_error_handler(request: Request, exc: MarketDataError) -> JSONResponse:
    """Price lookups and quote sources that fail after retries map to 503."""
    logger.error(f"Market data unavailable: {exc}")
    details = {"asset_id": exc.asset_id} if exc.asset_id is not None else None
    return _error_response(503, type(exc).__name__, str(exc), details)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.error(f"Unhandled service error on {request.url.path}: {exc}")
    return _error_response(500, "ServiceError", str(exc))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Rewrap FastAPI's {"detail": ...} body into the ErrorDetail shape."""
    return _error_response(
        exc.status_code,
        HTTP_ERROR_TYPES.get(exc.status_code, "HTTPError"),
        str(exc.detail) if exc.detail else "An error occurred",
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
        request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Payload and query parsing failures map to 422 with one entry per field."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(details=errors).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(portfolio_router)  # /portfolio/*
app.include_router(assets_router)  # /assets/*
app.include_router(currency_router)  # /currency/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """API root - returns basic application info."""
    return {
        "message": f"Welcome to {settings.app_name}!",
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request):
    """
    Health of the database (critical) and scheduled jobs (non-critical).

    **Response Status Codes:**
    - 200: Healthy, or degraded when a job keeps failing
    - 503: Database unreachable
    """
    database = check_database_health()
    jobs = get_job_health_status()

    if database["status"] != "healthy":
        overall_status = "unhealthy"
    elif any(not job["healthy"] for job in jobs.values()):
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    response_data = {
        "status": overall_status,
        "checks": {
            "database": database,
            "jobs": jobs,
        },
    }

    if overall_status == "unhealthy":
        return JSONResponse(status_code=503, content=response_data)
    return response_data
