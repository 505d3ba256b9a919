# backend/investment_tracker/schemas/errors.py
"""
Error response bodies.

All handlers in main.py and the rate limiter emit one of these, so clients
can always read "error" for the machine-readable kind.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    error: str = Field(..., description="Error kind, e.g. 'AssetNotFoundError' or 'InvalidPeriodError'")
    message: str = Field(..., description="Human-readable explanation")
    details: dict | None = Field(default=None, description="Kind-specific context such as the offending field")


class ValidationErrorDetail(BaseModel):
    """422 body with one entry per failing field."""

    error: str = "ValidationError"
    message: str = "Request validation failed"
    details: list[dict] = Field(..., description="[{'field', 'message', 'type'}, ...]")
