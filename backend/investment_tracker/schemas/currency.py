# backend/investment_tracker/schemas/currency.py
"""
Pydantic schemas for exchange rates and conversion.

Rate format: 1 from_currency = rate to_currency.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from investment_tracker.schemas.validators import validate_currency


class ConversionResponse(BaseModel):
    amount: Decimal = Field(..., description="Amount in from_currency")
    from_currency: str
    to_currency: str
    rate: Decimal = Field(..., description="1 from_currency = rate to_currency")
    converted: Decimal = Field(..., description="amount × rate, 2 decimal places")
    formatted: str


class ExchangeRateResponse(BaseModel):
    from_currency: str
    to_currency: str
    rate: Decimal


class ExchangeRateUpdate(BaseModel):
    """Manual override of an exchange rate. The inverse is stored too."""

    from_currency: str = Field(..., examples=["USD"])
    to_currency: str = Field(..., examples=["TRY"])
    rate: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        description="1 from_currency = rate to_currency (must be positive)"
    )

    @field_validator('from_currency', 'to_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return validate_currency(v)


class SupportedCurrenciesResponse(BaseModel):
    base_currency: str
    currencies: list[str]
