# backend/investment_tracker/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
main.py is responsible for mapping these to appropriate HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidPeriodError
    │   └── UnsupportedCurrencyError
    ├── NotFoundError
    │   └── AssetNotFoundError
    └── MarketDataError
        ├── PriceUnavailableError
        └── QuoteSourceError

PriceUnavailableError is handled inside the valuation engine: a position
without a price is valued at zero and reported as a warning.
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when input validation fails.

    This is for programmatic validation (non-positive quantities, bad
    currency codes, etc.), NOT for request parsing which Pydantic handles.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidPeriodError(ValidationError):
    """
    Raised when an unknown history period is requested.

    Valid periods are: 7D, 30D, 90D, 1Y, ALL
    """

    VALID_PERIODS = ("7D", "30D", "90D", "1Y", "ALL")

    def __init__(self, period: str) -> None:
        self.period = period
        super().__init__(
            f"Invalid period '{period}'. Must be one of: {', '.join(self.VALID_PERIODS)}",
            field="period",
        )


class UnsupportedCurrencyError(ValidationError):
    """Raised when a currency code is malformed."""

    def __init__(self, currency: str) -> None:
        self.currency = currency
        super().__init__(
            f"Invalid currency code '{currency}'. Expected a 3-letter ISO code",
            field="currency",
        )


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Asset")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class AssetNotFoundError(NotFoundError):
    """
    Raised when an asset cannot be found by id or symbol.

    Attributes:
        identifier: The id or symbol that was looked up
    """

    def __init__(self, identifier: int | str) -> None:
        self.identifier = identifier
        super().__init__(
            f"Asset {identifier} not found",
            resource_type="Asset",
            resource_id=identifier,
        )


# =============================================================================
# MARKET DATA ERRORS
# =============================================================================


class MarketDataError(ServiceError):
    """
    Base exception for price and quote errors.

    Attributes:
        asset_id: Asset the error relates to (optional)
    """

    def __init__(self, message: str, asset_id: int | None = None) -> None:
        self.asset_id = asset_id
        super().__init__(message)


class PriceUnavailableError(MarketDataError):
    """
    Raised when no current price can be produced for an asset.

    This happens when the latest snapshot is missing and the placeholder
    snapshot cannot be stored either.
    """

    def __init__(self, asset_id: int, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Price unavailable for asset {asset_id}: {reason}", asset_id=asset_id)


class QuoteSourceError(MarketDataError):
    """Raised when the external quote source cannot produce a price."""

    def __init__(self, source: str, asset_id: int, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(
            f"Quote source '{source}' failed for asset {asset_id}: {reason}",
            asset_id=asset_id,
        )


__all__ = [
    "ServiceError",
    "ValidationError",
    "InvalidPeriodError",
    "UnsupportedCurrencyError",
    "NotFoundError",
    "AssetNotFoundError",
    "MarketDataError",
    "PriceUnavailableError",
    "QuoteSourceError",
]
