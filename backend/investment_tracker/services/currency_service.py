# backend/investment_tracker/services/currency_service.py
"""
Currency Service - in-memory exchange rate table and conversions.

=============================================================================
RATE CONVENTION
=============================================================================

    rate(FROM, TO) = "1 FROM = X TO"

    Example: rate(USD, TRY) = 31.50  →  1 USD = 31.50 TRY
    Conversion: TO_amount = FROM_amount × rate

=============================================================================

Lookup order for get_exchange_rate(FROM, TO):
1. Same currency → 1
2. Direct entry (FROM, TO)
3. Inverse of (TO, FROM), 1/rate rounded to 6 dp, memoized
4. Cross rate through the pivot currency (TRY), memoized
5. No path → log a warning and return 1

Step 5 favors availability over accuracy: callers get an unconverted amount
and the warning identifies the missing pair.

Rates are held in memory and seeded at construction. The table is shared by
every request thread and by the price refresh job, so all access goes
through a lock.

Usage:
    from investment_tracker.services.currency_service import CurrencyService

    service = CurrencyService()
    service.convert(Decimal("100"), "USD", "TRY")   # Decimal("3150.00")
    service.format_currency(Decimal("1234.5"), "EUR")  # "€1234.50"
"""

import logging
import threading
from decimal import Decimal, ROUND_HALF_UP

from investment_tracker.services.constants import (
    CURRENCY_SYMBOLS,
    PIVOT_CURRENCY,
    SEED_EXCHANGE_RATES,
    ZERO,
    ZERO_DECIMAL_CURRENCIES,
)
from investment_tracker.services.exceptions import UnsupportedCurrencyError, ValidationError
from investment_tracker.utils.money import round_money, round_rate

logger = logging.getLogger(__name__)

ONE = Decimal("1")


def normalize_currency(code: str) -> str:
    """
    Return the upper-cased ISO code.

    Raises:
        UnsupportedCurrencyError: If code is not three letters
    """
    normalized = (code or "").strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise UnsupportedCurrencyError(code)
    return normalized


class CurrencyService:
    """
    Thread-safe exchange rate table with conversion and formatting helpers.

    Attributes:
        pivot_currency: Currency used to derive cross rates
    """

    def __init__(
            self,
            seed_rates: dict[tuple[str, str], Decimal] | None = None,
            pivot_currency: str = PIVOT_CURRENCY,
    ) -> None:
        self.pivot_currency = pivot_currency
        self._rates: dict[tuple[str, str], Decimal] = {}
        self._derived: set[tuple[str, str]] = set()
        self._lock = threading.Lock()

        for (from_currency, to_currency), rate in (seed_rates or SEED_EXCHANGE_RATES).items():
            self._store_pair(from_currency, to_currency, rate)

        logger.info(f"CurrencyService initialized with {len(self._rates)} rates")

    # =========================================================================
    # RATES
    # =========================================================================

    def get_exchange_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        Get the rate converting from_currency into to_currency.

        Never raises for an unknown pair; see module docstring.
        """
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()

        if from_currency == to_currency:
            return ONE

        with self._lock:
            direct = self._rates.get((from_currency, to_currency))
            if direct is not None:
                return direct

            reverse = self._rates.get((to_currency, from_currency))
            if reverse is not None and reverse != ZERO:
                return self._memoize_locked(
                    (from_currency, to_currency), round_rate(ONE / reverse)
                )

            cross = self._cross_rate_locked(from_currency, to_currency)
            if cross is not None:
                return self._memoize_locked((from_currency, to_currency), cross)

        logger.warning(
            f"Exchange rate not found for {from_currency} -> {to_currency}, using 1.0"
        )
        return ONE

    def update_exchange_rate(
            self,
            from_currency: str,
            to_currency: str,
            rate: Decimal,
    ) -> None:
        """
        Store a new rate and its inverse.

        Raises:
            ValidationError: If rate is not positive or both currencies match
            UnsupportedCurrencyError: If a currency code is malformed
        """
        from_currency = normalize_currency(from_currency)
        to_currency = normalize_currency(to_currency)
        if from_currency == to_currency:
            raise ValidationError(
                f"Cannot set a rate from {from_currency} to itself",
                field="to_currency",
            )
        if rate <= ZERO:
            raise ValidationError(f"Exchange rate must be positive, got {rate}", field="rate")

        with self._lock:
            self._store_pair(from_currency, to_currency, rate)

        logger.info(f"Updated exchange rate: {from_currency} -> {to_currency} = {rate}")

    def refresh_exchange_rates(self) -> None:
        """
        Refresh rates from an external provider.

        No provider is configured; the seeded table stays in effect.
        """
        logger.info("Exchange rate refresh requested; no external provider configured")

    # =========================================================================
    # CONVERSION & FORMATTING
    # =========================================================================

    def convert(
            self,
            amount: Decimal | None,
            from_currency: str,
            to_currency: str,
    ) -> Decimal:
        """
        Convert amount between currencies, rounded to 2 dp half-up.

        None and zero amounts convert to zero.
        """
        if amount is None or amount == ZERO:
            return round_money(ZERO)

        rate = self.get_exchange_rate(from_currency, to_currency)
        return round_money(amount * rate)

    def format_currency(self, amount: Decimal | None, currency: str) -> str:
        """Format amount with its currency symbol, e.g. '₺1234.56' or 'CHF 10.00'."""
        if amount is None:
            return "0.00"

        code = currency.upper()
        if code in ZERO_DECIMAL_CURRENCIES:
            digits = f"{amount.quantize(ONE, rounding=ROUND_HALF_UP)}"
        else:
            digits = f"{round_money(amount)}"

        symbol = CURRENCY_SYMBOLS.get(code)
        if symbol is None:
            return f"{code} {digits}"
        return f"{symbol}{digits}"

    def is_supported_currency(self, currency: str) -> bool:
        """True if the currency has a rate path to the pivot currency."""
        code = (currency or "").upper()
        if code == self.pivot_currency:
            return True
        with self._lock:
            return (
                (code, self.pivot_currency) in self._rates
                or (self.pivot_currency, code) in self._rates
            )

    def supported_currencies(self) -> list[str]:
        """Return the sorted list of currencies with a path to the pivot."""
        with self._lock:
            codes = {a for a, b in self._rates if b == self.pivot_currency}
            codes |= {b for a, b in self._rates if a == self.pivot_currency}
        codes.add(self.pivot_currency)
        return sorted(codes)

    # =========================================================================
    # INTERNAL HELPERS (caller holds self._lock where noted)
    # =========================================================================

    def _store_pair(self, from_currency: str, to_currency: str, rate: Decimal) -> None:
        # Memoized inverse/cross rates may depend on the old value
        for pair in self._derived:
            self._rates.pop(pair, None)
        self._derived.clear()

        self._rates[(from_currency, to_currency)] = rate
        self._rates[(to_currency, from_currency)] = round_rate(ONE / rate)

    def _memoize_locked(self, pair: tuple[str, str], rate: Decimal) -> Decimal:
        self._rates[pair] = rate
        self._derived.add(pair)
        return rate

    def _cross_rate_locked(self, from_currency: str, to_currency: str) -> Decimal | None:
        """Derive FROM→TO through the pivot, 6 dp. Caller holds the lock."""
        to_pivot = self._pivot_leg_locked(from_currency, self.pivot_currency)
        from_pivot = self._pivot_leg_locked(self.pivot_currency, to_currency)
        if to_pivot is None or from_pivot is None:
            return None
        return round_rate(to_pivot * from_pivot)

    def _pivot_leg_locked(self, from_currency: str, to_currency: str) -> Decimal | None:
        if from_currency == to_currency:
            return ONE
        direct = self._rates.get((from_currency, to_currency))
        if direct is not None:
            return direct
        reverse = self._rates.get((to_currency, from_currency))
        if reverse is not None and reverse != ZERO:
            return ONE / reverse
        return None
