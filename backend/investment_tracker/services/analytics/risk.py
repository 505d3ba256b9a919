# backend/investment_tracker/services/analytics/risk.py
"""
Risk calculation functions.

Pure functions over an ascending series of portfolio values. All results
are in percent units and rounded for display; degenerate inputs (too few
points, zero values) yield 0 rather than raising.

Formulas:
    r_i               = (V_i - V_{i-1}) / V_{i-1} × 100    (V_{i-1} = 0 skipped)

    Volatility        = sqrt(Σ r_i² / n) × √252         (root mean square, no mean)

    Total Return %    = (V_last - V_first) / V_first × 100

    Sharpe Ratio      = (Total Return % - R_f) / Volatility

    Max Drawdown %    = max over i of (Peak_i - V_i) / Peak_i × 100
                        with Peak_i the running maximum up to i
"""

import logging
from collections.abc import Sequence
from decimal import Decimal

from investment_tracker.services.constants import (
    ONE_HUNDRED,
    TRADING_DAYS_PER_YEAR,
    ZERO,
)
from investment_tracker.services.valuation.types import HistoryPoint, RiskSummary
from investment_tracker.utils.money import round_money, round_percent

logger = logging.getLogger(__name__)

DEFAULT_RISK_FREE_RATE_PERCENT: Decimal = Decimal("2.0")


# =============================================================================
# HELPERS
# =============================================================================

def calculate_daily_returns(values: Sequence[Decimal]) -> list[Decimal]:
    """
    Day-over-day percentage returns.

    Pairs whose earlier value is zero (or negative) are skipped.

    Returns:
        Up to len(values) - 1 returns, in percent
    """
    returns = []
    for previous, current in zip(values, values[1:]):
        if previous <= ZERO:
            continue
        returns.append((current - previous) / previous * ONE_HUNDRED)
    return returns


def _root_mean_square(values: list[Decimal]) -> Decimal | None:
    """
    Root mean square of the returns, measured from zero rather than the mean.

    Formula: sqrt(Σx² / n)

    Returns:
        The root mean square, or None when there are no values
    """
    if not values:
        return None

    variance = sum((x * x for x in values), ZERO) / Decimal(len(values))
    return variance.sqrt()


# =============================================================================
# METRICS
# =============================================================================

def calculate_volatility(values: Sequence[Decimal]) -> Decimal:
    """
    Annualized volatility of daily percent returns.

    Returns:
        Volatility in percent (always >= 0), 0 when there are no usable returns
    """
    rms = _root_mean_square(calculate_daily_returns(values))
    if rms is None:
        return round_percent(ZERO)

    annualization_factor = Decimal(TRADING_DAYS_PER_YEAR).sqrt()
    return round_percent(rms * annualization_factor)


def calculate_total_return(values: Sequence[Decimal]) -> tuple[Decimal, Decimal]:
    """
    Absolute and percent change from the first to the last value.

    Returns:
        (last - first, percent change); percent is 0 when first is 0.
        An empty series yields (0, 0).
    """
    if not values:
        return round_money(ZERO), round_percent(ZERO)

    first, last = values[0], values[-1]
    delta = last - first
    if first == ZERO:
        return round_money(delta), round_percent(ZERO)
    return round_money(delta), round_percent(delta / first * ONE_HUNDRED)


def calculate_sharpe_ratio(
        total_return_percent: Decimal,
        volatility: Decimal,
        risk_free_rate_percent: Decimal = DEFAULT_RISK_FREE_RATE_PERCENT,
) -> Decimal:
    """
    (Total Return % - risk-free %) / volatility; 0 when volatility is 0.
    """
    if volatility == ZERO:
        return round_percent(ZERO)
    return round_percent((total_return_percent - risk_free_rate_percent) / volatility)


def calculate_max_drawdown(values: Sequence[Decimal]) -> Decimal:
    """
    Largest peak-to-trough decline, as a positive percent in [0, 100].

    Points reached while the running peak is still zero are skipped.
    """
    if not values:
        return round_percent(ZERO)

    peak = values[0]
    max_drawdown = ZERO

    for value in values:
        if value > peak:
            peak = value
        if peak <= ZERO:
            continue
        drawdown = (peak - value) / peak * ONE_HUNDRED
        if drawdown > max_drawdown:
            max_drawdown = drawdown

    return round_percent(min(max_drawdown, ONE_HUNDRED))


# =============================================================================
# CALCULATOR
# =============================================================================

class RiskCalculator:
    """Calculates every risk metric for a history series at once."""

    @staticmethod
    def calculate_all(
            history: Sequence[HistoryPoint],
            risk_free_rate_percent: Decimal = DEFAULT_RISK_FREE_RATE_PERCENT,
    ) -> RiskSummary:
        """
        Args:
            history: Daily points, ascending by date
            risk_free_rate_percent: Annual risk-free rate in percent

        Returns:
            RiskSummary with total return, volatility, Sharpe and drawdown
        """
        values = [point.value for point in history]

        total_return, total_return_percent = calculate_total_return(values)
        volatility = calculate_volatility(values)
        sharpe = calculate_sharpe_ratio(total_return_percent, volatility, risk_free_rate_percent)
        max_drawdown = calculate_max_drawdown(values)

        logger.debug(
            f"Risk over {len(values)} points: return={total_return_percent}% "
            f"vol={volatility}% sharpe={sharpe} mdd={max_drawdown}%"
        )

        return RiskSummary(
            total_return=total_return,
            total_return_percent=total_return_percent,
            volatility=volatility,
            sharpe_ratio=sharpe,
            max_drawdown=max_drawdown,
        )
