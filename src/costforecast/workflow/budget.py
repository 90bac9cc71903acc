"""Budget projection from cost forecasts.

Projects end-of-period spend for a budget from the spend so far and the
forecast's daily predictions, and reports which alert thresholds the
projection crosses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

from ..exceptions import InvalidParameterError
from ..models import Forecast

logger = logging.getLogger(__name__)

DEFAULT_ALERT_THRESHOLDS = (50.0, 75.0, 90.0, 100.0)
AT_RISK_RATIO = 0.9


class BudgetState(str, Enum):
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OVER_BUDGET = "over_budget"


@dataclass(frozen=True)
class BudgetStatus:
    """Projected position of a budget at the end of its period."""
    amount: float
    current_spend: float
    projected_spend: float
    remaining_budget: float
    percent_used: float
    burn_rate: float
    days_remaining: int
    status: BudgetState
    triggered_thresholds: List[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'amount': self.amount,
            'currentSpend': self.current_spend,
            'projectedSpend': self.projected_spend,
            'remainingBudget': self.remaining_budget,
            'percentUsed': self.percent_used,
            'burnRate': self.burn_rate,
            'daysRemaining': self.days_remaining,
            'status': self.status.value,
            'triggeredThresholds': list(self.triggered_thresholds),
        }


def project_budget(
    forecast: Forecast,
    amount: float,
    current_spend: float,
    days_elapsed: int,
    period_days: int = 30,
    alert_thresholds: Sequence[float] = DEFAULT_ALERT_THRESHOLDS,
) -> BudgetStatus:
    """Project a budget's end-of-period spend.

    Args:
        forecast: Forecast whose predictions cover the rest of the period
        amount: Budget amount for the period
        current_spend: Spend so far in the period
        days_elapsed: Days of the period already spent
        period_days: Length of the budget period in days
        alert_thresholds: Percent-of-budget levels to report when crossed

    Returns:
        BudgetStatus for the period

    Raises:
        InvalidParameterError: On a non-positive amount, negative spend or
            days outside the period
    """
    if amount <= 0:
        raise InvalidParameterError(
            f"Budget amount must be positive, got {amount}", parameter="amount", value=amount
        )
    if current_spend < 0:
        raise InvalidParameterError(
            f"Current spend must not be negative, got {current_spend}",
            parameter="current_spend",
            value=current_spend,
        )
    if period_days < 1 or not 0 <= days_elapsed <= period_days:
        raise InvalidParameterError(
            f"Days elapsed must be within a {period_days}-day period, got {days_elapsed}",
            parameter="days_elapsed",
            value=days_elapsed,
        )

    days_remaining = period_days - days_elapsed
    forecast_spend = sum(p.value for p in forecast.predictions[:days_remaining])
    projected_spend = current_spend + forecast_spend

    burn_rate = current_spend / days_elapsed if days_elapsed else 0.0
    projected_percent = projected_spend / amount * 100

    if projected_spend > amount:
        status = BudgetState.OVER_BUDGET
    elif projected_spend > amount * AT_RISK_RATIO:
        status = BudgetState.AT_RISK
    else:
        status = BudgetState.ON_TRACK

    triggered = sorted(t for t in alert_thresholds if projected_percent >= t)
    if triggered:
        logger.info(f"Projected spend at {projected_percent:.1f}% crosses thresholds {triggered}")

    return BudgetStatus(
        amount=amount,
        current_spend=current_spend,
        projected_spend=projected_spend,
        remaining_budget=amount - current_spend,
        percent_used=current_spend / amount * 100,
        burn_rate=burn_rate,
        days_remaining=days_remaining,
        status=status,
        triggered_thresholds=triggered,
    )
