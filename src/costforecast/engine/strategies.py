"""Forecasting strategies for daily cost series.

Each strategy is a pure function ``(history, horizon_days) -> predictions``
producing exactly ``horizon_days`` points that start the day after the last
historical date. Predicted values are clamped at zero.

Strategies are looked up by ``ForecastMethod`` in ``STRATEGIES``; the ensemble
blends the three base strategies with the fixed ``ENSEMBLE_WEIGHTS`` table.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

import numpy as np

from ..models import ForecastMethod, TimeSeriesPoint
from .statistics import values_of

logger = logging.getLogger(__name__)

Strategy = Callable[[Sequence[TimeSeriesPoint], int], list[TimeSeriesPoint]]

MOVING_AVERAGE_WINDOW = 7
SMOOTHING_ALPHA = 0.3
SMOOTHING_BETA = 0.1

ENSEMBLE_WEIGHTS: Mapping[ForecastMethod, float] = MappingProxyType(
    {
        ForecastMethod.LINEAR_REGRESSION: 0.25,
        ForecastMethod.MOVING_AVERAGE: 0.25,
        ForecastMethod.EXPONENTIAL_SMOOTHING: 0.50,
    }
)


def _to_points(history: Sequence[TimeSeriesPoint], values: np.ndarray) -> list[TimeSeriesPoint]:
    """Attach future dates to predicted values, clamping at zero."""
    last_date = history[-1].date
    return [
        TimeSeriesPoint(
            date=last_date + timedelta(days=i),
            value=max(0.0, float(value)),
            is_actual=False,
        )
        for i, value in enumerate(values, start=1)
    ]


def _steps(horizon_days: int) -> np.ndarray:
    return np.arange(1, horizon_days + 1, dtype=float)


def linear_regression(
    history: Sequence[TimeSeriesPoint], horizon_days: int
) -> list[TimeSeriesPoint]:
    """Ordinary least squares over day indices, extrapolated forward."""
    y = values_of(history)
    n = len(y)
    x = np.arange(n, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    denominator = n * (x * x).sum() - sum_x * sum_x
    slope = (n * (x * y).sum() - sum_x * sum_y) / denominator if denominator else 0.0
    intercept = (sum_y - slope * sum_x) / n

    predicted = intercept + slope * (n + _steps(horizon_days) - 1)
    logger.debug(f"Linear regression fit: slope={slope:.4f}, intercept={intercept:.4f}")
    return _to_points(history, predicted)


def moving_average(
    history: Sequence[TimeSeriesPoint],
    horizon_days: int,
    window: int = MOVING_AVERAGE_WINDOW,
) -> list[TimeSeriesPoint]:
    """Recent-window level plus the drift between the last two windows."""
    values = values_of(history)
    level = float(values[-window:].mean())

    trend = 0.0
    if len(values) >= 2 * window:
        previous = float(values[-2 * window : -window].mean())
        trend = (level - previous) / window

    predicted = level + trend * _steps(horizon_days)
    return _to_points(history, predicted)


def exponential_smoothing(
    history: Sequence[TimeSeriesPoint],
    horizon_days: int,
    alpha: float = SMOOTHING_ALPHA,
    beta: float = SMOOTHING_BETA,
) -> list[TimeSeriesPoint]:
    """Double (Holt) exponential smoothing with a linear extrapolation."""
    values = values_of(history)
    n = len(values)

    level = float(values[0])
    trend = float(values[-1] - values[0]) / n

    for actual in values[1:]:
        prev_level = level
        level = alpha * float(actual) + (1 - alpha) * (level + trend)
        trend = beta * (level - prev_level) + (1 - beta) * trend

    predicted = level + trend * _steps(horizon_days)
    logger.debug(f"Exponential smoothing state: level={level:.4f}, trend={trend:.4f}")
    return _to_points(history, predicted)


def ensemble(history: Sequence[TimeSeriesPoint], horizon_days: int) -> list[TimeSeriesPoint]:
    """Weighted blend of the three base strategies."""
    blended = np.zeros(horizon_days, dtype=float)
    for method, weight in ENSEMBLE_WEIGHTS.items():
        component = STRATEGIES[method](history, horizon_days)
        blended += weight * values_of(component)

    return _to_points(history, blended)


STRATEGIES: Mapping[ForecastMethod, Strategy] = MappingProxyType(
    {
        ForecastMethod.LINEAR_REGRESSION: linear_regression,
        ForecastMethod.MOVING_AVERAGE: moving_average,
        ForecastMethod.EXPONENTIAL_SMOOTHING: exponential_smoothing,
        ForecastMethod.ENSEMBLE: ensemble,
    }
)

METHOD_CONFIDENCE: Mapping[ForecastMethod, int] = MappingProxyType(
    {
        ForecastMethod.LINEAR_REGRESSION: 75,
        ForecastMethod.MOVING_AVERAGE: 70,
        ForecastMethod.EXPONENTIAL_SMOOTHING: 80,
        ForecastMethod.ENSEMBLE: 85,
    }
)
