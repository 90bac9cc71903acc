"""Forecast engine.

Turns a historical daily-cost series into a ``Forecast``: predictions from
the selected strategy plus trend, growth, volatility and confidence figures.
The engine is a pure function of its inputs and holds no state, so calls for
different organizations can run concurrently.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ..exceptions import InsufficientHistoryError, InvalidParameterError
from ..models import Forecast, ForecastMethod, TimeSeriesPoint
from . import statistics
from .strategies import METHOD_CONFIDENCE, STRATEGIES

logger = logging.getLogger(__name__)

MIN_HISTORY_POINTS = statistics.MIN_HISTORY_POINTS


def generate_forecast(
    history: Sequence[TimeSeriesPoint],
    horizon_days: int,
    method: ForecastMethod | str = ForecastMethod.ENSEMBLE,
) -> Forecast:
    """Generate a cost forecast from historical daily costs.

    Args:
        history: Observed daily costs, ascending by date, one point per day
        horizon_days: Number of future days to predict
        method: Forecasting strategy, ensemble by default

    Returns:
        Forecast with predictions and derived statistics

    Raises:
        InsufficientHistoryError: If fewer than 7 historical points are given
        InvalidParameterError: If the horizon or method is invalid
    """
    if len(history) < MIN_HISTORY_POINTS:
        raise InsufficientHistoryError(
            f"Need at least {MIN_HISTORY_POINTS} days of historical data for forecasting, "
            f"got {len(history)}",
            required=MIN_HISTORY_POINTS,
            actual=len(history),
        )

    if isinstance(horizon_days, bool) or not isinstance(horizon_days, int) or horizon_days < 1:
        raise InvalidParameterError(
            f"Forecast horizon must be a positive number of days, got {horizon_days!r}",
            parameter="horizon_days",
            value=horizon_days,
        )

    try:
        method = ForecastMethod(method)
    except ValueError as e:
        raise InvalidParameterError(
            f"Unsupported forecast method: {method}",
            parameter="method",
            value=method,
        ) from e

    logger.debug(
        f"Forecasting {horizon_days} days from {len(history)} points using {method.value}"
    )

    predictions = STRATEGIES[method](history, horizon_days)

    return Forecast(
        historical_data=tuple(history),
        predictions=tuple(predictions),
        method=method,
        confidence=METHOD_CONFIDENCE[method],
        confidence_interval=statistics.confidence_interval(history, predictions),
        trend=statistics.detect_trend(history),
        growth_rate=statistics.growth_rate(history),
        volatility=statistics.volatility(history),
    )
