"""Forecast accuracy scoring and holdout backtests.

Scores predictions against realised daily costs and replays the engine on
a truncated history to measure how it would have performed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Sequence

import numpy as np
from sklearn.metrics import mean_absolute_error

from ..engine.forecast_engine import generate_forecast
from ..exceptions import DataValidationError, InvalidParameterError
from ..models import ForecastMethod, TimeSeriesPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccuracyPoint:
    """Prediction and realised cost for a single day."""
    date: date
    predicted: float
    actual: float
    error: float          # predicted - actual
    error_percent: float  # |error| / actual * 100, 0 when actual is 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'predicted': self.predicted,
            'actual': self.actual,
            'error': self.error,
            'errorPercent': self.error_percent,
        }


@dataclass(frozen=True)
class ForecastAccuracy:
    """Container for accuracy metrics over overlapping days."""
    points: List[AccuracyPoint]
    mean_absolute_error: float
    mean_absolute_percentage_error: float
    accuracy: float  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            'predictions': [p.to_dict() for p in self.points],
            'meanAbsoluteError': self.mean_absolute_error,
            'meanAbsolutePercentageError': self.mean_absolute_percentage_error,
            'accuracy': self.accuracy,
        }


@dataclass(frozen=True)
class BacktestResult:
    """Container for backtest results."""
    method: ForecastMethod
    train_points: int
    holdout_days: int
    accuracy: ForecastAccuracy
    predictions: List[TimeSeriesPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert backtest result to dictionary."""
        return {
            'method': self.method.value,
            'trainPoints': self.train_points,
            'holdoutDays': self.holdout_days,
            'accuracy': self.accuracy.to_dict(),
        }


def evaluate_accuracy(
    predictions: Sequence[TimeSeriesPoint],
    actuals: Sequence[TimeSeriesPoint],
) -> ForecastAccuracy:
    """Score predictions against realised costs on matching dates.

    Args:
        predictions: Predicted daily costs
        actuals: Observed daily costs

    Returns:
        ForecastAccuracy over the overlapping dates

    Raises:
        DataValidationError: If no dates overlap
    """
    actual_by_date = {p.date: p.value for p in actuals}
    paired = [
        (p.date, p.value, actual_by_date[p.date])
        for p in predictions
        if p.date in actual_by_date
    ]

    if not paired:
        raise DataValidationError(
            "No overlapping dates between predictions and actuals",
            details={'predictions': len(predictions), 'actuals': len(actuals)}
        )

    y_pred = np.array([pred for _, pred, _ in paired], dtype=float)
    y_true = np.array([actual for _, _, actual in paired], dtype=float)

    errors = y_pred - y_true
    safe_true = np.where(y_true == 0, 1.0, y_true)
    error_pct = np.where(y_true == 0, 0.0, np.abs(errors) / safe_true * 100)

    points = [
        AccuracyPoint(
            date=day,
            predicted=float(pred),
            actual=float(actual),
            error=float(err),
            error_percent=float(pct),
        )
        for (day, pred, actual), err, pct in zip(paired, errors, error_pct)
    ]

    mae = float(mean_absolute_error(y_true, y_pred))
    mape = float(error_pct.mean())

    logger.info(f"Scored {len(points)} days: MAE={mae:.2f}, MAPE={mape:.2f}%")

    return ForecastAccuracy(
        points=points,
        mean_absolute_error=mae,
        mean_absolute_percentage_error=mape,
        accuracy=max(0.0, 100.0 - mape),
    )


def backtest(
    history: Sequence[TimeSeriesPoint],
    holdout_days: int,
    method: ForecastMethod | str = ForecastMethod.ENSEMBLE,
) -> BacktestResult:
    """Forecast the last ``holdout_days`` from the preceding history.

    Args:
        history: Full observed series, ascending by date
        holdout_days: Trailing days withheld from the forecast and scored
        method: Forecasting strategy to evaluate

    Returns:
        BacktestResult with accuracy over the holdout

    Raises:
        InvalidParameterError: If the holdout is not positive or consumes the history
        InsufficientHistoryError: If fewer than 7 points remain for training
    """
    if holdout_days < 1 or holdout_days >= len(history):
        raise InvalidParameterError(
            f"Holdout must be between 1 and {len(history) - 1} days, got {holdout_days}",
            parameter="holdout_days",
            value=holdout_days,
        )

    train = list(history[:-holdout_days])
    holdout = list(history[-holdout_days:])

    forecast = generate_forecast(train, holdout_days, method)
    accuracy = evaluate_accuracy(forecast.predictions, holdout)

    logger.info(
        f"Backtest {forecast.method.value}: {len(train)} train points, "
        f"{holdout_days} holdout days, accuracy {accuracy.accuracy:.1f}"
    )

    return BacktestResult(
        method=forecast.method,
        train_points=len(train),
        holdout_days=holdout_days,
        accuracy=accuracy,
        predictions=list(forecast.predictions),
    )
