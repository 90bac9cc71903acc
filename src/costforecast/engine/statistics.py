"""Descriptive statistics over daily cost series.

Helpers shared by the forecast engine: central tendency and spread,
trend direction, week-over-week growth, volatility and the confidence
interval around a set of predictions. Degenerate inputs (too few points,
zero means) resolve to neutral values instead of raising.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..models import ConfidenceInterval, TimeSeriesPoint, Trend

MIN_HISTORY_POINTS = 7
TREND_THRESHOLD_PCT = 5.0
GROWTH_WINDOW = 7
MAX_VOLATILITY = 100.0
Z_95 = 1.96


def values_of(points: Sequence[TimeSeriesPoint]) -> np.ndarray:
    return np.array([p.value for p in points], dtype=float)


def mean(values: Sequence[float] | np.ndarray) -> float:
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def stddev(values: Sequence[float] | np.ndarray) -> float:
    """Population standard deviation (ddof=0)."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(arr.std())


def percent_change(base: float, current: float) -> float:
    if base == 0:
        return 0.0
    return (current - base) / base * 100


def detect_trend(points: Sequence[TimeSeriesPoint]) -> Trend:
    """Compare first-half and second-half averages of the series."""
    if len(points) < MIN_HISTORY_POINTS:
        return Trend.STABLE

    values = values_of(points)
    split = len(values) // 2
    change = percent_change(mean(values[:split]), mean(values[split:]))

    if change > TREND_THRESHOLD_PCT:
        return Trend.INCREASING
    if change < -TREND_THRESHOLD_PCT:
        return Trend.DECREASING
    return Trend.STABLE


def growth_rate(points: Sequence[TimeSeriesPoint]) -> float:
    """Percent change between the first and last week of the series."""
    if len(points) < GROWTH_WINDOW:
        return 0.0

    values = values_of(points)
    first_week = mean(values[:GROWTH_WINDOW])
    last_week = mean(values[-GROWTH_WINDOW:])
    return percent_change(first_week, last_week)


def volatility(points: Sequence[TimeSeriesPoint]) -> float:
    """Coefficient of variation as a 0-100 score."""
    if len(points) < MIN_HISTORY_POINTS:
        return 0.0

    values = values_of(points)
    avg = mean(values)
    if avg == 0:
        return 0.0
    return min(MAX_VOLATILITY, stddev(values) / avg * 100)


def confidence_interval(
    history: Sequence[TimeSeriesPoint],
    predictions: Sequence[TimeSeriesPoint],
) -> ConfidenceInterval:
    """95% band around the mean prediction, sized by historical spread."""
    margin = Z_95 * stddev(values_of(history))
    avg_prediction = mean(values_of(predictions))

    return ConfidenceInterval(
        lower=max(0.0, avg_prediction - margin),
        upper=avg_prediction + margin,
    )
