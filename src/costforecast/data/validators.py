"""Data quality validators for the Cost Forecast Engine.

Provides validation checks for historical cost series before forecasting.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, List, Sequence

from ..engine.statistics import MIN_HISTORY_POINTS
from ..models import TimeSeriesPoint

logger = logging.getLogger(__name__)


class DataQualityValidator:
    """Validates historical cost series for forecasting."""

    def __init__(self, min_points: int = MIN_HISTORY_POINTS):
        """Initialize data quality validator.

        Args:
            min_points: Minimum history length required to forecast
        """
        self.min_points = min_points

    def validate_series(self, points: Sequence[TimeSeriesPoint]) -> Dict[str, Any]:
        """Validate a daily cost series.

        Errors fail validation; warnings are informational.

        Args:
            points: Series to validate

        Returns:
            Dictionary with validation results
        """
        logger.info(f"Validating {len(points)} cost points")

        validation_results: Dict[str, Any] = {
            'total_points': len(points),
            'validation_passed': True,
            'errors': [],
            'warnings': [],
            'metrics': {}
        }

        history = self._check_history_length(points)
        if history['count'] > 0:
            validation_results['errors'].append(history)

        ordering = self._check_ordering(points)
        if ordering['count'] > 0:
            validation_results['errors'].append(ordering)

        predicted = self._check_predicted_points(points)
        if predicted['count'] > 0:
            validation_results['warnings'].append(predicted)

        gaps = self._check_data_gaps(points)
        if gaps['count'] > 0:
            validation_results['warnings'].append(gaps)

        zero_days = self._check_zero_costs(points)
        validation_results['metrics']['zero_cost_days'] = zero_days

        if points:
            validation_results['metrics']['date_range'] = {
                'start': points[0].date.isoformat(),
                'end': points[-1].date.isoformat(),
                'span_days': (points[-1].date - points[0].date).days + 1
            }

        validation_results['validation_passed'] = not validation_results['errors']

        logger.info(
            f"Validation completed: {'PASSED' if validation_results['validation_passed'] else 'FAILED'}"
        )
        return validation_results

    def _check_history_length(self, points: Sequence[TimeSeriesPoint]) -> Dict[str, Any]:
        missing = max(0, self.min_points - len(points))
        return {
            'check': 'history_length',
            'count': missing,
            'message': f'Need at least {self.min_points} points, found {len(points)}',
            'severity': 'error' if missing else 'info'
        }

    def _check_ordering(self, points: Sequence[TimeSeriesPoint]) -> Dict[str, Any]:
        """Dates must be strictly ascending: no duplicates, no reversals."""
        violations: List[str] = [
            current.date.isoformat()
            for previous, current in zip(points, points[1:])
            if current.date <= previous.date
        ]
        return {
            'check': 'ordering',
            'count': len(violations),
            'message': f'Found {len(violations)} out-of-order or duplicate dates',
            'dates': violations[:10],
            'severity': 'error' if violations else 'info'
        }

    def _check_predicted_points(self, points: Sequence[TimeSeriesPoint]) -> Dict[str, Any]:
        predicted_count = sum(1 for p in points if not p.is_actual)
        return {
            'check': 'predicted_points',
            'count': predicted_count,
            'message': f'Found {predicted_count} predicted points in historical data',
            'severity': 'warning' if predicted_count else 'info'
        }

    def _check_data_gaps(self, points: Sequence[TimeSeriesPoint]) -> Dict[str, Any]:
        """Check for missing calendar days between observations."""
        if len(points) < 2:
            return {'check': 'data_gaps', 'count': 0, 'message': 'Insufficient data for gap analysis'}

        present = {p.date for p in points}
        start, end = min(present), max(present)
        span = (end - start).days + 1
        missing_dates = [
            start + timedelta(days=i)
            for i in range(span)
            if start + timedelta(days=i) not in present
        ]

        return {
            'check': 'data_gaps',
            'count': len(missing_dates),
            'percentage': float(len(missing_dates) / span * 100),
            'message': f'Found {len(missing_dates)} missing days in date range',
            'missing_dates': [d.isoformat() for d in missing_dates[:10]],
            'severity': 'warning' if missing_dates else 'info'
        }

    def _check_zero_costs(self, points: Sequence[TimeSeriesPoint]) -> Dict[str, Any]:
        zero_count = sum(1 for p in points if p.value == 0)
        return {
            'count': zero_count,
            'percentage': float(zero_count / len(points) * 100) if points else 0.0
        }
