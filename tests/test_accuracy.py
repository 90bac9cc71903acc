"""Unit tests for forecast accuracy and backtesting."""

from __future__ import annotations

from datetime import date

import pytest

from costforecast.exceptions import (
    DataValidationError,
    InsufficientHistoryError,
    InvalidParameterError,
)
from costforecast.models import ForecastMethod
from costforecast.validation import backtest, evaluate_accuracy


class TestEvaluateAccuracy:
    """Test cases for evaluate_accuracy."""

    def test_perfect_predictions(self, make_series):
        actuals = make_series([10.0, 20.0, 30.0])

        accuracy = evaluate_accuracy(actuals, actuals)

        assert accuracy.mean_absolute_error == 0.0
        assert accuracy.mean_absolute_percentage_error == 0.0
        assert accuracy.accuracy == 100.0

    def test_symmetric_errors(self, make_series):
        accuracy = evaluate_accuracy(make_series([110.0, 90.0]), make_series([100.0, 100.0]))

        assert [p.error for p in accuracy.points] == pytest.approx([10.0, -10.0])
        assert [p.error_percent for p in accuracy.points] == pytest.approx([10.0, 10.0])
        assert accuracy.mean_absolute_error == pytest.approx(10.0)
        assert accuracy.mean_absolute_percentage_error == pytest.approx(10.0)
        assert accuracy.accuracy == pytest.approx(90.0)

    def test_zero_actual_has_no_percent_error(self, make_series):
        accuracy = evaluate_accuracy(make_series([5.0]), make_series([0.0]))

        assert accuracy.points[0].error_percent == 0.0
        assert accuracy.mean_absolute_error == pytest.approx(5.0)

    def test_accuracy_floor(self, make_series):
        accuracy = evaluate_accuracy(make_series([500.0]), make_series([100.0]))

        assert accuracy.mean_absolute_percentage_error == pytest.approx(400.0)
        assert accuracy.accuracy == 0.0

    def test_only_overlapping_dates_scored(self, make_series):
        predictions = make_series([1.0, 2.0, 3.0])
        actuals = make_series([2.5, 3.5, 4.0], start=date(2024, 1, 2))

        accuracy = evaluate_accuracy(predictions, actuals)

        assert [p.date for p in accuracy.points] == [date(2024, 1, 2), date(2024, 1, 3)]
        assert accuracy.mean_absolute_error == pytest.approx(0.5)

    def test_no_overlap(self, make_series):
        with pytest.raises(DataValidationError):
            evaluate_accuracy(make_series([1.0]), make_series([1.0], start=date(2025, 1, 1)))

    def test_to_dict(self, make_series):
        data = evaluate_accuracy(make_series([110.0]), make_series([100.0])).to_dict()

        assert data["meanAbsoluteError"] == pytest.approx(10.0)
        assert data["predictions"][0]["date"] == "2024-01-01"
        assert data["predictions"][0]["errorPercent"] == pytest.approx(10.0)


class TestBacktest:
    """Test cases for holdout backtests."""

    def test_linear_history_scores_perfectly(self, make_series):
        history = make_series([100 + 5 * i for i in range(20)])

        result = backtest(history, 5, ForecastMethod.LINEAR_REGRESSION)

        assert result.train_points == 15
        assert result.holdout_days == 5
        assert result.method == ForecastMethod.LINEAR_REGRESSION
        assert result.accuracy.accuracy == pytest.approx(100.0)
        assert [p.date for p in result.predictions] == [p.date for p in history[-5:]]

    def test_default_method(self, rising_history):
        result = backtest(rising_history, 3)

        assert result.method == ForecastMethod.ENSEMBLE
        assert 0.0 <= result.accuracy.accuracy <= 100.0
        assert result.to_dict()["trainPoints"] == 11

    @pytest.mark.parametrize("holdout", [0, 14, 20])
    def test_invalid_holdout(self, holdout, rising_history):
        with pytest.raises(InvalidParameterError):
            backtest(rising_history, holdout)

    def test_training_window_too_short(self, make_series):
        with pytest.raises(InsufficientHistoryError):
            backtest(make_series([10.0] * 10), 5)
