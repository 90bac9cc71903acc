"""Unit tests for the forecast engine."""

from __future__ import annotations

import json
from datetime import date

import pytest

from costforecast.engine import generate_forecast
from costforecast.exceptions import (
    ForecasterError,
    InsufficientHistoryError,
    InvalidParameterError,
)
from costforecast.models import ForecastMethod, Trend


class TestGenerateForecast:
    """Test cases for generate_forecast."""

    def test_constant_moving_average(self, constant_history):
        """Flat history forecasts a flat, stable line."""
        forecast = generate_forecast(constant_history, 3, ForecastMethod.MOVING_AVERAGE)

        assert [p.value for p in forecast.predictions] == [100.0, 100.0, 100.0]
        assert forecast.trend == Trend.STABLE
        assert forecast.growth_rate == 0.0
        assert forecast.volatility == 0.0
        assert forecast.confidence == 70
        assert forecast.confidence_interval.lower == 100.0
        assert forecast.confidence_interval.upper == 100.0

    def test_defaults_to_ensemble(self, rising_history):
        forecast = generate_forecast(rising_history, 30)

        assert forecast.method == ForecastMethod.ENSEMBLE
        assert forecast.confidence == 85
        assert len(forecast.predictions) == 30
        assert forecast.trend == Trend.INCREASING
        assert forecast.growth_rate == pytest.approx(20.0)

    def test_accepts_method_string(self, constant_history):
        forecast = generate_forecast(constant_history, 5, "exponential_smoothing")

        assert forecast.method == ForecastMethod.EXPONENTIAL_SMOOTHING
        assert forecast.confidence == 80

    def test_predictions_start_after_history(self, constant_history):
        forecast = generate_forecast(constant_history, 2)

        assert constant_history[-1].date == date(2024, 1, 7)
        assert forecast.predictions[0].date == date(2024, 1, 8)
        assert forecast.predictions[-1].date == date(2024, 1, 9)

    def test_history_echoed(self, rising_history):
        forecast = generate_forecast(rising_history, 1)

        assert list(forecast.historical_data) == rising_history
        assert all(p.is_actual for p in forecast.historical_data)

    def test_all_zero_history(self, make_series):
        forecast = generate_forecast(make_series([0.0] * 10), 7)

        assert all(p.value == 0.0 for p in forecast.predictions)
        assert forecast.trend == Trend.STABLE
        assert forecast.volatility == 0.0
        assert forecast.confidence_interval.lower == 0.0
        assert forecast.confidence_interval.upper == 0.0

    @pytest.mark.parametrize("method", list(ForecastMethod))
    def test_invariants_hold_for_every_method(self, method, make_series):
        history = make_series([100, 40, 250, 10, 300, 5, 180, 90, 400, 20, 60, 350])

        forecast = generate_forecast(history, 45, method)

        assert len(forecast.predictions) == 45
        assert all(p.value >= 0 and not p.is_actual for p in forecast.predictions)
        assert 0 <= forecast.confidence_interval.lower <= forecast.confidence_interval.upper
        assert 0 <= forecast.volatility <= 100

    def test_deterministic(self, rising_history):
        first = generate_forecast(rising_history, 30)
        second = generate_forecast(rising_history, 30)

        assert first == second
        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())


class TestHistoryBoundary:
    """Test cases for the minimum history length."""

    def test_seven_points_succeed(self, make_series):
        forecast = generate_forecast(make_series([10.0] * 7), 1)
        assert len(forecast.predictions) == 1

    def test_six_points_fail(self, make_series):
        with pytest.raises(InsufficientHistoryError) as exc_info:
            generate_forecast(make_series([10.0] * 6), 1)

        error = exc_info.value
        assert error.required == 7
        assert error.actual == 6
        assert error.details["missing"] == 1
        assert error.error_code == "INSUFFICIENT_HISTORY"
        assert isinstance(error, ValueError)
        assert isinstance(error, ForecasterError)

    def test_empty_history_fails(self):
        with pytest.raises(InsufficientHistoryError):
            generate_forecast([], 30)


class TestParameterValidation:
    """Test cases for horizon and method validation."""

    @pytest.mark.parametrize("horizon", [0, -5, 2.5, True])
    def test_invalid_horizon(self, horizon, constant_history):
        with pytest.raises(InvalidParameterError) as exc_info:
            generate_forecast(constant_history, horizon)

        assert exc_info.value.parameter == "horizon_days"

    def test_unknown_method(self, constant_history):
        with pytest.raises(InvalidParameterError) as exc_info:
            generate_forecast(constant_history, 5, "prophet")

        assert exc_info.value.parameter == "method"
        assert "INVALID_PARAMETER" in str(exc_info.value)
