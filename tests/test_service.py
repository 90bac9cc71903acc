"""Unit tests for the forecast service."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pandas as pd
import pytest

from costforecast.data.collectors import DataFrameCostCollector
from costforecast.exceptions import InsufficientHistoryError, InvalidParameterError
from costforecast.models import ForecastMethod, ForecastPeriod, ScenarioParams, ScenarioType
from costforecast.service import MODEL_VERSION, CostForecastService


@pytest.fixture
def service(sample_cost_rows, sample_config):
    return CostForecastService(DataFrameCostCollector(sample_cost_rows, sample_config), sample_config)


class TestGenerateForecast:
    """Test cases for CostForecastService.generate_forecast."""

    def test_thirty_day_report(self, service):
        report = service.generate_forecast("acme", "30d")

        assert report.organization_id == "acme"
        assert report.forecast_period == ForecastPeriod.DAYS_30
        assert report.forecast.method == ForecastMethod.ENSEMBLE
        assert len(report.forecast.predictions) == 30
        assert report.predicted_30_day == pytest.approx(3000.0)
        assert report.historical_average == pytest.approx(100.0)
        assert report.historical_total == pytest.approx(3000.0)
        assert report.historical_start_date == date(2024, 1, 1)
        assert report.historical_end_date == date(2024, 1, 30)
        assert report.prediction_start_date == date(2024, 1, 31)
        assert report.prediction_end_date == date(2024, 2, 29)
        assert report.model_version == MODEL_VERSION

    def test_year_report_totals(self, service):
        report = service.generate_forecast("acme", ForecastPeriod.YEAR)

        assert len(report.forecast.predictions) == 365
        assert report.predicted_60_day == pytest.approx(6000.0)
        assert report.predicted_90_day == pytest.approx(9000.0)
        assert report.predicted_quarter == report.predicted_90_day
        assert report.predicted_year == pytest.approx(36000.0)

    def test_defaults_from_config(self, service):
        report = service.generate_forecast("globex")

        assert report.forecast_period == ForecastPeriod.DAYS_90
        assert len(report.forecast.predictions) == 90

    def test_explicit_method(self, service):
        report = service.generate_forecast("globex", "30d", "linear_regression")

        assert report.forecast.method == ForecastMethod.LINEAR_REGRESSION
        assert report.forecast.predictions[0].value == pytest.approx(190.0)

    def test_requests_configured_lookback(self, sample_config, make_series):
        collector = MagicMock()
        collector.get_historical_costs.return_value = make_series([50.0] * 10)

        CostForecastService(collector, sample_config).generate_forecast("acme", "30d")

        collector.get_historical_costs.assert_called_once_with("acme", 90)

    def test_insufficient_history(self, service):
        with pytest.raises(InsufficientHistoryError):
            service.generate_forecast("tiny")

    def test_invalid_period(self, service):
        with pytest.raises(InvalidParameterError) as exc_info:
            service.generate_forecast("acme", "fortnight")

        assert exc_info.value.parameter == "period"
        assert exc_info.value.value == "fortnight"

    def test_invalid_method(self, service):
        with pytest.raises(InvalidParameterError) as exc_info:
            service.generate_forecast("acme", "30d", "prophet")

        assert exc_info.value.parameter == "method"

    def test_camel_case_report(self, service):
        data = service.generate_forecast("acme", "30d").to_dict()

        assert data["organizationId"] == "acme"
        assert data["forecastPeriod"] == "30d"
        assert data["predicted30Day"] == pytest.approx(3000.0)
        assert data["modelVersion"] == MODEL_VERSION
        assert len(data["forecast"]["predictions"]) == 30


class TestGenerateScenario:
    """Test cases for CostForecastService.generate_scenario."""

    def test_against_ninety_day_baseline(self, service):
        scenario = service.generate_scenario(
            "acme", ScenarioType.TRAFFIC_2X, ScenarioParams(traffic_multiplier=3)
        )

        assert len(scenario.predictions) == 90
        assert scenario.baseline_cost == pytest.approx(3000.0)
        assert scenario.scenario_cost == pytest.approx(9000.0)
        assert scenario.predicted_90_day == pytest.approx(27000.0)

    def test_type_as_string(self, service):
        scenario = service.generate_scenario("acme", "optimization", ScenarioParams(optimization_savings=300))

        assert scenario.cost_delta == pytest.approx(-300.0)


class TestForecastMany:
    """Test cases for batch forecasting."""

    def test_mixed_batch(self, service):
        results = service.forecast_many(["tiny", "acme", "initech", "globex"], "30d")

        assert [r.organization_id for r in results] == ["tiny", "acme", "initech", "globex"]
        assert [r.status for r in results] == ["failed", "success", "failed", "success"]
        assert results[0].report is None
        assert "INSUFFICIENT_HISTORY" in results[0].error
        assert results[1].report.predicted_30_day == pytest.approx(3000.0)

    def test_result_to_dict(self, service):
        results = service.forecast_many(["acme", "tiny"], "30d")

        success, failure = (r.to_dict() for r in results)
        assert success["status"] == "success"
        assert success["report"]["organizationId"] == "acme"
        assert failure["report"] is None
        assert failure["error"]

    def test_empty_batch(self, service):
        assert service.forecast_many([]) == []

    def test_bad_rows_fail_only_their_organization(self, sample_cost_rows, sample_config):
        broken = pd.DataFrame(
            [{"organization_id": "broken", "usage_date": "not-a-date", "daily_cost": 1.0}]
        )
        frame = pd.concat([sample_cost_rows, broken], ignore_index=True)
        service = CostForecastService(DataFrameCostCollector(frame, sample_config), sample_config)

        results = service.forecast_many(["broken", "acme"], "30d")

        assert [r.status for r in results] == ["failed", "success"]
        assert "Unparseable usage dates" in results[0].error

    def test_malformed_source_fails_every_organization(self, sample_cost_rows, sample_config):
        collector = DataFrameCostCollector(sample_cost_rows.drop(columns=["usage_date"]), sample_config)
        service = CostForecastService(collector, sample_config)

        results = service.forecast_many(["acme", "globex"], "30d")

        assert [r.status for r in results] == ["failed", "failed"]
        assert all("usage_date" in r.error for r in results)
