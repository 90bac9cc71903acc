"""Forecast service for the Cost Forecast Engine.

Connects a historical cost collector to the forecast and scenario engines,
adds the period totals callers display, and runs forecasts for many
organizations in parallel.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from .config import ForecasterConfig
from .data.collectors import HistoricalCostCollector
from .engine import generate_forecast, generate_scenario
from .exceptions import ForecasterError, InvalidParameterError
from .models import (
    CostForecastReport,
    ForecastMethod,
    ForecastPeriod,
    Scenario,
    ScenarioParams,
    ScenarioType,
    TimeSeriesPoint,
)

logger = logging.getLogger(__name__)

MODEL_VERSION = "1.0.0"
SCENARIO_BASELINE_PERIOD = ForecastPeriod.DAYS_90

E = TypeVar("E", bound=Enum)


@dataclass
class BatchForecastResult:
    """Outcome of one organization's forecast within a batch run."""
    organization_id: str
    status: str
    report: Optional[CostForecastReport] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'organizationId': self.organization_id,
            'status': self.status,
            'report': self.report.to_dict() if self.report else None,
            'error': self.error,
        }


def _sum_values(points: Sequence[TimeSeriesPoint]) -> float:
    return float(sum(p.value for p in points))


def _parse_option(enum_type: Type[E], value: Any, parameter: str) -> E:
    try:
        return enum_type(value)
    except ValueError as e:
        raise InvalidParameterError(
            f"Unsupported forecast {parameter}: {value}",
            parameter=parameter,
            value=value,
        ) from e


class CostForecastService:
    """Generates cost forecasts and scenarios for organizations."""

    def __init__(self, collector: HistoricalCostCollector, config: ForecasterConfig):
        """Initialize forecast service.

        Args:
            collector: Source of historical daily costs
            config: Forecaster configuration
        """
        self.collector = collector
        self.config = config

    def generate_forecast(
        self,
        organization_id: str,
        period: ForecastPeriod | str | None = None,
        method: ForecastMethod | str | None = None,
    ) -> CostForecastReport:
        """Generate a cost forecast for an organization.

        Args:
            organization_id: Organization to forecast
            period: Forecast period, configured default when omitted
            method: Forecast method, configured default when omitted

        Returns:
            CostForecastReport with the forecast and period totals

        Raises:
            InvalidParameterError: If the period or method is not recognised
            InsufficientHistoryError: If the organization has under 7 days of costs
            DataSourceError: If historical costs cannot be collected
        """
        period = _parse_option(ForecastPeriod, period or self.config.engine.default_period, "period")
        method = _parse_option(ForecastMethod, method or self.config.engine.default_method, "method")

        logger.info(
            f"Generating {period.value} {method.value} forecast for organization {organization_id}"
        )

        history = self.collector.get_historical_costs(
            organization_id, self.config.engine.lookback_days
        )
        forecast = generate_forecast(history, period.days, method)
        predictions = forecast.predictions

        predicted_90_day = _sum_values(predictions[:90])
        historical_total = _sum_values(history)

        report = CostForecastReport(
            organization_id=organization_id,
            forecast_period=period,
            forecast=forecast,
            historical_start_date=history[0].date,
            historical_end_date=history[-1].date,
            historical_average=historical_total / len(history),
            historical_total=historical_total,
            prediction_start_date=predictions[0].date,
            prediction_end_date=predictions[-1].date,
            predicted_30_day=_sum_values(predictions[:30]),
            predicted_60_day=_sum_values(predictions[:60]),
            predicted_90_day=predicted_90_day,
            predicted_quarter=predicted_90_day,
            predicted_year=predicted_90_day * 4,
            model_version=MODEL_VERSION,
        )

        logger.info(
            f"Forecast generated for organization {organization_id}: "
            f"{report.predicted_30_day:.2f} (30d), trend {forecast.trend.value}"
        )
        return report

    def generate_scenario(
        self,
        organization_id: str,
        scenario_type: ScenarioType | str,
        params: Optional[ScenarioParams] = None,
    ) -> Scenario:
        """Generate a what-if scenario against a 90-day ensemble baseline.

        Args:
            organization_id: Organization to model
            scenario_type: Scenario transform to apply
            params: Scenario parameters

        Returns:
            Scenario compared against the baseline forecast
        """
        baseline = self.generate_forecast(
            organization_id, SCENARIO_BASELINE_PERIOD, ForecastMethod.ENSEMBLE
        )
        scenario = generate_scenario(baseline.forecast, scenario_type, params)

        logger.info(
            f"Scenario {scenario.type.value} for organization {organization_id}: "
            f"{scenario.cost_delta_percent:.1f}% cost change"
        )
        return scenario

    def forecast_many(
        self,
        organization_ids: Sequence[str],
        period: ForecastPeriod | str | None = None,
    ) -> List[BatchForecastResult]:
        """Forecast several organizations in parallel.

        A failing organization is recorded in its result and does not stop
        the rest of the batch.

        Args:
            organization_ids: Organizations to forecast
            period: Forecast period for every organization

        Returns:
            Results in the order the organizations were given
        """
        results: Dict[str, BatchForecastResult] = {}
        max_workers = self.config.batch.max_workers

        logger.info(
            f"Starting batch forecast for {len(organization_ids)} organizations "
            f"with {max_workers} workers"
        )

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_org = {
                executor.submit(self.generate_forecast, org_id, period): org_id
                for org_id in organization_ids
            }

            for future in as_completed(future_to_org):
                org_id = future_to_org[future]
                try:
                    results[org_id] = BatchForecastResult(
                        organization_id=org_id, status='success', report=future.result()
                    )
                except ForecasterError as e:
                    logger.error(f"Forecast for organization {org_id} failed: {e}")
                    results[org_id] = BatchForecastResult(
                        organization_id=org_id, status='failed', error=str(e)
                    )

        failed = sum(1 for r in results.values() if r.status == 'failed')
        logger.info(
            f"Batch forecast completed: {len(results) - failed} succeeded, {failed} failed"
        )
        return [results[org_id] for org_id in organization_ids]
