"""Scenario engine.

Applies deterministic what-if transforms to the predictions of an existing
forecast and reports the 30-day cost delta against that baseline.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Callable, Mapping

from ..exceptions import InvalidParameterError
from ..models import Forecast, Scenario, ScenarioParams, ScenarioType, TimeSeriesPoint

logger = logging.getLogger(__name__)

COST_WINDOW_DAYS = 30
EXTENDED_WINDOW_DAYS = 90
DAYS_PER_MONTH = 30
DEFAULT_TRAFFIC_MULTIPLIER = 2.0
TRAFFIC_HALF_FACTOR = 0.5

Transform = Callable[[float, ScenarioParams], float]


def _traffic_2x(value: float, params: ScenarioParams) -> float:
    multiplier = params.traffic_multiplier
    if multiplier is None:
        multiplier = DEFAULT_TRAFFIC_MULTIPLIER
    return value * multiplier


def _traffic_half(value: float, params: ScenarioParams) -> float:
    return value * TRAFFIC_HALF_FACTOR


def _new_service(value: float, params: ScenarioParams) -> float:
    return value + (params.new_service_cost or 0.0) / DAYS_PER_MONTH


def _optimization(value: float, params: ScenarioParams) -> float:
    return max(0.0, value - (params.optimization_savings or 0.0) / DAYS_PER_MONTH)


def _custom(value: float, params: ScenarioParams) -> float:
    return value * (1 + (params.custom_adjustment or 0.0) / 100)


def _baseline(value: float, params: ScenarioParams) -> float:
    return value


TRANSFORMS: Mapping[ScenarioType, Transform] = MappingProxyType(
    {
        ScenarioType.TRAFFIC_2X: _traffic_2x,
        ScenarioType.TRAFFIC_HALF: _traffic_half,
        ScenarioType.NEW_SERVICE: _new_service,
        ScenarioType.OPTIMIZATION: _optimization,
        ScenarioType.CUSTOM: _custom,
        ScenarioType.BASELINE: _baseline,
    }
)


def validate_params(params: ScenarioParams) -> None:
    """Reject parameters that would make a scenario meaningless.

    Raises:
        InvalidParameterError: On negative amounts, a negative multiplier,
            an adjustment below -100% or any non-finite value
    """
    for name in ScenarioParams.model_fields:
        value = getattr(params, name)
        if value is not None and not math.isfinite(value):
            raise InvalidParameterError(
                f"Scenario parameter {name} must be finite, got {value}",
                parameter=name,
                value=value,
            )

    for name in ("traffic_multiplier", "new_service_cost", "optimization_savings"):
        value = getattr(params, name)
        if value is not None and value < 0:
            raise InvalidParameterError(
                f"Scenario parameter {name} must not be negative, got {value}",
                parameter=name,
                value=value,
            )

    if params.custom_adjustment is not None and params.custom_adjustment < -100:
        raise InvalidParameterError(
            f"Custom adjustment cannot go below -100%, got {params.custom_adjustment}",
            parameter="custom_adjustment",
            value=params.custom_adjustment,
        )


def _total(points: tuple[TimeSeriesPoint, ...] | list[TimeSeriesPoint], days: int) -> float:
    return float(sum(p.value for p in points[:days]))


def generate_scenario(
    baseline_forecast: Forecast,
    scenario_type: ScenarioType | str,
    params: ScenarioParams | None = None,
) -> Scenario:
    """Apply a what-if transform to a baseline forecast.

    Args:
        baseline_forecast: Forecast whose predictions are transformed
        scenario_type: Which transform to apply
        params: Transform parameters; defaults apply to unset fields

    Returns:
        Scenario with transformed predictions and 30-day cost delta

    Raises:
        InvalidParameterError: If the type is unknown or a parameter is out of bounds
    """
    try:
        scenario_type = ScenarioType(scenario_type)
    except ValueError as e:
        raise InvalidParameterError(
            f"Unsupported scenario type: {scenario_type}",
            parameter="type",
            value=scenario_type,
        ) from e

    params = params or ScenarioParams()
    validate_params(params)

    transform = TRANSFORMS[scenario_type]
    predictions = [
        point.model_copy(update={"value": max(0.0, transform(point.value, params))})
        for point in baseline_forecast.predictions
    ]

    baseline_cost = _total(baseline_forecast.predictions, COST_WINDOW_DAYS)
    scenario_cost = _total(predictions, COST_WINDOW_DAYS)
    cost_delta = scenario_cost - baseline_cost
    cost_delta_percent = cost_delta / baseline_cost * 100 if baseline_cost else 0.0

    logger.debug(f"Scenario {scenario_type.value}: {cost_delta_percent:.1f}% cost change")

    return Scenario(
        type=scenario_type,
        params=params,
        baseline_cost=baseline_cost,
        scenario_cost=scenario_cost,
        cost_delta=cost_delta,
        cost_delta_percent=cost_delta_percent,
        predictions=tuple(predictions),
        predicted_30_day=scenario_cost,
        predicted_90_day=_total(predictions, EXTENDED_WINDOW_DAYS),
    )
