"""Data model for cost forecasts and scenarios.

Every record is an immutable pydantic model. Attribute names are snake_case;
``to_dict()`` produces the JSON shape consumed by controllers and the
narrative layer: camelCase keys, ISO-8601 dates and plain numbers.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ForecastMethod(str, Enum):
    """Forecasting strategies available to the engine."""

    LINEAR_REGRESSION = "linear_regression"
    MOVING_AVERAGE = "moving_average"
    EXPONENTIAL_SMOOTHING = "exponential_smoothing"
    ENSEMBLE = "ensemble"


class ScenarioType(str, Enum):
    """What-if transforms applied to a baseline forecast."""

    BASELINE = "baseline"
    TRAFFIC_2X = "traffic_2x"
    TRAFFIC_HALF = "traffic_half"
    NEW_SERVICE = "new_service"
    OPTIMIZATION = "optimization"
    CUSTOM = "custom"


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class ForecastPeriod(str, Enum):
    """Named forecast horizons exposed to callers."""

    DAYS_30 = "30d"
    DAYS_60 = "60d"
    DAYS_90 = "90d"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    ForecastPeriod.DAYS_30: 30,
    ForecastPeriod.DAYS_60: 60,
    ForecastPeriod.DAYS_90: 90,
    ForecastPeriod.QUARTER: 90,
    ForecastPeriod.YEAR: 365,
}


class Record(BaseModel):
    """Base for immutable, JSON-serializable records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys and ISO dates."""
        return self.model_dump(mode="json", by_alias=True)


class TimeSeriesPoint(Record):
    """A single daily cost observation or prediction."""

    date: dt.date
    value: float = Field(..., ge=0)
    is_actual: bool = True


class ConfidenceInterval(Record):
    lower: float = Field(..., ge=0)
    upper: float

    @model_validator(mode="after")
    def _check_bounds(self) -> "ConfidenceInterval":
        if self.upper < self.lower:
            raise ValueError(f"upper bound {self.upper} is below lower bound {self.lower}")
        return self


class Forecast(Record):
    """Numeric output of the forecast engine."""

    historical_data: tuple[TimeSeriesPoint, ...]
    predictions: tuple[TimeSeriesPoint, ...]
    method: ForecastMethod
    confidence: int = Field(..., ge=0, le=100)
    confidence_interval: ConfidenceInterval
    trend: Trend
    growth_rate: float
    volatility: float = Field(..., ge=0, le=100)


class ScenarioParams(Record):
    """Parameters for a what-if scenario.

    Only the field relevant to the chosen scenario type is read; the others
    are ignored.
    """

    traffic_multiplier: Optional[float] = None
    new_service_cost: Optional[float] = None
    optimization_savings: Optional[float] = None
    custom_adjustment: Optional[float] = None


class Scenario(Record):
    """Result of applying a scenario transform to a baseline forecast."""

    type: ScenarioType
    params: ScenarioParams
    baseline_cost: float
    scenario_cost: float = Field(..., ge=0)
    cost_delta: float
    cost_delta_percent: float
    predictions: tuple[TimeSeriesPoint, ...]
    predicted_30_day: float = Field(..., alias="predicted30Day")
    predicted_90_day: float = Field(..., alias="predicted90Day")


class CostForecastReport(Record):
    """Forecast plus the period totals and history summary callers display."""

    organization_id: str
    forecast_period: ForecastPeriod
    forecast: Forecast

    historical_start_date: dt.date
    historical_end_date: dt.date
    historical_average: float
    historical_total: float

    prediction_start_date: dt.date
    prediction_end_date: dt.date

    predicted_30_day: float = Field(..., alias="predicted30Day")
    predicted_60_day: float = Field(..., alias="predicted60Day")
    predicted_90_day: float = Field(..., alias="predicted90Day")
    predicted_quarter: float
    predicted_year: float

    model_version: str
