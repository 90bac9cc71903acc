"""Cost Forecast Engine - AWS cost forecasting and scenario planning.

This package turns historical daily AWS costs into ensemble forecasts
with trend, volatility and confidence statistics, and models what-if
scenarios on top of them.
"""

__version__ = "0.1.0"

from .config import ForecasterConfig
from .engine import generate_forecast, generate_scenario
from .exceptions import (
    ForecasterError,
    InsufficientHistoryError,
    InvalidParameterError,
)
from .models import (
    Forecast,
    ForecastMethod,
    ForecastPeriod,
    Scenario,
    ScenarioParams,
    ScenarioType,
    TimeSeriesPoint,
    Trend,
)

__all__ = [
    "ForecasterConfig",
    "ForecasterError",
    "InsufficientHistoryError",
    "InvalidParameterError",
    "Forecast",
    "ForecastMethod",
    "ForecastPeriod",
    "Scenario",
    "ScenarioParams",
    "ScenarioType",
    "TimeSeriesPoint",
    "Trend",
    "generate_forecast",
    "generate_scenario",
]
