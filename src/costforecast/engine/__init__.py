"""Forecast and scenario engines.

Pure, stateless computations over daily cost series.
"""

from .forecast_engine import generate_forecast
from .scenario_engine import generate_scenario
from .strategies import ENSEMBLE_WEIGHTS, METHOD_CONFIDENCE, STRATEGIES

__all__ = [
    "generate_forecast",
    "generate_scenario",
    "ENSEMBLE_WEIGHTS",
    "METHOD_CONFIDENCE",
    "STRATEGIES",
]
