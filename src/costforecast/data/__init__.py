"""Data management module for the Cost Forecast Engine.

Provides historical cost collection, daily aggregation and
data quality checks ahead of forecasting.
"""

from .collectors import CsvCostCollector, DataFrameCostCollector, HistoricalCostCollector
from .processors import CostDataProcessor
from .validators import DataQualityValidator

__all__ = [
    "HistoricalCostCollector",
    "DataFrameCostCollector",
    "CsvCostCollector",
    "CostDataProcessor",
    "DataQualityValidator",
]
