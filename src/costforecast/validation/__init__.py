"""Validation module for the Cost Forecast Engine.

Provides forecast accuracy scoring and holdout backtesting.
"""

from .accuracy import AccuracyPoint, BacktestResult, ForecastAccuracy, backtest, evaluate_accuracy

__all__ = ['AccuracyPoint', 'BacktestResult', 'ForecastAccuracy', 'backtest', 'evaluate_accuracy']
