"""Data processors for the Cost Forecast Engine.

Turns raw cost rows into the ascending, one-point-per-day series the
forecast engine consumes.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from ..config import ForecasterConfig
from ..exceptions import DataSourceError, DataValidationError
from ..models import TimeSeriesPoint

logger = logging.getLogger(__name__)


class CostDataProcessor:
    """Processes raw cost rows into a daily cost series."""

    def __init__(self, config: Optional[ForecasterConfig] = None):
        """Initialize cost data processor.

        Args:
            config: Forecaster configuration; gap filling follows
                ``config.engine.fill_gaps`` when given
        """
        self.config = config
        self.fill_gaps = config.engine.fill_gaps if config is not None else True

    def to_daily_series(
        self,
        raw_data: pd.DataFrame,
        date_column: str = 'usage_date',
        target_column: str = 'daily_cost'
    ) -> List[TimeSeriesPoint]:
        """Aggregate raw cost rows into one observed point per day.

        Args:
            raw_data: Cost rows, possibly several per day
            date_column: Name of the date column
            target_column: Name of the cost column

        Returns:
            Ascending list of TimeSeriesPoint with ``is_actual=True``

        Raises:
            DataValidationError: If columns are missing or costs are negative
            DataSourceError: If the rows cannot be processed
        """
        try:
            logger.info(f"Preprocessing {len(raw_data)} cost records")

            missing_cols = [
                col for col in (date_column, target_column) if col not in raw_data.columns
            ]
            if missing_cols:
                raise DataValidationError(
                    f"Missing required columns: {missing_cols}",
                    details={'missing_columns': missing_cols}
                )

            df = raw_data[[date_column, target_column]].copy()
            df[date_column] = pd.to_datetime(df[date_column]).dt.normalize()
            df[target_column] = pd.to_numeric(df[target_column], errors='coerce')

            df = self._handle_missing_values(df, target_column)
            self._check_negative_costs(df, target_column)

            daily = self._aggregate_daily_costs(df, date_column, target_column)

            if self.fill_gaps and not daily.empty:
                daily = self._fill_missing_days(daily)

            points = [
                TimeSeriesPoint(date=ts.date(), value=float(value), is_actual=True)
                for ts, value in daily.items()
            ]

            logger.info(f"Prepared daily series with {len(points)} points")
            return points

        except DataValidationError:
            raise
        except Exception as e:
            raise DataSourceError(
                f"Cost data preprocessing failed: {e}",
                source_type="preprocessing"
            ) from e

    def _handle_missing_values(
        self,
        df: pd.DataFrame,
        cost_column: str
    ) -> pd.DataFrame:
        """Drop rows without a usable cost."""
        before_count = len(df)
        df = df.dropna()
        after_count = len(df)

        if before_count != after_count:
            logger.info(f"Removed {before_count - after_count} rows with missing costs")

        return df

    def _check_negative_costs(self, df: pd.DataFrame, cost_column: str) -> None:
        negative_count = int((df[cost_column] < 0).sum())
        if negative_count:
            raise DataValidationError(
                f"Found {negative_count} records with negative costs",
                details={'negative_count': negative_count}
            )

    def _aggregate_daily_costs(
        self,
        df: pd.DataFrame,
        date_column: str,
        cost_column: str
    ) -> pd.Series:
        """Sum costs per calendar day, ascending by date."""
        return df.groupby(date_column)[cost_column].sum().sort_index()

    def _fill_missing_days(self, daily: pd.Series) -> pd.Series:
        """Fill calendar gaps with the average of the observed days."""
        full_range = pd.date_range(start=daily.index.min(), end=daily.index.max(), freq='D')
        gap_count = len(full_range) - len(daily)

        if gap_count == 0:
            return daily

        logger.info(f"Filling {gap_count} missing days with the series average")
        return daily.reindex(full_range).fillna(daily.mean())
