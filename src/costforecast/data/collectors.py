"""Historical cost collectors for the Cost Forecast Engine.

A collector answers ``get_historical_costs(organization_id, lookback_days)``
with an ascending, one-point-per-day series. The engine does not care where
the rows come from; the implementations here serve them from a pandas
DataFrame or a CSV export of daily cost rollups.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional, Protocol, Union

import pandas as pd

from ..config import ForecasterConfig
from ..exceptions import DataSourceError
from ..models import TimeSeriesPoint
from .processors import CostDataProcessor

logger = logging.getLogger(__name__)

ORGANIZATION_COLUMN = 'organization_id'
DATE_COLUMN = 'usage_date'
COST_COLUMN = 'daily_cost'


class HistoricalCostCollector(Protocol):
    """Source of historical daily costs for an organization."""

    def get_historical_costs(
        self, organization_id: str, lookback_days: int
    ) -> List[TimeSeriesPoint]:
        ...


class DataFrameCostCollector:
    """Serves historical costs from an in-memory frame of cost rows."""

    def __init__(
        self,
        frame: pd.DataFrame,
        config: Optional[ForecasterConfig] = None,
        as_of: Optional[date] = None
    ):
        """Initialize DataFrame collector.

        Args:
            frame: Rows with organization_id, usage_date and daily_cost columns
            config: Forecaster configuration
            as_of: Last day of the lookback window; defaults to the newest
                row for the requested organization
        """
        self.config = config
        self.as_of = as_of
        self.processor = CostDataProcessor(config)
        self._frame = frame

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    def organizations(self) -> List[str]:
        """Organization IDs present in the source rows."""
        return sorted(self.frame[ORGANIZATION_COLUMN].astype(str).unique().tolist())

    def get_historical_costs(
        self, organization_id: str, lookback_days: int
    ) -> List[TimeSeriesPoint]:
        """Collect the daily cost series for one organization.

        Args:
            organization_id: Organization to collect for
            lookback_days: Number of days ending at the window end to include

        Returns:
            Ascending daily series, empty when the organization has no rows

        Raises:
            DataSourceError: If the source rows are malformed
        """
        frame = self.frame
        missing_cols = [
            col for col in (ORGANIZATION_COLUMN, DATE_COLUMN, COST_COLUMN)
            if col not in frame.columns
        ]
        if missing_cols:
            raise DataSourceError(
                f"Missing required columns: {missing_cols}",
                source_type="dataframe",
                details={'missing_columns': missing_cols}
            )

        rows = frame[frame[ORGANIZATION_COLUMN].astype(str) == str(organization_id)]
        if rows.empty:
            logger.warning(f"No cost rows found for organization {organization_id}")
            return []

        try:
            dates = pd.to_datetime(rows[DATE_COLUMN]).dt.normalize()
        except (ValueError, TypeError) as e:
            raise DataSourceError(
                f"Unparseable usage dates for organization {organization_id}: {e}",
                source_type="dataframe",
                details={'organization_id': str(organization_id)}
            ) from e

        window_end = pd.Timestamp(self.as_of) if self.as_of else dates.max()
        window_start = window_end - timedelta(days=lookback_days - 1)
        in_window = rows[(dates >= window_start) & (dates <= window_end)]

        logger.info(
            f"Collecting {lookback_days} days of costs for organization {organization_id} "
            f"ending {window_end.date()}"
        )
        return self.processor.to_daily_series(in_window, DATE_COLUMN, COST_COLUMN)


class CsvCostCollector(DataFrameCostCollector):
    """Serves historical costs from a CSV export of daily cost rows."""

    def __init__(
        self,
        path: Union[str, Path],
        config: Optional[ForecasterConfig] = None,
        as_of: Optional[date] = None
    ):
        super().__init__(pd.DataFrame(), config=config, as_of=as_of)
        self.path = Path(path)
        self._loaded = False

    @property
    def frame(self) -> pd.DataFrame:
        """Lazy-loaded cost rows."""
        if not self._loaded:
            self._frame = self._read_csv()
            self._loaded = True
        return self._frame

    def _read_csv(self) -> pd.DataFrame:
        if not self.path.exists():
            raise DataSourceError(
                f"Cost export not found: {self.path}",
                source_type="csv",
                details={'path': str(self.path)}
            )

        try:
            df = pd.read_csv(self.path, dtype={ORGANIZATION_COLUMN: str})
        except Exception as e:
            raise DataSourceError(
                f"Failed to read cost export: {e}",
                source_type="csv",
                details={'path': str(self.path)}
            ) from e

        logger.info(f"Loaded {len(df)} cost rows from {self.path}")
        return df
