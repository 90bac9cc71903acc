"""Pytest configuration and shared fixtures for Cost Forecast Engine tests."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

import pandas as pd
import pytest

from costforecast.config import ForecasterConfig
from costforecast.engine import generate_forecast
from costforecast.models import Forecast, ForecastMethod, TimeSeriesPoint

START_DATE = date(2024, 1, 1)


def _make_series(values: Sequence[float], start: date = START_DATE) -> list[TimeSeriesPoint]:
    """Build a daily observed series starting at ``start``."""
    return [
        TimeSeriesPoint(date=start + timedelta(days=i), value=float(v), is_actual=True)
        for i, v in enumerate(values)
    ]


def _flat_forecast(value: float = 100.0, horizon_days: int = 30) -> Forecast:
    """Forecast whose every prediction equals ``value``."""
    return generate_forecast(_make_series([value] * 7), horizon_days, ForecastMethod.MOVING_AVERAGE)


@pytest.fixture
def sample_config() -> ForecasterConfig:
    """Sample configuration for testing."""
    return ForecasterConfig(
        environment="dev",
        engine={"lookback_days": 90, "default_period": "90d"},
        batch={"max_workers": 2},
    )


@pytest.fixture
def constant_history() -> list[TimeSeriesPoint]:
    return _make_series([100.0] * 7)


@pytest.fixture
def rising_history() -> list[TimeSeriesPoint]:
    """Two flat weeks, the second 20% above the first."""
    return _make_series([100.0] * 7 + [120.0] * 7)


@pytest.fixture
def sample_cost_rows() -> pd.DataFrame:
    """Raw cost rows for three organizations.

    ``acme`` has 30 days at 100/day split across two services, ``globex`` has
    14 days rising by 10/day, and ``tiny`` has only 3 days.
    """
    rows = []
    for i in range(30):
        day = START_DATE + timedelta(days=i)
        rows.append({"organization_id": "acme", "usage_date": day.isoformat(),
                     "daily_cost": 60.0, "service": "EC2"})
        rows.append({"organization_id": "acme", "usage_date": day.isoformat(),
                     "daily_cost": 40.0, "service": "S3"})
    for i in range(14):
        day = START_DATE + timedelta(days=i)
        rows.append({"organization_id": "globex", "usage_date": day.isoformat(),
                     "daily_cost": 50.0 + 10 * i, "service": "Lambda"})
    for i in range(3):
        day = START_DATE + timedelta(days=i)
        rows.append({"organization_id": "tiny", "usage_date": day.isoformat(),
                     "daily_cost": 5.0, "service": "EC2"})
    return pd.DataFrame(rows)


@pytest.fixture
def cost_csv(tmp_path, sample_cost_rows):
    """Sample cost rows written to a CSV export."""
    path = tmp_path / "daily_costs.csv"
    sample_cost_rows.to_csv(path, index=False)
    return path


@pytest.fixture
def make_series():
    """Factory for daily observed series."""
    return _make_series


@pytest.fixture
def flat_forecast():
    """Factory for forecasts with constant predictions."""
    return _flat_forecast
