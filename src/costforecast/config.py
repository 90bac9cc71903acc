"""Configuration management for the Cost Forecast Engine.

Provides environment-specific configuration loading and validation
for the forecasting service, CLI and batch runs.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from .models import ForecastMethod, ForecastPeriod


class EngineConfig(BaseModel):
    """Configuration for forecast orchestration."""

    default_method: ForecastMethod = Field(
        ForecastMethod.ENSEMBLE, description="Forecast method used by the service"
    )
    default_period: ForecastPeriod = Field(
        ForecastPeriod.DAYS_90, description="Default forecast period"
    )
    lookback_days: int = Field(90, ge=7, description="Days of history to request")
    fill_gaps: bool = Field(True, description="Fill missing days with the series average")


class BatchConfig(BaseModel):
    """Configuration for multi-organization forecast runs."""

    max_workers: int = Field(4, ge=1, description="Thread pool size for batch forecasts")


class ForecasterConfig(BaseModel):
    """Main configuration class for the Cost Forecast Engine."""

    # Environment
    environment: str = Field(..., description="Deployment environment")

    # Sub-configurations
    engine: EngineConfig = Field(default_factory=EngineConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    structured_logging: bool = Field(False, description="Emit logs as JSON lines")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment values."""
        allowed_envs = ["dev", "staging", "prod"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of: {allowed_levels}")
        return v.upper()

    @classmethod
    def from_env(cls) -> "ForecasterConfig":
        """Load configuration from environment variables."""
        environment = os.environ.get("ENVIRONMENT", "dev")

        config_data = {
            "environment": environment,
            "engine": {
                "default_method": os.environ.get("FORECAST_METHOD", "ensemble"),
                "default_period": os.environ.get("FORECAST_PERIOD", "90d"),
                "lookback_days": int(os.environ.get("LOOKBACK_DAYS", "90")),
                "fill_gaps": os.environ.get("FILL_GAPS", "true").lower() == "true",
            },
            "batch": {
                "max_workers": int(os.environ.get("BATCH_MAX_WORKERS", "4")),
            },
            "log_level": os.environ.get("LOG_LEVEL", "INFO"),
            "structured_logging": os.environ.get("STRUCTURED_LOGGING", "false").lower()
            == "true",
        }

        return cls(**config_data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ForecasterConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            ForecasterConfig instance loaded from the file
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        # Try to infer environment from filename if not provided
        if "environment" not in data:
            stem = config_path.stem.lower()
            if stem in {"dev", "staging", "prod"}:
                data["environment"] = stem
            else:
                data["environment"] = os.environ.get("ENVIRONMENT", "dev")

        return cls(**data)


def load_config(environment: str, config_path: Path | None = None) -> ForecasterConfig:
    """Load configuration for the specified environment.

    Args:
        environment: Target environment (dev/staging/prod)
        config_path: Optional custom config file path

    Returns:
        Loaded configuration object

    Raises:
        FileNotFoundError: If config file is not found
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_dir = Path(__file__).parent.parent.parent / "config"
        config_path = config_dir / f"{environment}.yml"

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    config_data["environment"] = environment

    return ForecasterConfig(**config_data)


def get_default_config(environment: str) -> dict[str, Any]:
    """Get default configuration for an environment.

    Args:
        environment: Target environment

    Returns:
        Default configuration dictionary
    """
    base_config: dict[str, Any] = {
        "environment": environment,
        "engine": {
            "default_method": "ensemble",
            "default_period": "90d",
            "lookback_days": 90,
        },
    }

    # Environment-specific overrides
    if environment == "prod":
        base_config["batch"] = {"max_workers": 8}
        base_config["structured_logging"] = True
    elif environment == "dev":
        base_config["batch"] = {"max_workers": 2}
        base_config["log_level"] = "DEBUG"

    return base_config


class JsonLogFormatter(logging.Formatter):
    """Render log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: ForecasterConfig) -> None:
    """Configure root logging from the loaded configuration."""
    handler = logging.StreamHandler()
    if config.structured_logging:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(config.log_level)
