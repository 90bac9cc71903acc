"""Custom exceptions for the Cost Forecast Engine.

Defines exception hierarchy for different types of forecasting errors.
"""

from __future__ import annotations

from typing import Any


class ForecasterError(Exception):
    """Base exception for all forecaster errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class InsufficientHistoryError(ForecasterError, ValueError):
    """Raised when the historical series is too short to forecast from."""

    def __init__(self, message: str, required: int, actual: int, **kwargs):
        kwargs.setdefault("error_code", "INSUFFICIENT_HISTORY")
        super().__init__(message, **kwargs)
        self.required = required
        self.actual = actual

        self.details.update(
            {
                "required": required,
                "actual": actual,
                "missing": required - actual,
            }
        )


class InvalidParameterError(ForecasterError, ValueError):
    """Raised when a forecast or scenario parameter is out of bounds."""

    def __init__(self, message: str, parameter: str, value: Any = None, **kwargs):
        kwargs.setdefault("error_code", "INVALID_PARAMETER")
        super().__init__(message, **kwargs)
        self.parameter = parameter
        self.value = value
        self.details.update({"parameter": parameter, "value": value})


class DataSourceError(ForecasterError):
    """Raised when historical cost data cannot be loaded."""

    def __init__(self, message: str, source_type: str, **kwargs):
        super().__init__(message, **kwargs)
        self.source_type = source_type
        self.details["source_type"] = source_type


class DataValidationError(ForecasterError):
    """Raised when data validation fails."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)


class ConfigurationError(ForecasterError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key
