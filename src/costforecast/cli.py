"""Command-line interface for the Cost Forecast Engine.

Provides CLI commands for forecasting, scenario planning, data validation
and backtesting against CSV exports of daily cost rows.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from .config import ForecasterConfig, configure_logging, get_default_config, load_config
from .data.collectors import CsvCostCollector
from .data.validators import DataQualityValidator
from .exceptions import ForecasterError
from .models import CostForecastReport, Scenario, ScenarioParams
from .service import CostForecastService
from .validation.accuracy import BacktestResult, backtest

app = typer.Typer(
    name="costforecast",
    help="Cost Forecast Engine - AWS cost forecasting and scenario planning CLI",
    rich_markup_mode="rich",
)
console = Console()


def _load(env: str, config_path: Path | None) -> ForecasterConfig:
    """Load configuration, falling back to environment defaults without a config file."""
    try:
        config = load_config(env, config_path)
    except FileNotFoundError:
        if config_path is not None:
            raise
        config = ForecasterConfig(**get_default_config(env))
    configure_logging(config)
    return config


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]❌ {message}[/bold red]")
    sys.exit(1)


@app.command()
def forecast(
    csv: Path = typer.Option(..., help="CSV of daily cost rows"),
    org: str = typer.Option(..., help="Organization ID"),
    period: str = typer.Option("90d", help="Forecast period (30d/60d/90d/quarter/year)"),
    method: str = typer.Option("ensemble", help="Forecast method"),
    env: str = typer.Option("dev", help="Environment (dev/staging/prod)"),
    config_path: Path | None = typer.Option(None, help="Custom config file path"),
    output_path: Path | None = typer.Option(None, help="Write the forecast JSON to this file"),
    as_json: bool = typer.Option(False, "--json", help="Print the forecast as JSON"),
) -> None:
    """Generate a cost forecast for an organization."""
    try:
        config = _load(env, config_path)
        service = CostForecastService(CsvCostCollector(csv, config), config)
        report = service.generate_forecast(org, period, method)
    except (ForecasterError, ValueError, FileNotFoundError) as e:
        _fail(f"Forecasting failed: {e}")

    if output_path:
        output_path.write_text(json.dumps(report.to_dict(), indent=2))
        console.print(f"💾 Forecast saved to: {output_path}")

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _display_forecast_summary(report)


@app.command()
def scenario(
    csv: Path = typer.Option(..., help="CSV of daily cost rows"),
    org: str = typer.Option(..., help="Organization ID"),
    scenario_type: str = typer.Option("baseline", "--type", help="Scenario type"),
    multiplier: float | None = typer.Option(None, help="Traffic multiplier for traffic_2x"),
    new_service_cost: float | None = typer.Option(None, help="Monthly cost of a new service"),
    savings: float | None = typer.Option(None, help="Monthly optimization savings"),
    adjustment: float | None = typer.Option(None, help="Custom adjustment in percent"),
    env: str = typer.Option("dev", help="Environment (dev/staging/prod)"),
    config_path: Path | None = typer.Option(None, help="Custom config file path"),
    as_json: bool = typer.Option(False, "--json", help="Print the scenario as JSON"),
) -> None:
    """Model a what-if scenario against the 90-day baseline forecast."""
    params = ScenarioParams(
        traffic_multiplier=multiplier,
        new_service_cost=new_service_cost,
        optimization_savings=savings,
        custom_adjustment=adjustment,
    )
    try:
        config = _load(env, config_path)
        service = CostForecastService(CsvCostCollector(csv, config), config)
        result = service.generate_scenario(org, scenario_type, params)
    except (ForecasterError, ValueError, FileNotFoundError) as e:
        _fail(f"Scenario failed: {e}")

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_scenario(result)


@app.command()
def validate(
    csv: Path = typer.Option(..., help="CSV of daily cost rows"),
    org: str = typer.Option(..., help="Organization ID"),
    lookback_days: int = typer.Option(90, help="Days of history to check"),
    env: str = typer.Option("dev", help="Environment (dev/staging/prod)"),
    config_path: Path | None = typer.Option(None, help="Custom config file path"),
) -> None:
    """Check the quality of an organization's historical costs."""
    try:
        config = _load(env, config_path)
        history = CsvCostCollector(csv, config).get_historical_costs(org, lookback_days)
    except (ForecasterError, ValueError, FileNotFoundError) as e:
        _fail(f"Validation failed: {e}")

    results = DataQualityValidator().validate_series(history)
    _display_validation_results(results)

    if results["validation_passed"]:
        console.print("[bold green]✅ Data validation PASSED![/bold green]")
    else:
        _fail("Data validation FAILED!")


@app.command(name="backtest")
def backtest_command(
    csv: Path = typer.Option(..., help="CSV of daily cost rows"),
    org: str = typer.Option(..., help="Organization ID"),
    holdout_days: int = typer.Option(14, help="Trailing days to hold out and score"),
    method: str = typer.Option("ensemble", help="Forecast method"),
    env: str = typer.Option("dev", help="Environment (dev/staging/prod)"),
    config_path: Path | None = typer.Option(None, help="Custom config file path"),
) -> None:
    """Score a forecast method on the most recent days of history."""
    try:
        config = _load(env, config_path)
        history = CsvCostCollector(csv, config).get_historical_costs(
            org, config.engine.lookback_days
        )
        result = backtest(history, holdout_days, method)
    except (ForecasterError, ValueError, FileNotFoundError) as e:
        _fail(f"Backtest failed: {e}")

    _display_backtest(result)


def _display_forecast_summary(report: CostForecastReport) -> None:
    """Display forecast summary table."""
    fc = report.forecast
    table = Table(title=f"Cost Forecast - {report.organization_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Method", fc.method.value)
    table.add_row("Confidence", f"{fc.confidence}%")
    table.add_row(
        "Confidence Interval",
        f"${fc.confidence_interval.lower:.2f} - ${fc.confidence_interval.upper:.2f}",
    )
    table.add_row("Trend", fc.trend.value)
    table.add_row("Growth Rate", f"{fc.growth_rate:.2f}%")
    table.add_row("Volatility", f"{fc.volatility:.2f}")
    table.add_row("Predicted 30 Days", f"${report.predicted_30_day:.2f}")
    table.add_row("Predicted 90 Days", f"${report.predicted_90_day:.2f}")
    table.add_row("Predicted Year", f"${report.predicted_year:.2f}")
    console.print(table)

    predictions = Table(title="Daily Predictions")
    predictions.add_column("Date", style="cyan")
    predictions.add_column("Predicted Cost", style="green")

    # Show first 10 rows
    for point in fc.predictions[:10]:
        predictions.add_row(point.date.isoformat(), f"${point.value:.2f}")
    console.print(predictions)

    if len(fc.predictions) > 10:
        console.print(f"... and {len(fc.predictions) - 10} more rows")


def _display_scenario(result: Scenario) -> None:
    table = Table(title=f"Scenario - {result.type.value}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Baseline (30d)", f"${result.baseline_cost:.2f}")
    table.add_row("Scenario (30d)", f"${result.scenario_cost:.2f}")
    table.add_row("Delta", f"${result.cost_delta:+.2f}")
    table.add_row("Delta %", f"{result.cost_delta_percent:+.1f}%")
    table.add_row("Scenario (90d)", f"${result.predicted_90_day:.2f}")
    console.print(table)


def _display_validation_results(results: dict) -> None:
    """Display validation results table."""
    table = Table(title="Data Validation Results")
    table.add_column("Check", style="cyan")
    table.add_column("Count", style="green")
    table.add_column("Status", style="yellow")

    for entry in results["errors"]:
        table.add_row(entry["check"], str(entry["count"]), "❌ ERROR")
    for entry in results["warnings"]:
        table.add_row(entry["check"], str(entry["count"]), "⚠️  WARNING")

    table.add_row("Points", str(results["total_points"]), "")
    console.print(table)


def _display_backtest(result: BacktestResult) -> None:
    table = Table(title="Backtest Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Method", result.method.value)
    table.add_row("Train Points", str(result.train_points))
    table.add_row("Holdout Days", str(result.holdout_days))
    table.add_row("MAE", f"{result.accuracy.mean_absolute_error:.2f}")
    table.add_row("MAPE", f"{result.accuracy.mean_absolute_percentage_error:.2f}%")
    table.add_row("Accuracy", f"{result.accuracy.accuracy:.1f}")
    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
