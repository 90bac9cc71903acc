"""Nox configuration for Cost Forecast Engine development automation.

This file defines automated development tasks including linting, testing,
formatting and a forecast smoke run against a sample cost export.
"""

import nox

# Python versions to test against
PYTHON_VERSIONS = ["3.11", "3.12"]

# Default sessions to run when no specific session is requested
nox.options.sessions = ["lint", "test", "coverage"]


@nox.session(python=PYTHON_VERSIONS)
def lint(session):
    """Run linting with ruff and mypy."""
    session.install("-e", ".[dev]")

    # Run ruff for code quality
    session.run("ruff", "check", "src", "tests")

    # Run mypy for type checking
    session.run("mypy", "src")

    session.log("✅ Linting completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def format_code(session):
    """Format code with black and isort."""
    session.install("-e", ".[dev]")

    # Format with black
    session.run("black", "src", "tests")

    # Sort imports with isort
    session.run("isort", "src", "tests")

    # Fix auto-fixable ruff issues
    session.run("ruff", "check", "--fix", "src", "tests")

    session.log("✅ Code formatting completed")


@nox.session(python=PYTHON_VERSIONS)
def test(session):
    """Run the test suite with pytest."""
    session.install("-e", ".[test]")

    session.run(
        "pytest",
        "tests/",
        "-v",
        "--tb=short",
        "--strict-markers",
        "-m", "not slow",  # Skip slow tests by default
    )

    session.log("✅ Unit tests completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def coverage(session):
    """Run tests with coverage reporting."""
    session.install("-e", ".[test]")

    session.run(
        "pytest",
        "tests/",
        "--cov=costforecast",
        "--cov-report=term-missing",
        "--cov-report=html:htmlcov",
        "--cov-report=xml:coverage.xml",
        "--cov-fail-under=80",
        "-m", "not slow",
    )

    session.log("✅ Coverage analysis completed")
    session.log("📊 Coverage report available at htmlcov/index.html")


@nox.session(python=PYTHON_VERSIONS)
def forecast_smoke(session):
    """Forecast from a cost export end to end through the CLI.

    Examples:
      nox -s forecast_smoke -- --csv exports/daily_costs.csv --org acme
    """
    session.install("-e", ".")
    args = session.posargs or ["--help"]
    session.run("costforecast", "forecast", *args)
    session.log("✅ Forecast smoke run completed")


@nox.session(python=False)
def clean(session):
    """Clean up build artifacts and cache files."""
    import shutil
    import os

    # Directories to clean
    clean_dirs = [
        ".pytest_cache",
        "__pycache__",
        ".coverage",
        "htmlcov",
        "coverage.xml",
        "dist",
        ".ruff_cache",
        ".mypy_cache",
    ]

    for dir_name in clean_dirs:
        if os.path.exists(dir_name):
            if os.path.isdir(dir_name):
                shutil.rmtree(dir_name)
                session.log(f"🗑️  Removed directory: {dir_name}")
            else:
                os.remove(dir_name)
                session.log(f"🗑️  Removed file: {dir_name}")

    session.log("✅ Cleanup completed")
