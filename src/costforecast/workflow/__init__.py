"""Workflow helpers built on top of forecasts."""

from .budget import BudgetState, BudgetStatus, project_budget

__all__ = ["BudgetState", "BudgetStatus", "project_budget"]
