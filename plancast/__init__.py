"""
plancast

Weekly forecasting for event / product businesses: baseline projections,
scenario modifiers and reconciliation against recorded actuals.
"""
from plancast.actuals import WeeklyActual, reconcile
from plancast.errors import InvalidHorizonError, InvalidInputError, PlancastError
from plancast.forecast import generate_forecast
from plancast.scenarios import Scenario, ScenarioModifiers, apply_scenario, run_scenario

__version__ = "0.1.0"

__all__ = [
    "InvalidHorizonError",
    "InvalidInputError",
    "PlancastError",
    "Scenario",
    "ScenarioModifiers",
    "WeeklyActual",
    "apply_scenario",
    "generate_forecast",
    "reconcile",
    "run_scenario",
]
