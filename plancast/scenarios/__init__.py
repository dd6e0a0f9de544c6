"""
plancast.scenarios

Named percentage modifiers over a baseline forecast, plus scenario bookkeeping.
"""
from .engine import (
    FamilySummary,
    ScenarioRun,
    ScenarioSummary,
    WeekVariance,
    apply_scenario,
    compare_to_baseline,
    run_scenario,
    weekly_variance,
)
from .model import Scenario, ScenarioModifiers, ScenarioVariant, parse_modifiers
from .registry import (
    create_scenario,
    default_scenario,
    delete_scenario,
    duplicate_scenario,
    scenarios_for_product,
    update_scenario,
)

__all__ = [
    "FamilySummary",
    "Scenario",
    "ScenarioModifiers",
    "ScenarioRun",
    "ScenarioSummary",
    "ScenarioVariant",
    "WeekVariance",
    "apply_scenario",
    "compare_to_baseline",
    "create_scenario",
    "default_scenario",
    "delete_scenario",
    "duplicate_scenario",
    "parse_modifiers",
    "run_scenario",
    "scenarios_for_product",
    "update_scenario",
    "weekly_variance",
]
