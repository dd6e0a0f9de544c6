"""
Plan file loading for the CLI.

A plan is one JSON document:

    {"product": {...}, "growth": {...}, "revenue": {...}, "costs": {...},
     "scenario": {...}, "actuals": [...]}

Only "product" is required; everything else defaults to all-zero records.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from plancast.actuals.model import WeeklyActual, parse_actual
from plancast.errors import InvalidInputError
from plancast.forecast.model import CostMetrics, GrowthMetrics, ProductInfo, RevenueMetrics
from plancast.forecast.parsing import (
    parse_cost_metrics,
    parse_growth_metrics,
    parse_product_info,
    parse_revenue_metrics,
)
from plancast.infra.config_loader import AppConfig
from plancast.scenarios.model import ScenarioModifiers, parse_modifiers


class PlanFileError(Exception):
    """The plan file could not be read or is not JSON."""


@dataclass(frozen=True)
class Plan:
    product: ProductInfo
    growth: GrowthMetrics = field(default_factory=GrowthMetrics)
    revenue: RevenueMetrics = field(default_factory=RevenueMetrics)
    costs: CostMetrics = field(default_factory=CostMetrics)
    modifiers: ScenarioModifiers = field(default_factory=ScenarioModifiers)
    actuals: Tuple[WeeklyActual, ...] = ()


def read_plan_file(path: Path) -> Dict[str, Any]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise PlanFileError(f"cannot read {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PlanFileError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PlanFileError(f"{path}: top-level JSON value must be an object")
    return data


def _section(doc: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    value = doc.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise InvalidInputError(f"{key}: expected an object")
    return value


def build_plan(doc: Mapping[str, Any], cfg: AppConfig) -> Plan:
    product = _section(doc, "product")
    if product is None:
        raise InvalidInputError("product: section is required")

    actuals_raw = doc.get("actuals") or []
    if not isinstance(actuals_raw, list):
        raise InvalidInputError("actuals: expected a list")

    return Plan(
        product=parse_product_info(
            product,
            default_horizon_weeks=cfg.forecast.default_horizon_weeks,
            default_events_per_week=cfg.forecast.default_events_per_week,
        ),
        growth=parse_growth_metrics(_section(doc, "growth")),
        revenue=parse_revenue_metrics(_section(doc, "revenue")),
        costs=parse_cost_metrics(_section(doc, "costs")),
        modifiers=parse_modifiers(_section(doc, "scenario")),
        actuals=tuple(parse_actual(a) for a in actuals_raw),
    )


def load_plan(path: Path, cfg: AppConfig) -> Plan:
    return build_plan(read_plan_file(path), cfg)
