from __future__ import annotations

import argparse
from pathlib import Path

from plancast.cli.plan import load_plan
from plancast.forecast.engine import first_profitable_week, forecast_totals, generate_forecast
from plancast.infra.cli_logging import emit_json
from plancast.infra.config_loader import get_app_config
from plancast.money import money_str


def register(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("forecast", help="Weekly baseline forecast for a plan file.")
    p.add_argument("plan", type=Path, help="Path to the JSON plan.")
    p.add_argument("--weeks-only", action="store_true", help="Print only the weekly rows.")
    p.set_defaults(_fn=_run)


def _run(args: argparse.Namespace) -> int:
    plan = load_plan(args.plan, get_app_config())
    weeks = generate_forecast(plan.product, plan.growth, plan.revenue, plan.costs)
    rows = [w.to_dict() for w in weeks]
    if args.weeks_only:
        emit_json(rows)
        return 0

    revenue, cost, profit = forecast_totals(weeks)
    emit_json(
        {
            "product_id": plan.product.product_id,
            "horizon_weeks": plan.product.horizon_weeks,
            "weeks": rows,
            "totals": {
                "revenue": money_str(revenue),
                "cost": money_str(cost),
                "profit": money_str(profit),
            },
            "first_profitable_week": first_profitable_week(weeks),
        }
    )
    return 0
