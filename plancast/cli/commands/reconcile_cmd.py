from __future__ import annotations

import argparse
from pathlib import Path

from plancast.actuals.channels import summarize_channels
from plancast.actuals.reconciler import reconcile, reconciled_cumulative_profit
from plancast.cli.plan import load_plan
from plancast.forecast.engine import generate_forecast
from plancast.infra.cli_logging import emit_json
from plancast.infra.config_loader import get_app_config
from plancast.money import money_str


def register(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("reconcile", help="Merge recorded actuals into the baseline forecast.")
    p.add_argument("plan", type=Path, help="Path to the JSON plan (with an 'actuals' list).")
    p.add_argument("--week", type=int, default=None, help="Also report cumulative profit through this week.")
    p.set_defaults(_fn=_run)


def _run(args: argparse.Namespace) -> int:
    plan = load_plan(args.plan, get_app_config())
    projections = generate_forecast(plan.product, plan.growth, plan.revenue, plan.costs)
    result = reconcile(projections, plan.actuals)

    out = result.to_dict()
    # only the actuals the reconciliation applied: last per week, inside the horizon
    out["channels"] = [c.to_dict() for c in summarize_channels(result.actuals)]
    if args.week is not None:
        out["cumulative_profit_at_week"] = {
            "week": args.week,
            "cumulative_profit": money_str(reconciled_cumulative_profit(projections, plan.actuals, args.week)),
        }
    emit_json(out)
    return 0
