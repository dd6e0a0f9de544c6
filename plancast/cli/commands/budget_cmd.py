from __future__ import annotations

import argparse
from pathlib import Path

from plancast.cli.plan import load_plan
from plancast.forecast.budget import marketing_ratio_report
from plancast.forecast.engine import generate_forecast
from plancast.infra.cli_logging import emit_json
from plancast.infra.config_loader import get_app_config


def register(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("budget", help="Marketing-to-revenue ratios and channel budget shares.")
    p.add_argument("plan", type=Path, help="Path to the JSON plan.")
    p.set_defaults(_fn=_run)


def _run(args: argparse.Namespace) -> int:
    plan = load_plan(args.plan, get_app_config())
    projections = generate_forecast(plan.product, plan.growth, plan.revenue, plan.costs)
    emit_json(marketing_ratio_report(projections, plan.costs.marketing).to_dict())
    return 0
