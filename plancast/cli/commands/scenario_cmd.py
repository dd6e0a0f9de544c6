from __future__ import annotations

import argparse
from pathlib import Path

from plancast.cli.plan import load_plan
from plancast.forecast.engine import generate_forecast
from plancast.infra.cli_logging import emit_json
from plancast.infra.config_loader import get_app_config
from plancast.scenarios.engine import run_scenario


def register(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("scenario", help="Apply the plan's scenario modifiers to its baseline.")
    p.add_argument("plan", type=Path, help="Path to the JSON plan.")
    p.add_argument(
        "--allow-sign-inversion",
        action="store_true",
        help="Let modifiers below -100 flip signs instead of clamping at -100.",
    )
    p.add_argument("--summary-only", action="store_true", help="Omit weekly rows and variance.")
    p.set_defaults(_fn=_run)


def _run(args: argparse.Namespace) -> int:
    cfg = get_app_config()
    plan = load_plan(args.plan, cfg)
    baseline = generate_forecast(plan.product, plan.growth, plan.revenue, plan.costs)
    inversion = args.allow_sign_inversion or cfg.scenario.allow_sign_inversion
    run = run_scenario(baseline, plan.modifiers, allow_sign_inversion=inversion)

    if args.summary_only:
        emit_json({"modifiers": plan.modifiers.to_dict(), "summary": run.summary.to_dict()})
        return 0

    out = run.to_dict()
    out["modifiers"] = plan.modifiers.to_dict()
    emit_json(out)
    return 0
