from __future__ import annotations

import argparse
import sys
from typing import Sequence

from dotenv import load_dotenv

from plancast.cli.commands import budget_cmd, forecast_cmd, reconcile_cmd, scenario_cmd
from plancast.cli.plan import PlanFileError
from plancast.errors import PlancastError
from plancast.infra.cli_logging import cli_print
from plancast.infra.config_loader import get_app_config
from plancast.infra.logging_std import configure_logging, get_logger, log_kv

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_UNREADABLE = 1
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="plancast",
        description="Weekly revenue/cost forecasts, scenarios and actuals reconciliation.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    forecast_cmd.register(sub)
    scenario_cmd.register(sub)
    reconcile_cmd.register(sub)
    budget_cmd.register(sub)

    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    load_dotenv(".env.local")
    cfg = get_app_config()
    configure_logging(level=cfg.logging.level, fmt=cfg.logging.format)

    fn = getattr(args, "_fn", None)
    if fn is None:
        parser.print_help()
        return EXIT_INVALID_INPUT

    try:
        rc = fn(args)
        return EXIT_OK if rc is None else int(rc)

    except PlanFileError as e:
        cli_print(f"plancast: ERROR: {e}", file=sys.stderr, flush=True)
        return EXIT_UNREADABLE

    except PlancastError as e:
        log_kv(logger, "invalid input", command=args.command, code=e.code)
        cli_print(f"plancast: INVALID: {e}", file=sys.stderr, flush=True)
        return EXIT_INVALID_INPUT

    except KeyboardInterrupt:
        cli_print("plancast: CANCELLED (KeyboardInterrupt)", file=sys.stderr, flush=True)
        return 130
