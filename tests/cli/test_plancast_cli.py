from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from plancast.cli.main import build_parser, main

PLAN: Dict[str, Any] = {
    "product": {"id": "p1", "name": "Rooftop Cinema", "forecastPeriod": 3, "type": "Experiential Events"},
    "growth": {"weeklyVisitors": 100},
    "revenue": {"ticketPrice": 10, "ticketSalesRate": 1},
    "costs": {
        "marketing": {"channels": [{"id": "c1", "name": "social", "budget": 150}, {"id": "c2", "name": "radio", "budget": 50}]},
        "weeklyStaffCost": 300,
    },
    "scenario": {"revenue": {"ticketRevenue": 10}},
    "actuals": [
        {"week": 1, "revenue": 900, "expenses": 400, "channelPerformance": [{"channelId": "c1", "impressions": 500, "clicks": 25}]},
        {"week": 9, "revenue": 1, "expenses": 0},
    ],
}


def _write(tmp_path: Path, doc: Any) -> Path:
    p = tmp_path / "plan.json"
    p.write_text(json.dumps(doc), encoding="utf-8")
    return p


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> Any:
    rc = main(list(argv))
    assert rc == 0
    return json.loads(capsys.readouterr().out)


def test_parser_lists_subcommands() -> None:
    help_text = build_parser().format_help()
    for name in ("forecast", "scenario", "reconcile", "budget"):
        assert name in help_text


def test_forecast_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(capsys, "forecast", str(_write(tmp_path, PLAN)))
    assert out["product_id"] == "p1"
    assert len(out["weeks"]) == 3
    # 1000 revenue - 200 marketing - 300 staff
    assert out["weeks"][0]["weekly_profit"] == "500.00"
    assert out["totals"]["profit"] == "1500.00"
    assert out["first_profitable_week"] == 1


def test_scenario_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(capsys, "scenario", str(_write(tmp_path, PLAN)), "--summary-only")
    assert out["summary"]["revenue"]["percent_change"] == "10.00"
    assert out["modifiers"]["revenue"]["ticketRevenue"] == "10"


def test_reconcile_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(capsys, "reconcile", str(_write(tmp_path, PLAN)), "--week", "2")
    assert out["weeks"][0]["source"] == "actual"
    assert out["weeks"][1]["cumulative_profit"] == "1000.00"
    assert out["cumulative_profit_at_week"]["cumulative_profit"] == "1000.00"
    assert [i["week"] for i in out["issues"]] == [9]
    assert out["channels"][0]["ctr_pct"] == "5.00"


def test_reconcile_channels_use_applied_actuals_only(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    plan = dict(
        PLAN,
        product={"id": "p1", "forecastPeriod": 2},
        actuals=[
            {"week": 1, "revenue": 10, "expenses": 5, "channelPerformance": [{"channelId": "c1", "spend": 50}]},
            {"week": 1, "revenue": 20, "expenses": 5, "channelPerformance": [{"channelId": "c1", "spend": 70}]},
            {"week": 9, "revenue": 1, "expenses": 0, "channelPerformance": [{"channelId": "c1", "spend": 1000}]},
        ],
    )
    out = _run(capsys, "reconcile", str(_write(tmp_path, plan)))
    assert [c["spend"] for c in out["channels"]] == ["70.00"]
    assert out["weeks"][0]["revenue"] == "20.00"


def test_budget_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = _run(capsys, "budget", str(_write(tmp_path, PLAN)))
    assert out["overall_ratio_pct"] == "20.00"
    assert [c["share_pct"] for c in out["channel_shares"]] == ["75.00", "25.00"]


def test_invalid_input_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bad = dict(PLAN, product={"forecastPeriod": 0})
    assert main(["forecast", str(_write(tmp_path, bad))]) == 2
    assert "INVALID_HORIZON" in capsys.readouterr().err


def test_non_numeric_value_exit_code(tmp_path: Path) -> None:
    bad = dict(PLAN, growth={"weeklyVisitors": "many"})
    assert main(["forecast", str(_write(tmp_path, bad))]) == 2


def test_unreadable_file_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["forecast", str(tmp_path / "missing.json")]) == 1
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert main(["budget", str(broken)]) == 1
    assert "plancast: ERROR" in capsys.readouterr().err
