"""
Scenario engine: percentage modifiers over a baseline forecast.

Each revenue stream, each of the four operating cost sources and the visitor
volume is scaled by (1 + modifier/100). Totals are rebuilt from the modified
components (COGS carried through unchanged), never by scaling a baseline
total, so modifiers compose per component.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Sequence, Tuple, Union

import deal

from plancast.forecast.growth import average_per_event
from plancast.forecast.model import WeeklyProjection
from plancast.infra.logging_std import get_logger, log_kv
from plancast.money import D0, D1, D100, money_str, percent_change, q2, round_int
from plancast.scenarios.model import Scenario, ScenarioModifiers

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class FamilySummary:
    """
    Baseline vs scenario total for one family (revenue, costs or profit).

    percent_change divides by |baseline_total| so its sign follows
    difference: a loss that shrinks (-100 to -50) reports +50.00, a loss
    that deepens reports a negative change. 0 when baseline_total is 0.
    """

    baseline_total: Decimal
    scenario_total: Decimal
    difference: Decimal
    percent_change: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "baseline_total": money_str(self.baseline_total),
            "scenario_total": money_str(self.scenario_total),
            "difference": money_str(self.difference),
            "percent_change": str(self.percent_change),
        }


@dataclass(frozen=True, slots=True)
class ScenarioSummary:
    revenue: FamilySummary
    cost: FamilySummary
    profit: FamilySummary
    attendance: FamilySummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue": self.revenue.to_dict(),
            "cost": self.cost.to_dict(),
            "profit": self.profit.to_dict(),
            "attendance": self.attendance.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class WeekVariance:
    week: int
    revenue_delta: Decimal
    cost_delta: Decimal
    profit_delta: Decimal
    attendance_delta: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "revenue_delta": money_str(self.revenue_delta),
            "cost_delta": money_str(self.cost_delta),
            "profit_delta": money_str(self.profit_delta),
            "attendance_delta": self.attendance_delta,
        }


@dataclass(frozen=True, slots=True)
class ScenarioRun:
    weeks: Tuple[WeeklyProjection, ...]
    summary: ScenarioSummary
    variance: Tuple[WeekVariance, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weeks": [w.to_dict() for w in self.weeks],
            "summary": self.summary.to_dict(),
            "variance": [v.to_dict() for v in self.variance],
        }


def _factor(modifier: Decimal) -> Decimal:
    return D1 + modifier / D100


def _scale(value: Decimal, modifier: Decimal) -> Decimal:
    return q2(value * _factor(modifier))


def _same_weeks(baseline: Sequence[WeeklyProjection], scenario: Sequence[WeeklyProjection]) -> bool:
    return [b.week for b in baseline] == [s.week for s in scenario]


@deal.post(lambda result: isinstance(result, tuple), message="must return tuple")
@deal.raises(deal.RaisesContractError)
def apply_scenario(
    baseline: Sequence[WeeklyProjection],
    modifiers: ScenarioModifiers,
    allow_sign_inversion: bool = False,
) -> Tuple[WeeklyProjection, ...]:
    """
    Scenario-modified copy of the baseline, one row per baseline week.

    Modifiers below -100 are clamped to -100 unless allow_sign_inversion is
    set, in which case a -150 modifier turns a 100 into -50.
    """
    m = modifiers if allow_sign_inversion else modifiers.clamped()
    cumulative = D0
    rows = []

    for b in baseline:
        ticket = _scale(b.ticket_revenue, m.ticket_revenue)
        fb = _scale(b.fb_revenue, m.fb_revenue)
        merch = _scale(b.merchandise_revenue, m.merchandise_revenue)
        digital = _scale(b.digital_revenue, m.digital_revenue)
        marketing = _scale(b.marketing_cost, m.marketing_cost)
        staffing = _scale(b.staffing_cost, m.staffing_cost)
        event = _scale(b.event_cost, m.event_cost)
        setup = _scale(b.setup_cost, m.setup_cost)
        visitors = round_int(Decimal(b.visitors) * _factor(m.attendance))

        total_revenue = ticket + fb + merch + digital
        total_cost = marketing + staffing + event + setup + b.fb_cogs + b.merchandise_cogs
        weekly_profit = total_revenue - total_cost
        cumulative += weekly_profit

        rows.append(
            WeeklyProjection(
                week=b.week,
                number_of_events=b.number_of_events,
                visitors=visitors,
                average_event_attendance=average_per_event(visitors, b.number_of_events),
                ticket_revenue=ticket,
                fb_revenue=fb,
                merchandise_revenue=merch,
                digital_revenue=digital,
                total_revenue=total_revenue,
                marketing_cost=marketing,
                staffing_cost=staffing,
                event_cost=event,
                setup_cost=setup,
                fb_cogs=b.fb_cogs,
                merchandise_cogs=b.merchandise_cogs,
                total_cost=total_cost,
                weekly_profit=weekly_profit,
                cumulative_profit=cumulative,
            )
        )
    return tuple(rows)


def _family(baseline_total: Decimal, scenario_total: Decimal) -> FamilySummary:
    return FamilySummary(
        baseline_total=baseline_total,
        scenario_total=scenario_total,
        difference=scenario_total - baseline_total,
        percent_change=percent_change(baseline_total, scenario_total),
    )


@deal.pre(lambda baseline, scenario: _same_weeks(baseline, scenario), message="baseline and scenario must cover the same weeks")
@deal.raises(deal.RaisesContractError)
def compare_to_baseline(
    baseline: Sequence[WeeklyProjection],
    scenario: Sequence[WeeklyProjection],
) -> ScenarioSummary:
    """Aggregate per family: weekly series are summed first, then differenced."""

    def total(rows: Sequence[WeeklyProjection], attr: str) -> Decimal:
        return sum((Decimal(getattr(r, attr)) for r in rows), D0)

    return ScenarioSummary(
        revenue=_family(total(baseline, "total_revenue"), total(scenario, "total_revenue")),
        cost=_family(total(baseline, "total_cost"), total(scenario, "total_cost")),
        profit=_family(total(baseline, "weekly_profit"), total(scenario, "weekly_profit")),
        attendance=_family(total(baseline, "visitors"), total(scenario, "visitors")),
    )


@deal.pre(lambda baseline, scenario: _same_weeks(baseline, scenario), message="baseline and scenario must cover the same weeks")
@deal.raises(deal.RaisesContractError)
def weekly_variance(
    baseline: Sequence[WeeklyProjection],
    scenario: Sequence[WeeklyProjection],
) -> Tuple[WeekVariance, ...]:
    return tuple(
        WeekVariance(
            week=b.week,
            revenue_delta=s.total_revenue - b.total_revenue,
            cost_delta=s.total_cost - b.total_cost,
            profit_delta=s.weekly_profit - b.weekly_profit,
            attendance_delta=s.visitors - b.visitors,
        )
        for b, s in zip(baseline, scenario)
    )


def run_scenario(
    baseline: Sequence[WeeklyProjection],
    scenario: Union[Scenario, ScenarioModifiers],
    allow_sign_inversion: bool = False,
) -> ScenarioRun:
    modifiers = scenario.modifiers if isinstance(scenario, Scenario) else scenario
    rows = apply_scenario(baseline, modifiers, allow_sign_inversion)
    summary = compare_to_baseline(baseline, rows)
    log_kv(
        logger,
        "scenario applied",
        level=logging.DEBUG,
        scenario_id=scenario.scenario_id if isinstance(scenario, Scenario) else "",
        weeks=len(rows),
        profit_change_pct=str(summary.profit.percent_change),
    )
    return ScenarioRun(weeks=rows, summary=summary, variance=weekly_variance(baseline, rows))
