"""
Actuals reconciliation.

Recorded actuals replace the projection for their week in every figure the
reconciler reports. Cumulative profit is always re-derived from week 1
(actual profit where recorded, projected weekly profit elsewhere). The
cumulative value stored on a projection assumes no actuals and is never
reused here.

Duplicate weeks: last submitted wins. Actuals outside the horizon are
reported as issues and skipped; in-horizon weeks are unaffected.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import deal

from plancast.actuals.model import WeeklyActual
from plancast.forecast.model import COST_FIELDS, REVENUE_FIELDS, WeeklyProjection
from plancast.infra.logging_std import get_logger, log_kv
from plancast.infra.result import Err, Ok, Result
from plancast.money import D0, money_str, percent_of

logger = get_logger(__name__)

SOURCE_ACTUAL = "actual"
SOURCE_PROJECTED = "projected"

ISSUE_OUT_OF_HORIZON = "WEEK_OUT_OF_HORIZON"

# actual revenue or expenses not covered by a breakdown
UNALLOCATED = "unallocated"


@dataclass(frozen=True, slots=True)
class ReconciliationIssue:
    week: int
    code: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"week": self.week, "code": self.code, "message": self.message}


@dataclass(frozen=True, slots=True)
class ReconciledWeek:
    week: int
    source: str  # "actual" | "projected"
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    margin_pct: Decimal
    cumulative_profit: Decimal
    projected_revenue: Decimal
    projected_expenses: Decimal
    projected_profit: Decimal

    @property
    def has_actual(self) -> bool:
        return self.source == SOURCE_ACTUAL

    @property
    def revenue_variance(self) -> Decimal:
        return self.revenue - self.projected_revenue

    @property
    def profit_variance(self) -> Decimal:
        return self.profit - self.projected_profit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "source": self.source,
            "revenue": money_str(self.revenue),
            "expenses": money_str(self.expenses),
            "profit": money_str(self.profit),
            "margin_pct": str(self.margin_pct),
            "cumulative_profit": money_str(self.cumulative_profit),
            "projected_revenue": money_str(self.projected_revenue),
            "projected_expenses": money_str(self.projected_expenses),
            "projected_profit": money_str(self.projected_profit),
            "revenue_variance": money_str(self.revenue_variance),
            "profit_variance": money_str(self.profit_variance),
        }


@dataclass(frozen=True, slots=True)
class ReconciliationSummary:
    weeks_total: int
    weeks_with_actuals: int
    coverage_pct: Decimal
    # actual-covered subset
    actual_revenue: Decimal
    actual_costs: Decimal
    actual_profit: Decimal
    # projected-only remainder
    projected_remaining_revenue: Decimal
    projected_remaining_costs: Decimal
    projected_remaining_profit: Decimal
    # combined
    total_revenue: Decimal
    total_costs: Decimal
    total_profit: Decimal
    profit_margin_pct: Decimal
    # projection as generated, ignoring actuals
    original_revenue: Decimal
    original_costs: Decimal
    original_profit: Decimal
    break_even_week: Optional[int]
    last_actual_week: Optional[int]
    # per stream / source, plus "unallocated": the part of an actual week's
    # revenue or expenses its breakdown does not cover. Each dict sums to
    # total_revenue / total_costs.
    revenue_by_stream: Dict[str, Decimal]
    cost_by_source: Dict[str, Decimal]

    @property
    def revenue_difference(self) -> Decimal:
        return self.total_revenue - self.original_revenue

    @property
    def profit_difference(self) -> Decimal:
        return self.total_profit - self.original_profit

    def to_dict(self) -> Dict[str, Any]:
        money = (
            "actual_revenue",
            "actual_costs",
            "actual_profit",
            "projected_remaining_revenue",
            "projected_remaining_costs",
            "projected_remaining_profit",
            "total_revenue",
            "total_costs",
            "total_profit",
            "original_revenue",
            "original_costs",
            "original_profit",
        )
        out: Dict[str, Any] = {k: money_str(getattr(self, k)) for k in money}
        out.update(
            {
                "weeks_total": self.weeks_total,
                "weeks_with_actuals": self.weeks_with_actuals,
                "coverage_pct": str(self.coverage_pct),
                "profit_margin_pct": str(self.profit_margin_pct),
                "revenue_difference": money_str(self.revenue_difference),
                "profit_difference": money_str(self.profit_difference),
                "break_even_week": self.break_even_week,
                "last_actual_week": self.last_actual_week,
                "revenue_by_stream": {k: money_str(v) for k, v in self.revenue_by_stream.items()},
                "cost_by_source": {k: money_str(v) for k, v in self.cost_by_source.items()},
            }
        )
        return out


@dataclass(frozen=True, slots=True)
class ReconciledForecast:
    weeks: Tuple[ReconciledWeek, ...]
    summary: ReconciliationSummary
    issues: Tuple[ReconciliationIssue, ...] = ()
    # deduplicated, in-horizon actuals, sorted by week
    actuals: Tuple[WeeklyActual, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weeks": [w.to_dict() for w in self.weeks],
            "summary": self.summary.to_dict(),
            "issues": [i.to_dict() for i in self.issues],
        }


# --- merging -----------------------------------------------------------------

def index_actuals(actuals: Iterable[WeeklyActual]) -> Dict[int, WeeklyActual]:
    """week -> actual. Later entries replace earlier ones for the same week."""
    out: Dict[int, WeeklyActual] = {}
    for a in actuals:
        if a.week in out:
            log_kv(logger, "duplicate actual, last submitted wins", level=logging.WARNING, week=a.week)
        out[a.week] = a
    return out


@deal.post(
    lambda result: len({a.week for a in result}) == len(result),
    message="at most one actual per week",
)
@deal.raises(deal.RaisesContractError)
def merge_actuals(
    existing: Sequence[WeeklyActual],
    incoming: Sequence[WeeklyActual],
) -> Tuple[WeeklyActual, ...]:
    """Union of both sequences, one actual per week, incoming wins; sorted by week."""
    merged = index_actuals(list(existing) + list(incoming))
    return tuple(merged[w] for w in sorted(merged))


def _check_in_horizon(actual: WeeklyActual, weeks: Set[int]) -> Result[WeeklyActual, ReconciliationIssue]:
    if actual.week in weeks:
        return Ok(actual)
    return Err(
        ReconciliationIssue(
            week=actual.week,
            code=ISSUE_OUT_OF_HORIZON,
            message=f"actual for week {actual.week} lies outside the forecast horizon",
        )
    )


# --- reconciliation ----------------------------------------------------------

def _split_actuals(
    projections: Sequence[WeeklyProjection],
    actuals: Iterable[WeeklyActual],
) -> Tuple[Dict[int, WeeklyActual], List[ReconciliationIssue]]:
    weeks = {p.week for p in projections}
    in_horizon: Dict[int, WeeklyActual] = {}
    issues: List[ReconciliationIssue] = []
    for week, actual in sorted(index_actuals(actuals).items()):
        checked = _check_in_horizon(actual, weeks)
        if checked.is_ok():
            in_horizon[week] = actual
        else:
            issue = checked.error  # type: ignore[attr-defined]
            issues.append(issue)
            log_kv(logger, "actual ignored", level=logging.WARNING, week=week, code=issue.code)
    return in_horizon, issues


def _reconciled_cumulative_matches(result: ReconciledForecast) -> bool:
    running = D0
    for w in result.weeks:
        running += w.profit
        if w.cumulative_profit != running:
            return False
    return True


@deal.post(_reconciled_cumulative_matches, message="cumulative_profit must be re-derived from week 1")
@deal.raises(deal.RaisesContractError)
def reconcile(
    projections: Sequence[WeeklyProjection],
    actuals: Iterable[WeeklyActual],
) -> ReconciledForecast:
    ordered = sorted(projections, key=lambda p: p.week)
    by_week, issues = _split_actuals(ordered, actuals)

    rows: List[ReconciledWeek] = []
    cumulative = D0
    actual_rev = actual_cost = D0
    remaining_rev = remaining_cost = D0
    streams = {name: D0 for name in REVENUE_FIELDS + (UNALLOCATED,)}
    sources = {name: D0 for name in COST_FIELDS + (UNALLOCATED,)}
    break_even: Optional[int] = None

    for p in ordered:
        actual = by_week.get(p.week)
        if actual is not None:
            revenue, expenses, source = actual.revenue, actual.expenses, SOURCE_ACTUAL
            actual_rev += revenue
            actual_cost += expenses
            breakdown = actual.breakdown
            allocated_rev = allocated_cost = D0
            if breakdown is not None:
                for name in REVENUE_FIELDS:
                    streams[name] += breakdown.value(name)
                    allocated_rev += breakdown.value(name)
                for name in COST_FIELDS:
                    sources[name] += breakdown.value(name)
                    allocated_cost += breakdown.value(name)
            streams[UNALLOCATED] += revenue - allocated_rev
            sources[UNALLOCATED] += expenses - allocated_cost
        else:
            revenue, expenses, source = p.total_revenue, p.total_cost, SOURCE_PROJECTED
            remaining_rev += revenue
            remaining_cost += expenses
            for name in REVENUE_FIELDS:
                streams[name] += getattr(p, name)
            for name in COST_FIELDS:
                sources[name] += getattr(p, name)

        profit = revenue - expenses
        cumulative += profit
        if break_even is None and cumulative > D0:
            break_even = p.week

        rows.append(
            ReconciledWeek(
                week=p.week,
                source=source,
                revenue=revenue,
                expenses=expenses,
                profit=profit,
                margin_pct=percent_of(profit, revenue),
                cumulative_profit=cumulative,
                projected_revenue=p.total_revenue,
                projected_expenses=p.total_cost,
                projected_profit=p.weekly_profit,
            )
        )

    original_rev = sum((p.total_revenue for p in ordered), D0)
    original_cost = sum((p.total_cost for p in ordered), D0)
    total_rev = actual_rev + remaining_rev
    total_cost = actual_cost + remaining_cost

    summary = ReconciliationSummary(
        weeks_total=len(ordered),
        weeks_with_actuals=len(by_week),
        coverage_pct=percent_of(Decimal(len(by_week)), Decimal(len(ordered))),
        actual_revenue=actual_rev,
        actual_costs=actual_cost,
        actual_profit=actual_rev - actual_cost,
        projected_remaining_revenue=remaining_rev,
        projected_remaining_costs=remaining_cost,
        projected_remaining_profit=remaining_rev - remaining_cost,
        total_revenue=total_rev,
        total_costs=total_cost,
        total_profit=total_rev - total_cost,
        profit_margin_pct=percent_of(total_rev - total_cost, total_rev),
        original_revenue=original_rev,
        original_costs=original_cost,
        original_profit=original_rev - original_cost,
        break_even_week=break_even,
        last_actual_week=max(by_week) if by_week else None,
        revenue_by_stream=streams,
        cost_by_source=sources,
    )
    return ReconciledForecast(
        weeks=tuple(rows),
        summary=summary,
        issues=tuple(issues),
        actuals=tuple(by_week[w] for w in sorted(by_week)),
    )


def reconciled_cumulative_profit(
    projections: Sequence[WeeklyProjection],
    actuals: Iterable[WeeklyActual],
    week: int,
) -> Decimal:
    """
    Naive O(week) derivation: sum over weeks 1..week of the actual profit
    where recorded, else the projected weekly profit.
    """
    by_week = index_actuals(actuals)
    total = D0
    for p in projections:
        if p.week > week:
            continue
        actual = by_week.get(p.week)
        total += actual.profit if actual is not None else p.weekly_profit
    return total
