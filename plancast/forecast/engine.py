from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence, Tuple

import deal

from plancast.errors import InvalidHorizonError
from plancast.forecast.costs import compose_costs
from plancast.forecast.growth import average_per_event, project_visitors
from plancast.forecast.model import (
    CostMetrics,
    GrowthMetrics,
    ProductInfo,
    RevenueMetrics,
    WeeklyProjection,
)
from plancast.forecast.revenue import compose_revenue
from plancast.infra.logging_std import get_logger, log_kv
from plancast.money import D0

logger = get_logger(__name__)


def _cumulative_is_running_sum(result: Sequence[WeeklyProjection]) -> bool:
    running = D0
    for row in result:
        running += row.weekly_profit
        if row.cumulative_profit != running:
            return False
    return True


@deal.post(lambda result: isinstance(result, tuple), message="must return tuple")
@deal.post(_cumulative_is_running_sum, message="cumulative_profit must be the running sum of weekly_profit")
@deal.raises(InvalidHorizonError, deal.RaisesContractError)
def generate_forecast(
    product: ProductInfo,
    growth: Optional[GrowthMetrics] = None,
    revenue: Optional[RevenueMetrics] = None,
    costs: Optional[CostMetrics] = None,
) -> Tuple[WeeklyProjection, ...]:
    """
    Week-by-week forecast for weeks 1..product.horizon_weeks.

    Missing metric records are replaced by their all-zero defaults. The
    output depends only on the arguments: identical inputs give identical
    tuples, which callers use to diff old vs new before persisting.

    Raises:
        InvalidHorizonError: horizon_weeks <= 0.
    """
    if product.horizon_weeks <= 0:
        raise InvalidHorizonError(product.horizon_weeks)

    growth = growth or GrowthMetrics()
    revenue = revenue or RevenueMetrics()
    costs = costs or CostMetrics()

    events = product.effective_events_per_week
    cumulative = D0
    rows = []

    for week, visitors in enumerate(project_visitors(product, growth), start=1):
        rev = compose_revenue(visitors, revenue)
        cost = compose_costs(product, costs, revenue, rev, week)
        total_revenue = rev.total
        total_cost = cost.total
        weekly_profit = total_revenue - total_cost
        cumulative += weekly_profit

        rows.append(
            WeeklyProjection(
                week=week,
                number_of_events=events,
                visitors=visitors,
                average_event_attendance=average_per_event(visitors, events),
                ticket_revenue=rev.ticket,
                fb_revenue=rev.fb,
                merchandise_revenue=rev.merchandise,
                digital_revenue=rev.digital,
                total_revenue=total_revenue,
                marketing_cost=cost.marketing,
                staffing_cost=cost.staffing,
                event_cost=cost.event,
                setup_cost=cost.setup,
                fb_cogs=cost.fb_cogs,
                merchandise_cogs=cost.merchandise_cogs,
                total_cost=total_cost,
                weekly_profit=weekly_profit,
                cumulative_profit=cumulative,
            )
        )

    log_kv(
        logger,
        "forecast generated",
        level=logging.DEBUG,
        product_id=product.product_id,
        weeks=len(rows),
        cumulative_profit=str(cumulative),
    )
    return tuple(rows)


def forecast_totals(projections: Sequence[WeeklyProjection]) -> Tuple[Decimal, Decimal, Decimal]:
    """(total revenue, total cost, total profit) over a projection sequence."""
    revenue = sum((p.total_revenue for p in projections), D0)
    cost = sum((p.total_cost for p in projections), D0)
    return revenue, cost, revenue - cost


def first_profitable_week(projections: Sequence[WeeklyProjection]) -> Optional[int]:
    for p in projections:
        if p.weekly_profit >= D0:
            return p.week
    return None
