"""
Weekly cost composition.

Five independent sources plus COGS:
- marketing: simple (weekly | campaign) or channel sums, optional depreciation
- staffing: simple flat + per-event extras, or detailed roles
- event costs: fixed weekly sum
- setup costs: amortised over the horizon or charged in week 1
- COGS: F&B as a percentage of F&B revenue, merchandise per unit sold

Every component is quantised to cents before totals are taken, so
total_cost == sum(components) exactly.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import deal

from plancast.forecast.model import (
    CostMetrics,
    DepreciationPolicy,
    MarketingBudgetType,
    MarketingCosts,
    MarketingMode,
    ProductInfo,
    RevenueMetrics,
    StaffingCosts,
    StaffingMode,
)
from plancast.forecast.revenue import RevenueBreakdown
from plancast.money import D0, D1, D100, clamp, q2, safe_div


@dataclass(frozen=True, slots=True)
class CostBreakdown:
    marketing: Decimal
    staffing: Decimal
    event: Decimal
    setup: Decimal
    fb_cogs: Decimal
    merchandise_cogs: Decimal

    @property
    def total(self) -> Decimal:
        return (
            self.marketing
            + self.staffing
            + self.event
            + self.setup
            + self.fb_cogs
            + self.merchandise_cogs
        )


# --- marketing -------------------------------------------------------------

def _base_marketing(marketing: MarketingCosts, week: int) -> Decimal:
    if marketing.mode is MarketingMode.CHANNELS:
        # campaign duration does not apply to channel budgets
        return marketing.channel_budget_total

    if marketing.budget_type is MarketingBudgetType.CAMPAIGN:
        duration = marketing.campaign_duration_weeks if marketing.campaign_duration_weeks > 0 else 1
        if week <= duration:
            return marketing.campaign_budget / Decimal(duration)
        return D0

    return marketing.weekly_budget


def apply_depreciation(base: Decimal, policy: DepreciationPolicy, week: int) -> Decimal:
    """
    base x (1 - rate/100)^(week - start_week) from start_week on, floored at
    minimum_amount. The floor applies even when it exceeds the base, so a
    budget below the minimum is charged the minimum once decay starts.
    """
    if week < policy.start_week:
        return base
    elapsed = week - policy.start_week
    decay = D1 if elapsed == 0 else (D1 - policy.weekly_rate / D100) ** elapsed
    return max(base * decay, policy.minimum_amount)


def marketing_cost(marketing: MarketingCosts, week: int) -> Decimal:
    base = _base_marketing(marketing, week)
    if marketing.depreciation is not None:
        base = apply_depreciation(base, marketing.depreciation, week)
    return q2(base)


# --- staffing --------------------------------------------------------------

def staffing_cost(staffing: StaffingCosts, events_per_week: int) -> Decimal:
    events = Decimal(events_per_week)
    if staffing.mode is StaffingMode.DETAILED:
        total = D0
        for role in staffing.roles:
            role_cost = Decimal(role.headcount) * role.cost_per_person
            total += role_cost if role.full_time else role_cost * events
        return q2(total)

    extra = events * staffing.additional_staffing_per_event * staffing.staffing_cost_per_person
    return q2(staffing.weekly_staff_cost + extra)


# --- fixed -----------------------------------------------------------------

def event_costs_total(costs: CostMetrics) -> Decimal:
    return q2(sum((c.amount for c in costs.event_costs), D0))


def setup_cost_for_week(costs: CostMetrics, week: int, horizon_weeks: int) -> Decimal:
    total = D0
    for item in costs.setup_costs:
        if item.amortize:
            total += item.amount / Decimal(horizon_weeks)
        elif week == 1:
            total += item.amount
    return q2(total)


# --- COGS ------------------------------------------------------------------

def fb_cogs(fb_revenue: Decimal, fb_cog_percentage: Decimal) -> Decimal:
    pct = clamp(fb_cog_percentage, D0, D100)
    return q2(fb_revenue * pct / D100)


def merchandise_cogs(
    merchandise_revenue: Decimal,
    merchandise_spend: Decimal,
    cog_per_unit: Decimal,
) -> Decimal:
    """Units are recovered as revenue / spend-per-unit; zero spend means zero COGS."""
    units = safe_div(merchandise_revenue, merchandise_spend)
    return q2(units * cog_per_unit)


# --- composition -----------------------------------------------------------

@deal.pre(
    lambda product, costs, revenue_metrics, revenue, week: 1 <= week <= product.horizon_weeks,
    message="week must lie inside the horizon",
)
@deal.ensure(
    lambda product, costs, revenue_metrics, revenue, week, result: result.total
    == result.marketing + result.staffing + result.event + result.setup + result.fb_cogs + result.merchandise_cogs,
    message="total_cost must equal the sum of its components",
)
@deal.raises(deal.RaisesContractError)
def compose_costs(
    product: ProductInfo,
    costs: CostMetrics,
    revenue_metrics: RevenueMetrics,
    revenue: RevenueBreakdown,
    week: int,
) -> CostBreakdown:
    merch = D0
    if product.has_merchandise_cogs:
        merch = merchandise_cogs(
            revenue.merchandise,
            revenue_metrics.merchandise_spend,
            costs.merchandise_cog_per_unit,
        )
    return CostBreakdown(
        marketing=marketing_cost(costs.marketing, week),
        staffing=staffing_cost(costs.staffing, product.effective_events_per_week),
        event=event_costs_total(costs),
        setup=setup_cost_for_week(costs, week, product.horizon_weeks),
        fb_cogs=fb_cogs(revenue.fb, costs.fb_cog_percentage),
        merchandise_cogs=merch,
    )
