from __future__ import annotations

from decimal import Decimal

from plancast.forecast.costs import (
    apply_depreciation,
    compose_costs,
    event_costs_total,
    fb_cogs,
    marketing_cost,
    merchandise_cogs,
    setup_cost_for_week,
    staffing_cost,
)
from plancast.forecast.model import (
    CostMetrics,
    DepreciationPolicy,
    FixedCost,
    MarketingChannel,
    MarketingCosts,
    ProductInfo,
    RevenueMetrics,
    SetupCost,
    StaffingCosts,
    StaffRole,
)
from plancast.forecast.revenue import compose_revenue


def test_revenue_streams_are_independent() -> None:
    metrics = RevenueMetrics(
        ticket_price=10,
        ticket_conversion=1,
        fb_spend=8,
        fb_conversion="0.5",
        merchandise_spend=20,
        merchandise_conversion="0.5",
        digital_price=3,
        digital_conversion="0.1",
    )
    rev = compose_revenue(100, metrics)
    assert rev.ticket == Decimal("1000.00")
    assert rev.fb == Decimal("400.00")
    assert rev.merchandise == Decimal("1000.00")
    assert rev.digital == Decimal("30.00")
    assert rev.total == Decimal("2430.00")


def test_merchandise_cogs_from_units_sold() -> None:
    rev = compose_revenue(100, RevenueMetrics(merchandise_spend=20, merchandise_conversion="0.5"))
    assert rev.merchandise == Decimal("1000.00")
    # 1000 / 20 = 50 units
    assert merchandise_cogs(rev.merchandise, Decimal("20"), Decimal("4")) == Decimal("200.00")


def test_merchandise_cogs_zero_spend_is_zero() -> None:
    assert merchandise_cogs(Decimal("500"), Decimal("0"), Decimal("4")) == Decimal("0.00")


def test_fb_cogs_is_percentage_of_fb_revenue() -> None:
    assert fb_cogs(Decimal("400"), Decimal("30")) == Decimal("120.00")
    assert fb_cogs(Decimal("400"), Decimal("150")) == Decimal("400.00")
    assert fb_cogs(Decimal("400"), Decimal("-5")) == Decimal("0.00")


def test_depreciation_sequence_with_floor() -> None:
    marketing = MarketingCosts(
        weekly_budget=700,
        depreciation=DepreciationPolicy(start_week=1, weekly_rate=10, minimum_amount=100),
    )
    assert [marketing_cost(marketing, w) for w in (1, 2, 3)] == [
        Decimal("700.00"),
        Decimal("630.00"),
        Decimal("567.00"),
    ]
    assert marketing_cost(marketing, 40) == Decimal("100.00")


def test_depreciation_before_start_week_is_undepreciated() -> None:
    policy = DepreciationPolicy(start_week=3, weekly_rate=50, minimum_amount=0)
    assert apply_depreciation(Decimal("200"), policy, 2) == Decimal("200")
    assert apply_depreciation(Decimal("200"), policy, 3) == Decimal("200")
    assert apply_depreciation(Decimal("200"), policy, 4) == Decimal("100")


def test_campaign_budget_spread_over_duration() -> None:
    marketing = MarketingCosts(budget_type="campaign", campaign_budget=900, campaign_duration_weeks=3)
    assert [marketing_cost(marketing, w) for w in (1, 3, 4)] == [
        Decimal("300.00"),
        Decimal("300.00"),
        Decimal("0.00"),
    ]


def test_campaign_duration_zero_counts_as_one_week() -> None:
    marketing = MarketingCosts(budget_type="campaign", campaign_budget=500, campaign_duration_weeks=0)
    assert marketing_cost(marketing, 1) == Decimal("500.00")
    assert marketing_cost(marketing, 2) == Decimal("0.00")


def test_channel_mode_sums_channel_budgets() -> None:
    marketing = MarketingCosts(
        mode="channels",
        weekly_budget=9999,
        channels=(MarketingChannel("social", 150), MarketingChannel("search", 250)),
    )
    assert marketing_cost(marketing, 1) == Decimal("400.00")


def test_simple_staffing_adds_per_event_extras() -> None:
    staffing = StaffingCosts(
        weekly_staff_cost=1000, additional_staffing_per_event=2, staffing_cost_per_person=50
    )
    # 1000 + 3 events x 2 people x 50
    assert staffing_cost(staffing, 3) == Decimal("1300.00")


def test_detailed_staffing_full_time_vs_per_event() -> None:
    staffing = StaffingCosts(
        mode="detailed",
        roles=(
            StaffRole("manager", headcount=1, cost_per_person=800, full_time=True),
            StaffRole("crew", headcount=4, cost_per_person=60),
        ),
    )
    assert staffing_cost(staffing, 2) == Decimal("1280.00")


def test_fixed_and_setup_costs() -> None:
    costs = CostMetrics(
        event_costs=(FixedCost("venue", 250), FixedCost("insurance", "49.99")),
        setup_costs=(SetupCost("fitout", 1200, amortize=True), SetupCost("permit", 300)),
    )
    assert event_costs_total(costs) == Decimal("299.99")
    assert setup_cost_for_week(costs, 1, 4) == Decimal("600.00")
    assert setup_cost_for_week(costs, 2, 4) == Decimal("300.00")


def test_merchandise_cogs_only_for_goods_categories() -> None:
    metrics = RevenueMetrics(merchandise_spend=20, merchandise_conversion="0.5")
    costs = CostMetrics(merchandise_cog_per_unit=4)
    rev = compose_revenue(100, metrics)

    goods = ProductInfo(horizon_weeks=1, category="Merchandise Drops")
    events = ProductInfo(horizon_weeks=1, category="Experiential Events")

    assert compose_costs(goods, costs, metrics, rev, 1).merchandise_cogs == Decimal("200.00")
    assert compose_costs(events, costs, metrics, rev, 1).merchandise_cogs == Decimal("0")


def test_cost_total_is_sum_of_parts() -> None:
    costs = CostMetrics(
        marketing=MarketingCosts(weekly_budget="100.005"),
        staffing=StaffingCosts(weekly_staff_cost="33.333"),
        event_costs=(FixedCost("venue", "10.10"),),
        fb_cog_percentage=25,
    )
    metrics = RevenueMetrics(fb_spend="3.33", fb_conversion=1)
    rev = compose_revenue(7, metrics)
    out = compose_costs(ProductInfo(horizon_weeks=2), costs, metrics, rev, 2)
    assert out.total == out.marketing + out.staffing + out.event + out.setup + out.fb_cogs + out.merchandise_cogs
    assert out.marketing == Decimal("100.01")


def test_depreciation_floor_applies_below_base() -> None:
    policy = DepreciationPolicy(start_week=1, weekly_rate=10, minimum_amount=100)
    assert apply_depreciation(Decimal("0"), policy, 5) == Decimal("100")

    marketing = MarketingCosts(weekly_budget=50, depreciation=policy)
    assert [marketing_cost(marketing, w) for w in (1, 2, 3)] == [Decimal("100.00")] * 3
