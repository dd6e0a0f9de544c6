from __future__ import annotations

from decimal import Decimal

from hypothesis import given, strategies as st

from plancast.actuals.model import WeeklyActual
from plancast.actuals.reconciler import reconcile, reconciled_cumulative_profit
from plancast.forecast.engine import generate_forecast
from plancast.forecast.growth import visitors_for_week
from plancast.forecast.model import (
    CostMetrics,
    GrowthMetrics,
    MarketingCosts,
    ProductInfo,
    RevenueMetrics,
)
from plancast.money import D0, percent_change, round_int
from plancast.scenarios.engine import apply_scenario
from plancast.scenarios.model import ScenarioModifiers

money = st.decimals(min_value=Decimal("0"), max_value=Decimal("5000"), places=2, allow_nan=False, allow_infinity=False)
rates = st.decimals(min_value=Decimal("-50"), max_value=Decimal("50"), places=1, allow_nan=False, allow_infinity=False)
fractions = st.decimals(min_value=Decimal("0"), max_value=Decimal("1"), places=2, allow_nan=False, allow_infinity=False)


@st.composite
def forecasts(draw):
    product = ProductInfo(horizon_weeks=draw(st.integers(min_value=1, max_value=20)))
    growth = GrowthMetrics(weekly_visitors=draw(money), weekly_growth_rate=draw(rates))
    revenue = RevenueMetrics(
        ticket_price=draw(money),
        ticket_conversion=draw(fractions),
        fb_spend=draw(money),
        fb_conversion=draw(fractions),
    )
    costs = CostMetrics(
        marketing=MarketingCosts(weekly_budget=draw(money)),
        fb_cog_percentage=draw(st.decimals(min_value=Decimal("0"), max_value=Decimal("100"), places=1)),
    )
    return generate_forecast(product, growth, revenue, costs)


@given(v0=money, r=rates)
def test_week_one_is_round_v0(v0: Decimal, r: Decimal) -> None:
    assert visitors_for_week(v0, r, 1) == round_int(v0)


@given(weeks=forecasts())
def test_cumulative_is_running_sum(weeks) -> None:
    running = D0
    for row in weeks:
        running += row.weekly_profit
        assert row.cumulative_profit == running
        assert row.total_revenue == row.ticket_revenue + row.fb_revenue + row.merchandise_revenue + row.digital_revenue


@given(weeks=forecasts())
def test_neutral_scenario_is_identity(weeks) -> None:
    assert apply_scenario(weeks, ScenarioModifiers()) == weeks


@given(baseline=st.decimals(allow_nan=False, allow_infinity=False, places=2, min_value=-10**6, max_value=10**6))
def test_percent_change_finite_for_any_baseline(baseline: Decimal) -> None:
    out = percent_change(baseline, baseline + Decimal("1"))
    assert out.is_finite()
    if baseline == 0:
        assert out == 0


@given(
    weeks=forecasts(),
    profits=st.dictionaries(st.integers(min_value=1, max_value=20), money, max_size=6),
)
def test_reconciled_cumulative_matches_naive(weeks, profits) -> None:
    actuals = [WeeklyActual(week=w, revenue=p, expenses=0) for w, p in profits.items()]
    result = reconcile(weeks, actuals)
    for row in result.weeks:
        assert row.cumulative_profit == reconciled_cumulative_profit(weeks, actuals, row.week)
