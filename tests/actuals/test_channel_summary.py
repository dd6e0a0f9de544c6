from __future__ import annotations

from decimal import Decimal

from plancast.actuals.channels import summarize_channels
from plancast.actuals.model import ChannelPerformance, WeeklyActual


def test_channels_aggregate_in_first_seen_order() -> None:
    actuals = [
        WeeklyActual(
            week=1,
            revenue=0,
            expenses=0,
            channel_performance=(
                ChannelPerformance("search", impressions=1000, clicks=40, conversions=4, spend=80, revenue=400),
                ChannelPerformance("social", impressions=2000, clicks=20, conversions=0, spend=50),
            ),
        ),
        WeeklyActual(
            week=2,
            revenue=0,
            expenses=0,
            channel_performance=(
                ChannelPerformance("search", impressions=1000, clicks=60, conversions=6, spend=120, revenue=600),
            ),
        ),
    ]
    search, social = summarize_channels(actuals)

    assert search.channel_id == "search"
    assert search.impressions == 2000
    assert search.ctr_pct == Decimal("5.00")
    assert search.conversion_rate_pct == Decimal("10.00")
    assert search.cost_per_acquisition == Decimal("20.00")
    assert search.roas == Decimal("5.00")

    assert social.channel_id == "social"
    assert social.cost_per_acquisition == Decimal("0")
    assert social.roas == Decimal("0.00")


def test_zero_denominators_yield_zero() -> None:
    (only,) = summarize_channels([WeeklyActual(week=1, revenue=0, expenses=0, channel_performance=(ChannelPerformance("x"),))])
    assert only.ctr_pct == 0
    assert only.conversion_rate_pct == 0
    assert only.cost_per_acquisition == 0
    assert only.roas == 0
    assert only.to_dict()["roas"] == "0.00"


def test_no_channel_data() -> None:
    assert summarize_channels([WeeklyActual(week=1, revenue=5, expenses=1)]) == ()
