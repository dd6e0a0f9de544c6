from __future__ import annotations

from decimal import Decimal
from typing import Tuple

import deal

from plancast.forecast.model import ForecastCadence, GrowthMetrics, ProductInfo
from plancast.money import D0, D1, D100, round_int


def base_volume(product: ProductInfo, growth: GrowthMetrics) -> Decimal:
    """Week-1 visitor volume: per-event attendance x events, or weekly visitors."""
    if product.cadence is ForecastCadence.PER_EVENT:
        return growth.visitors_per_event * Decimal(product.effective_events_per_week)
    return growth.weekly_visitors


@deal.pre(lambda v0, growth_rate_pct, week: week >= 1, message="week must be >= 1")
@deal.post(lambda result: isinstance(result, int), message="visitors must be int")
@deal.raises(deal.RaisesContractError)
def visitors_for_week(v0: Decimal, growth_rate_pct: Decimal, week: int) -> int:
    """
    round(V0 x (1 + r)^(week - 1)), r = growth_rate_pct / 100.

    Week 1 is always round(V0). Steep decay may round to 0; that is a valid
    terminal state, not an error.
    """
    if week == 1:
        return round_int(v0)
    factor = (D1 + growth_rate_pct / D100) ** (week - 1)
    return round_int(v0 * factor)


def average_per_event(visitors: int, events_per_week: int) -> int:
    events = events_per_week if events_per_week > 0 else 1
    return round_int(Decimal(visitors) / Decimal(events))


def project_visitors(product: ProductInfo, growth: GrowthMetrics) -> Tuple[int, ...]:
    """Visitor series for weeks 1..horizon."""
    v0 = base_volume(product, growth)
    if v0 < D0:
        v0 = D0
    return tuple(
        visitors_for_week(v0, growth.weekly_growth_rate, w)
        for w in range(1, product.horizon_weeks + 1)
    )
