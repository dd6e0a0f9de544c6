from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Tuple

from plancast.actuals.model import WeeklyActual
from plancast.money import D0, money_str, percent_of, q2, safe_div


@dataclass(frozen=True, slots=True)
class ChannelSummary:
    channel_id: str
    impressions: int
    clicks: int
    conversions: int
    spend: Decimal
    revenue: Decimal

    @property
    def ctr_pct(self) -> Decimal:
        return percent_of(Decimal(self.clicks), Decimal(self.impressions))

    @property
    def conversion_rate_pct(self) -> Decimal:
        return percent_of(Decimal(self.conversions), Decimal(self.clicks))

    @property
    def cost_per_acquisition(self) -> Decimal:
        return q2(safe_div(self.spend, Decimal(self.conversions)))

    @property
    def roas(self) -> Decimal:
        """Revenue per unit of spend."""
        return q2(safe_div(self.revenue, self.spend))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channel_id": self.channel_id,
            "impressions": self.impressions,
            "clicks": self.clicks,
            "conversions": self.conversions,
            "spend": money_str(self.spend),
            "revenue": money_str(self.revenue),
            "ctr_pct": str(self.ctr_pct),
            "conversion_rate_pct": str(self.conversion_rate_pct),
            "cost_per_acquisition": money_str(self.cost_per_acquisition),
            "roas": str(self.roas),
        }


def summarize_channels(actuals: Iterable[WeeklyActual]) -> Tuple[ChannelSummary, ...]:
    """Per-channel totals across all actuals, in order of first appearance."""
    order: List[str] = []
    acc: Dict[str, List[Any]] = {}
    for actual in actuals:
        for c in actual.channel_performance:
            row = acc.get(c.channel_id)
            if row is None:
                row = [0, 0, 0, D0, D0]
                acc[c.channel_id] = row
                order.append(c.channel_id)
            row[0] += c.impressions
            row[1] += c.clicks
            row[2] += c.conversions
            row[3] += c.spend
            row[4] += c.revenue

    return tuple(
        ChannelSummary(
            channel_id=cid,
            impressions=acc[cid][0],
            clicks=acc[cid][1],
            conversions=acc[cid][2],
            spend=acc[cid][3],
            revenue=acc[cid][4],
        )
        for cid in order
    )
