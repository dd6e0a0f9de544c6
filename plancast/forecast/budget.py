from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Sequence, Tuple

from plancast.forecast.model import MarketingCosts, WeeklyProjection
from plancast.money import D0, money_str, percent_of


@dataclass(frozen=True, slots=True)
class ChannelShare:
    name: str
    channel_id: str
    weekly_budget: Decimal
    share_pct: Decimal


@dataclass(frozen=True, slots=True)
class MarketingRatioReport:
    """
    Marketing spend relative to revenue. Reporting only: nothing here
    recommends or reallocates budget.

    weekly_ratio_pct : (week, marketing_cost / total_revenue x 100)
    overall_ratio_pct: same ratio over the whole horizon
    channel_shares   : each channel's slice of the summed channel budgets
    """

    weekly_ratio_pct: Tuple[Tuple[int, Decimal], ...]
    overall_ratio_pct: Decimal
    total_marketing: Decimal
    total_revenue: Decimal
    channel_shares: Tuple[ChannelShare, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekly_ratio_pct": [{"week": w, "ratio_pct": str(r)} for w, r in self.weekly_ratio_pct],
            "overall_ratio_pct": str(self.overall_ratio_pct),
            "total_marketing": money_str(self.total_marketing),
            "total_revenue": money_str(self.total_revenue),
            "channel_shares": [
                {
                    "name": c.name,
                    "channel_id": c.channel_id,
                    "weekly_budget": money_str(c.weekly_budget),
                    "share_pct": str(c.share_pct),
                }
                for c in self.channel_shares
            ],
        }


def marketing_ratio_report(
    projections: Sequence[WeeklyProjection],
    marketing: MarketingCosts,
) -> MarketingRatioReport:
    weekly = tuple((p.week, percent_of(p.marketing_cost, p.total_revenue)) for p in projections)
    total_marketing = sum((p.marketing_cost for p in projections), D0)
    total_revenue = sum((p.total_revenue for p in projections), D0)

    budget_total = marketing.channel_budget_total
    shares = tuple(
        ChannelShare(
            name=c.name,
            channel_id=c.channel_id,
            weekly_budget=c.weekly_budget,
            share_pct=percent_of(c.weekly_budget, budget_total),
        )
        for c in marketing.channels
    )
    return MarketingRatioReport(
        weekly_ratio_pct=weekly,
        overall_ratio_pct=percent_of(total_marketing, total_revenue),
        total_marketing=total_marketing,
        total_revenue=total_revenue,
        channel_shares=shares,
    )
