from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple

from plancast.errors import InvalidInputError
from plancast.money import D0, as_decimal, as_int, money_str


@dataclass(frozen=True, slots=True)
class ActualBreakdown:
    """Observed per-stream / per-source figures. None means 'not recorded'."""

    ticket_revenue: Optional[Decimal] = None
    fb_revenue: Optional[Decimal] = None
    merchandise_revenue: Optional[Decimal] = None
    digital_revenue: Optional[Decimal] = None
    marketing_cost: Optional[Decimal] = None
    staffing_cost: Optional[Decimal] = None
    event_cost: Optional[Decimal] = None
    setup_cost: Optional[Decimal] = None
    fb_cogs: Optional[Decimal] = None
    merchandise_cogs: Optional[Decimal] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if v is not None:
                object.__setattr__(self, f.name, as_decimal(v, f.name))

    def value(self, name: str) -> Decimal:
        v = getattr(self, name)
        return D0 if v is None else v


@dataclass(frozen=True, slots=True)
class ChannelPerformance:
    channel_id: str
    impressions: int = 0
    clicks: int = 0
    conversions: int = 0
    spend: Decimal = D0
    revenue: Decimal = D0

    def __post_init__(self) -> None:
        object.__setattr__(self, "spend", as_decimal(self.spend, "spend"))
        object.__setattr__(self, "revenue", as_decimal(self.revenue, "revenue"))


@dataclass(frozen=True, slots=True)
class WeeklyActual:
    week: int
    revenue: Decimal
    expenses: Decimal
    breakdown: Optional[ActualBreakdown] = None
    channel_performance: Tuple[ChannelPerformance, ...] = ()
    notes: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "revenue", as_decimal(self.revenue, "revenue"))
        object.__setattr__(self, "expenses", as_decimal(self.expenses, "expenses"))
        object.__setattr__(self, "channel_performance", tuple(self.channel_performance))

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.expenses

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "week": self.week,
            "revenue": money_str(self.revenue),
            "expenses": money_str(self.expenses),
            "profit": money_str(self.profit),
            "notes": self.notes,
        }
        if self.breakdown is not None:
            out["breakdown"] = {
                f.name: money_str(getattr(self.breakdown, f.name))
                for f in fields(self.breakdown)
                if getattr(self.breakdown, f.name) is not None
            }
        if self.channel_performance:
            out["channel_performance"] = [
                {
                    "channel_id": c.channel_id,
                    "impressions": c.impressions,
                    "clicks": c.clicks,
                    "conversions": c.conversions,
                    "spend": money_str(c.spend),
                    "revenue": money_str(c.revenue),
                }
                for c in self.channel_performance
            ]
        return out


# stored key -> ActualBreakdown field
_BREAKDOWN_KEYS = {
    "ticketRevenue": "ticket_revenue",
    "fbRevenue": "fb_revenue",
    "merchandiseRevenue": "merchandise_revenue",
    "digitalRevenue": "digital_revenue",
    "marketingCosts": "marketing_cost",
    "staffingCosts": "staffing_cost",
    "eventCosts": "event_cost",
    "setupCosts": "setup_cost",
    "fbCogs": "fb_cogs",
    "merchandiseCogs": "merchandise_cogs",
}


def _first(d: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if d.get(k) is not None:
            return d[k]
    return None


def parse_actual(d: Mapping[str, Any]) -> WeeklyActual:
    """
    Stored shape: {"week", "revenue", "expenses", "ticketRevenue", ...,
    "channelPerformance": [{"channelId", "impressions", ...}], "notes"}.
    snake_case spellings of the same fields are accepted too.
    """
    if not isinstance(d, Mapping):
        raise InvalidInputError("actual: expected a mapping")
    week = _first(d, "week")
    if week is None:
        raise InvalidInputError("actual: week is required")

    parts: Dict[str, Any] = {}
    for stored, attr in _BREAKDOWN_KEYS.items():
        v = _first(d, stored, attr)
        if v is not None:
            parts[attr] = v
    breakdown = ActualBreakdown(**parts) if parts else None

    channels = []
    for c in d.get("channelPerformance") or d.get("channel_performance") or ():
        if not isinstance(c, Mapping):
            raise InvalidInputError("actual.channelPerformance: expected a mapping")
        channels.append(
            ChannelPerformance(
                channel_id=str(_first(c, "channelId", "channel_id") or ""),
                impressions=as_int(c.get("impressions"), "impressions"),
                clicks=as_int(c.get("clicks"), "clicks"),
                conversions=as_int(c.get("conversions"), "conversions"),
                spend=as_decimal(c.get("spend"), "spend"),
                revenue=as_decimal(c.get("revenue"), "revenue"),
            )
        )

    return WeeklyActual(
        week=as_int(week, "week"),
        revenue=as_decimal(_first(d, "revenue", "totalRevenue"), "revenue"),
        expenses=as_decimal(_first(d, "expenses", "totalCosts"), "expenses"),
        breakdown=breakdown,
        channel_performance=tuple(channels),
        notes=str(d.get("notes") or ""),
    )
