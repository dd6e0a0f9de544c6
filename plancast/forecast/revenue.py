from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from plancast.forecast.model import RevenueMetrics
from plancast.money import q2


@dataclass(frozen=True, slots=True)
class RevenueBreakdown:
    ticket: Decimal
    fb: Decimal
    merchandise: Decimal
    digital: Decimal

    @property
    def total(self) -> Decimal:
        return self.ticket + self.fb + self.merchandise + self.digital


def stream_revenue(visitors: int, rate: Decimal, conversion: Decimal) -> Decimal:
    return q2(Decimal(visitors) * rate * conversion)


def compose_revenue(visitors: int, revenue: RevenueMetrics) -> RevenueBreakdown:
    """
    Four independent streams, each visitors x price-or-spend x conversion.

    Precondition: rates and conversions are non-negative. Validation of that
    belongs to the caller; nothing here clamps.
    """
    return RevenueBreakdown(
        ticket=stream_revenue(visitors, revenue.ticket_price, revenue.ticket_conversion),
        fb=stream_revenue(visitors, revenue.fb_spend, revenue.fb_conversion),
        merchandise=stream_revenue(visitors, revenue.merchandise_spend, revenue.merchandise_conversion),
        digital=stream_revenue(visitors, revenue.digital_price, revenue.digital_conversion),
    )
