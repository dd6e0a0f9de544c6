from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from plancast.errors import InvalidInputError
from plancast.money import D0, D100, as_decimal


class ScenarioVariant(str, Enum):
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
    NEUTRAL = "neutral"
    CUSTOM = "custom"


MODIFIER_FLOOR = -D100


@dataclass(frozen=True, slots=True)
class ScenarioModifiers:
    """Percentage deltas applied as value x (1 + m/100). 0 means unchanged."""

    ticket_revenue: Decimal = D0
    fb_revenue: Decimal = D0
    merchandise_revenue: Decimal = D0
    digital_revenue: Decimal = D0
    marketing_cost: Decimal = D0
    staffing_cost: Decimal = D0
    event_cost: Decimal = D0
    setup_cost: Decimal = D0
    attendance: Decimal = D0

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, as_decimal(getattr(self, f.name), f.name))

    @property
    def is_neutral(self) -> bool:
        return all(getattr(self, f.name) == D0 for f in fields(self))

    def clamped(self) -> "ScenarioModifiers":
        """Every modifier floored at -100 (metrics never drop below zero)."""
        return replace(
            self, **{f.name: max(getattr(self, f.name), MODIFIER_FLOOR) for f in fields(self)}
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue": {
                "ticketRevenue": str(self.ticket_revenue),
                "fbRevenue": str(self.fb_revenue),
                "merchandiseRevenue": str(self.merchandise_revenue),
                "digitalRevenue": str(self.digital_revenue),
            },
            "costs": {
                "marketingCost": str(self.marketing_cost),
                "staffingCost": str(self.staffing_cost),
                "eventCost": str(self.event_cost),
                "setupCost": str(self.setup_cost),
            },
            "attendance": str(self.attendance),
        }


@dataclass(frozen=True, slots=True)
class Scenario:
    scenario_id: str
    product_id: str
    name: str
    created_at: str
    updated_at: str
    description: str = ""
    modifiers: ScenarioModifiers = field(default_factory=ScenarioModifiers)
    variant: ScenarioVariant = ScenarioVariant.CUSTOM

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "variant", ScenarioVariant(self.variant))
        except ValueError as exc:
            raise InvalidInputError(f"variant: unknown value {self.variant!r}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.scenario_id,
            "productId": self.product_id,
            "name": self.name,
            "description": self.description,
            "modifiers": self.modifiers.to_dict(),
            "variant": self.variant.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


def _section(d: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    v = d.get(key)
    if v is None:
        return {}
    if not isinstance(v, Mapping):
        raise InvalidInputError(f"modifiers.{key}: expected a mapping")
    return v


def parse_modifiers(d: Optional[Mapping[str, Any]]) -> ScenarioModifiers:
    """
    Accepts the stored nested shape
      {"revenue": {...}, "costs": {...}, "attendance": 5 | {"footTraffic": 5}}
    or a flat snake_case mapping of ScenarioModifiers fields.
    """
    if not d:
        return ScenarioModifiers()
    if "revenue" not in d and "costs" not in d:
        known = {f.name for f in fields(ScenarioModifiers)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise InvalidInputError(f"modifiers: unknown keys {unknown}")
        return ScenarioModifiers(**{k: v for k, v in d.items() if v is not None})

    rev = _section(d, "revenue")
    cost = _section(d, "costs")
    attendance = d.get("attendance")
    if isinstance(attendance, Mapping):
        attendance = attendance.get("footTraffic")

    return ScenarioModifiers(
        ticket_revenue=as_decimal(rev.get("ticketRevenue"), "ticketRevenue"),
        fb_revenue=as_decimal(rev.get("fbRevenue"), "fbRevenue"),
        merchandise_revenue=as_decimal(rev.get("merchandiseRevenue"), "merchandiseRevenue"),
        digital_revenue=as_decimal(rev.get("digitalRevenue"), "digitalRevenue"),
        marketing_cost=as_decimal(cost.get("marketingCost"), "marketingCost"),
        staffing_cost=as_decimal(cost.get("staffingCost"), "staffingCost"),
        event_cost=as_decimal(cost.get("eventCost"), "eventCost"),
        setup_cost=as_decimal(cost.get("setupCost"), "setupCost"),
        attendance=as_decimal(attendance, "attendance"),
    )
