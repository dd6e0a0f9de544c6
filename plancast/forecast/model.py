"""
Records consumed and produced by the forecast engine.

Money and rates are Decimal (NEVER float in the arithmetic). Constructors
accept int/float/str/Decimal and coerce, so callers and tests can write
GrowthMetrics(weekly_visitors=100) without ceremony.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from plancast.errors import InvalidInputError
from plancast.money import D0, as_decimal, money_str


# ============================================================
# ENUMS
# ============================================================

class ForecastCadence(str, Enum):
    PER_EVENT = "per-event"
    CONTINUOUS = "continuous"


class ProductCategory(str, Enum):
    EXPERIENTIAL_EVENTS = "Experiential Events"
    VENUE_ACTIVATIONS = "Venue-Based Activations"
    FOOD_AND_BEVERAGE = "Food & Beverage Products"
    MERCHANDISE_DROPS = "Merchandise Drops"
    DIGITAL_PRODUCTS = "Digital Products"


class MarketingMode(str, Enum):
    SIMPLE = "simple"
    CHANNELS = "channels"


class MarketingBudgetType(str, Enum):
    WEEKLY = "weekly"
    CAMPAIGN = "campaign"


class StaffingMode(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"


# Categories whose merchandise stream carries a per-unit cost of goods.
MERCHANDISE_COGS_CATEGORIES = frozenset(
    {ProductCategory.FOOD_AND_BEVERAGE, ProductCategory.MERCHANDISE_DROPS}
)


def _enum(cls: Any, value: Any, key: str) -> Any:
    if isinstance(value, cls):
        return value
    try:
        return cls(value)
    except ValueError as exc:
        raise InvalidInputError(f"{key}: unknown value {value!r}") from exc


def _coerce_decimals(obj: Any, *names: str) -> None:
    for name in names:
        object.__setattr__(obj, name, as_decimal(getattr(obj, name), name))


# ============================================================
# INPUT MODELS
# ============================================================

@dataclass(frozen=True, slots=True)
class ProductInfo:
    horizon_weeks: int
    cadence: ForecastCadence = ForecastCadence.CONTINUOUS
    events_per_week: int = 1
    category: ProductCategory = ProductCategory.EXPERIENTIAL_EVENTS
    product_id: str = ""
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "cadence", _enum(ForecastCadence, self.cadence, "cadence"))
        object.__setattr__(self, "category", _enum(ProductCategory, self.category, "category"))

    @property
    def effective_events_per_week(self) -> int:
        return self.events_per_week if self.events_per_week > 0 else 1

    @property
    def has_merchandise_cogs(self) -> bool:
        return self.category in MERCHANDISE_COGS_CATEGORIES


@dataclass(frozen=True, slots=True)
class GrowthMetrics:
    weekly_visitors: Decimal = D0
    visitors_per_event: Decimal = D0
    weekly_growth_rate: Decimal = D0  # percent per week, may be negative
    # display only, never used in the arithmetic
    return_visit_rate: Decimal = D0
    word_of_mouth_rate: Decimal = D0

    def __post_init__(self) -> None:
        _coerce_decimals(self, *(f.name for f in fields(self)))


@dataclass(frozen=True, slots=True)
class RevenueMetrics:
    """Per-visitor price/spend and conversion (fraction in [0,1]) for each stream."""

    ticket_price: Decimal = D0
    ticket_conversion: Decimal = D0
    fb_spend: Decimal = D0
    fb_conversion: Decimal = D0
    merchandise_spend: Decimal = D0
    merchandise_conversion: Decimal = D0
    digital_price: Decimal = D0
    digital_conversion: Decimal = D0

    def __post_init__(self) -> None:
        _coerce_decimals(self, *(f.name for f in fields(self)))


@dataclass(frozen=True, slots=True)
class DepreciationPolicy:
    start_week: int = 1
    weekly_rate: Decimal = D0  # percent
    minimum_amount: Decimal = D0

    def __post_init__(self) -> None:
        _coerce_decimals(self, "weekly_rate", "minimum_amount")


@dataclass(frozen=True, slots=True)
class MarketingChannel:
    name: str
    weekly_budget: Decimal = D0
    channel_id: str = ""

    def __post_init__(self) -> None:
        _coerce_decimals(self, "weekly_budget")


@dataclass(frozen=True, slots=True)
class MarketingCosts:
    mode: MarketingMode = MarketingMode.SIMPLE
    budget_type: MarketingBudgetType = MarketingBudgetType.WEEKLY
    weekly_budget: Decimal = D0
    campaign_budget: Decimal = D0
    campaign_duration_weeks: int = 1
    channels: Tuple[MarketingChannel, ...] = ()
    depreciation: Optional[DepreciationPolicy] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", _enum(MarketingMode, self.mode, "marketing.mode"))
        object.__setattr__(
            self, "budget_type", _enum(MarketingBudgetType, self.budget_type, "marketing.budget_type")
        )
        object.__setattr__(self, "channels", tuple(self.channels))
        _coerce_decimals(self, "weekly_budget", "campaign_budget")

    @property
    def channel_budget_total(self) -> Decimal:
        return sum((c.weekly_budget for c in self.channels), D0)


@dataclass(frozen=True, slots=True)
class StaffRole:
    role: str
    headcount: int = 0
    cost_per_person: Decimal = D0
    full_time: bool = False

    def __post_init__(self) -> None:
        _coerce_decimals(self, "cost_per_person")


@dataclass(frozen=True, slots=True)
class StaffingCosts:
    mode: StaffingMode = StaffingMode.SIMPLE
    weekly_staff_cost: Decimal = D0
    additional_staffing_per_event: Decimal = D0
    staffing_cost_per_person: Decimal = D0
    roles: Tuple[StaffRole, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", _enum(StaffingMode, self.mode, "staffing.mode"))
        object.__setattr__(self, "roles", tuple(self.roles))
        _coerce_decimals(
            self, "weekly_staff_cost", "additional_staffing_per_event", "staffing_cost_per_person"
        )


@dataclass(frozen=True, slots=True)
class FixedCost:
    name: str
    amount: Decimal = D0

    def __post_init__(self) -> None:
        _coerce_decimals(self, "amount")


@dataclass(frozen=True, slots=True)
class SetupCost:
    name: str
    amount: Decimal = D0
    amortize: bool = False

    def __post_init__(self) -> None:
        _coerce_decimals(self, "amount")


@dataclass(frozen=True, slots=True)
class CostMetrics:
    marketing: MarketingCosts = field(default_factory=MarketingCosts)
    staffing: StaffingCosts = field(default_factory=StaffingCosts)
    event_costs: Tuple[FixedCost, ...] = ()
    setup_costs: Tuple[SetupCost, ...] = ()
    fb_cog_percentage: Decimal = D0
    merchandise_cog_per_unit: Decimal = D0

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_costs", tuple(self.event_costs))
        object.__setattr__(self, "setup_costs", tuple(self.setup_costs))
        _coerce_decimals(self, "fb_cog_percentage", "merchandise_cog_per_unit")


# ============================================================
# OUTPUT MODEL
# ============================================================

REVENUE_FIELDS = ("ticket_revenue", "fb_revenue", "merchandise_revenue", "digital_revenue")
COST_FIELDS = (
    "marketing_cost",
    "staffing_cost",
    "event_cost",
    "setup_cost",
    "fb_cogs",
    "merchandise_cogs",
)


@dataclass(frozen=True, slots=True)
class WeeklyProjection:
    week: int
    number_of_events: int
    visitors: int
    average_event_attendance: int
    ticket_revenue: Decimal
    fb_revenue: Decimal
    merchandise_revenue: Decimal
    digital_revenue: Decimal
    total_revenue: Decimal
    marketing_cost: Decimal
    staffing_cost: Decimal
    event_cost: Decimal
    setup_cost: Decimal
    fb_cogs: Decimal
    merchandise_cogs: Decimal
    total_cost: Decimal
    weekly_profit: Decimal
    cumulative_profit: Decimal

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            out[f.name] = money_str(v) if isinstance(v, Decimal) else v
        return out
