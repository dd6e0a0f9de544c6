"""
Build forecast records from plain mappings.

The persistence collaborator stores metrics as camelCase documents
(weeklyVisitors, fbConversionRate, allocationMode, ...). Both that shape and
snake_case are accepted; a missing or None mapping yields the all-zero
default record.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Tuple

from plancast.errors import InvalidInputError
from plancast.forecast.model import (
    CostMetrics,
    DepreciationPolicy,
    FixedCost,
    ForecastCadence,
    GrowthMetrics,
    MarketingBudgetType,
    MarketingChannel,
    MarketingCosts,
    MarketingMode,
    ProductCategory,
    ProductInfo,
    RevenueMetrics,
    SetupCost,
    StaffingCosts,
    StaffingMode,
    StaffRole,
)
from plancast.money import as_decimal, as_int

_CADENCE_ALIASES = {
    "per-event": ForecastCadence.PER_EVENT,
    "per_event": ForecastCadence.PER_EVENT,
    "continuous": ForecastCadence.CONTINUOUS,
    "weekly": ForecastCadence.CONTINUOUS,
    "monthly": ForecastCadence.CONTINUOUS,
    "quarterly": ForecastCadence.CONTINUOUS,
}

_CATEGORY_ALIASES = {c.value.lower(): c for c in ProductCategory}
_CATEGORY_ALIASES.update({c.name.lower(): c for c in ProductCategory})

_MARKETING_MODE_ALIASES = {
    "simple": MarketingMode.SIMPLE,
    "channels": MarketingMode.CHANNELS,
    "channel-based": MarketingMode.CHANNELS,
}


def _get(d: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present, non-None value among keys (camelCase and snake_case spellings)."""
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def _mapping(value: Any, key: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidInputError(f"{key}: expected a mapping")
    return value


def _items(value: Any, key: str) -> Iterable[Mapping[str, Any]]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise InvalidInputError(f"{key}: expected a list")
    return [_mapping(v, key) for v in value]


def _label(value: Any, aliases: Mapping[str, Any], key: str) -> Any:
    norm = str(value).strip().lower()
    if norm not in aliases:
        raise InvalidInputError(f"{key}: unknown value {value!r}")
    return aliases[norm]


def parse_product_info(
    d: Mapping[str, Any],
    *,
    default_horizon_weeks: int = 12,
    default_events_per_week: int = 1,
) -> ProductInfo:
    d = _mapping(d, "product")
    cadence = _get(d, "forecastType", "cadence", "forecast_type", default="continuous")
    category = _get(d, "type", "category", default=ProductCategory.EXPERIENTIAL_EVENTS.value)
    return ProductInfo(
        horizon_weeks=as_int(
            _get(d, "forecastPeriod", "horizonWeeks", "horizon_weeks"),
            "horizon_weeks",
            default_horizon_weeks,
        ),
        cadence=_label(cadence, _CADENCE_ALIASES, "cadence"),
        events_per_week=as_int(
            _get(d, "eventsPerWeek", "events_per_week"), "events_per_week", default_events_per_week
        ),
        category=_label(category, _CATEGORY_ALIASES, "category"),
        product_id=str(_get(d, "id", "productId", "product_id", default="")),
        name=str(_get(d, "name", default="")),
    )


def parse_growth_metrics(d: Optional[Mapping[str, Any]]) -> GrowthMetrics:
    d = _mapping(d, "growth")
    return GrowthMetrics(
        weekly_visitors=as_decimal(_get(d, "weeklyVisitors", "weekly_visitors"), "weekly_visitors"),
        visitors_per_event=as_decimal(
            _get(d, "visitorsPerEvent", "visitors_per_event"), "visitors_per_event"
        ),
        weekly_growth_rate=as_decimal(
            _get(d, "weeklyGrowthRate", "weekly_growth_rate"), "weekly_growth_rate"
        ),
        return_visit_rate=as_decimal(
            _get(d, "returnVisitRate", "return_visit_rate"), "return_visit_rate"
        ),
        word_of_mouth_rate=as_decimal(
            _get(d, "wordOfMouthRate", "word_of_mouth_rate"), "word_of_mouth_rate"
        ),
    )


def parse_revenue_metrics(d: Optional[Mapping[str, Any]]) -> RevenueMetrics:
    d = _mapping(d, "revenue")

    def num(*keys: str) -> Any:
        return as_decimal(_get(d, *keys), keys[-1])

    return RevenueMetrics(
        ticket_price=num("ticketPrice", "ticket_price"),
        ticket_conversion=num("ticketSalesRate", "ticket_conversion"),
        fb_spend=num("fbSpend", "fb_spend"),
        fb_conversion=num("fbConversionRate", "fb_conversion"),
        merchandise_spend=num("merchandiseSpend", "merchandise_spend"),
        merchandise_conversion=num("merchandiseConversionRate", "merchandise_conversion"),
        digital_price=num("digitalPrice", "digital_price"),
        digital_conversion=num("digitalConversionRate", "digital_conversion"),
    )


def _parse_depreciation(d: Any) -> Optional[DepreciationPolicy]:
    # a stored block is off unless explicitly enabled
    if d is None:
        return None
    d = _mapping(d, "depreciation")
    if not bool(_get(d, "enabled", default=False)):
        return None
    start_week = as_int(_get(d, "startWeek", "start_week"), "start_week", 1)
    return DepreciationPolicy(
        start_week=start_week if start_week > 0 else 1,
        weekly_rate=as_decimal(
            _get(d, "weeklyDepreciationRate", "weekly_rate"), "weekly_rate"
        ),
        minimum_amount=as_decimal(_get(d, "minimumAmount", "minimum_amount"), "minimum_amount"),
    )


def _parse_channels(value: Any) -> Tuple[MarketingChannel, ...]:
    return tuple(
        MarketingChannel(
            name=str(_get(c, "name", default="")),
            weekly_budget=as_decimal(_get(c, "budget", "weeklyBudget", "weekly_budget"), "channel.budget"),
            channel_id=str(_get(c, "id", "channelId", "channel_id", default="")),
        )
        for c in _items(value, "marketing.channels")
    )


def parse_marketing(d: Optional[Mapping[str, Any]]) -> MarketingCosts:
    d = _mapping(d, "marketing")
    channels = _parse_channels(_get(d, "channels"))

    raw_mode = _get(d, "allocationMode", "mode")
    if raw_mode is None:
        mode = MarketingMode.CHANNELS if channels else MarketingMode.SIMPLE
    else:
        mode = _label(raw_mode, _MARKETING_MODE_ALIASES, "marketing.mode")

    budget_type = _get(d, "type", "budgetType", "budget_type", default="weekly")
    return MarketingCosts(
        mode=mode,
        budget_type=_label(budget_type, {t.value: t for t in MarketingBudgetType}, "marketing.type"),
        weekly_budget=as_decimal(_get(d, "weeklyBudget", "weekly_budget"), "weekly_budget"),
        campaign_budget=as_decimal(_get(d, "campaignBudget", "campaign_budget"), "campaign_budget"),
        campaign_duration_weeks=as_int(
            _get(d, "campaignDurationWeeks", "campaign_duration_weeks"), "campaign_duration_weeks", 1
        ),
        channels=channels,
        depreciation=_parse_depreciation(_get(d, "depreciation")),
    )


def parse_staffing(d: Mapping[str, Any]) -> StaffingCosts:
    """Staffing fields live flat on the cost document in the stored shape."""
    roles = tuple(
        StaffRole(
            role=str(_get(r, "role", "name", default="")),
            headcount=as_int(_get(r, "count", "headcount"), "role.count"),
            cost_per_person=as_decimal(_get(r, "costPerPerson", "cost_per_person"), "role.cost_per_person"),
            full_time=bool(_get(r, "isFullTime", "full_time", default=False)),
        )
        for r in _items(_get(d, "staffRoles", "roles"), "staffRoles")
    )
    raw_mode = _get(d, "staffingAllocationMode", "staffing_mode")
    if raw_mode is None:
        mode = StaffingMode.DETAILED if roles else StaffingMode.SIMPLE
    else:
        mode = _label(raw_mode, {m.value: m for m in StaffingMode}, "staffing.mode")

    return StaffingCosts(
        mode=mode,
        weekly_staff_cost=as_decimal(_get(d, "weeklyStaffCost", "weekly_staff_cost"), "weekly_staff_cost"),
        additional_staffing_per_event=as_decimal(
            _get(d, "additionalStaffingPerEvent", "additional_staffing_per_event"),
            "additional_staffing_per_event",
        ),
        staffing_cost_per_person=as_decimal(
            _get(d, "staffingCostPerPerson", "staffing_cost_per_person"), "staffing_cost_per_person"
        ),
        roles=roles,
    )


def parse_cost_metrics(d: Optional[Mapping[str, Any]]) -> CostMetrics:
    d = _mapping(d, "costs")
    staffing_src = _get(d, "staffing")
    return CostMetrics(
        marketing=parse_marketing(_get(d, "marketing")),
        staffing=parse_staffing(_mapping(staffing_src, "staffing") if staffing_src is not None else d),
        event_costs=tuple(
            FixedCost(
                name=str(_get(c, "name", default="")),
                amount=as_decimal(_get(c, "amount"), "eventCosts.amount"),
            )
            for c in _items(_get(d, "eventCosts", "event_costs"), "eventCosts")
        ),
        setup_costs=tuple(
            SetupCost(
                name=str(_get(c, "name", default="")),
                amount=as_decimal(_get(c, "amount"), "setupCosts.amount"),
                amortize=bool(_get(c, "amortize", default=False)),
            )
            for c in _items(_get(d, "setupCosts", "setup_costs"), "setupCosts")
        ),
        fb_cog_percentage=as_decimal(_get(d, "fbCogPercentage", "fb_cog_percentage"), "fb_cog_percentage"),
        merchandise_cog_per_unit=as_decimal(
            _get(d, "merchandiseCogPerUnit", "merchandise_cog_per_unit"), "merchandise_cog_per_unit"
        ),
    )
