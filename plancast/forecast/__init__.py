"""
plancast.forecast

Baseline weekly forecast: growth, revenue streams, cost sources.
"""
from .budget import MarketingRatioReport, marketing_ratio_report
from .engine import first_profitable_week, forecast_totals, generate_forecast
from .model import (
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
    WeeklyProjection,
)
from .parsing import (
    parse_cost_metrics,
    parse_growth_metrics,
    parse_product_info,
    parse_revenue_metrics,
)

__all__ = [
    "CostMetrics",
    "DepreciationPolicy",
    "FixedCost",
    "ForecastCadence",
    "GrowthMetrics",
    "MarketingBudgetType",
    "MarketingChannel",
    "MarketingCosts",
    "MarketingMode",
    "MarketingRatioReport",
    "ProductCategory",
    "ProductInfo",
    "RevenueMetrics",
    "SetupCost",
    "StaffingCosts",
    "StaffingMode",
    "StaffRole",
    "WeeklyProjection",
    "first_profitable_week",
    "forecast_totals",
    "generate_forecast",
    "marketing_ratio_report",
    "parse_cost_metrics",
    "parse_growth_metrics",
    "parse_product_info",
    "parse_revenue_metrics",
]
