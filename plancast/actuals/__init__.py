"""
plancast.actuals

Recorded weekly results and their reconciliation against a projection.
"""
from .channels import ChannelSummary, summarize_channels
from .model import ActualBreakdown, ChannelPerformance, WeeklyActual, parse_actual
from .reconciler import (
    ReconciledForecast,
    ReconciledWeek,
    ReconciliationIssue,
    ReconciliationSummary,
    index_actuals,
    merge_actuals,
    reconcile,
    reconciled_cumulative_profit,
)

__all__ = [
    "ActualBreakdown",
    "ChannelPerformance",
    "ChannelSummary",
    "ReconciledForecast",
    "ReconciledWeek",
    "ReconciliationIssue",
    "ReconciliationSummary",
    "WeeklyActual",
    "index_actuals",
    "merge_actuals",
    "parse_actual",
    "reconcile",
    "reconciled_cumulative_profit",
    "summarize_channels",
]
