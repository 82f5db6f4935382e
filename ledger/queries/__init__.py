"""Aggregation package."""

from ledger.queries.aggregator import (
    filter_by_month,
    filter_by_year,
    period_summary,
    recurring_total,
    savings,
    summarize,
    total,
    totals_by_category,
)

__all__ = [
    "filter_by_month",
    "filter_by_year",
    "period_summary",
    "recurring_total",
    "savings",
    "summarize",
    "total",
    "totals_by_category",
]
