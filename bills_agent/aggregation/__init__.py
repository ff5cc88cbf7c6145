"""Monthly aggregation package."""

from bills_agent.aggregation.monthly import (
    compute_totals,
    decorate_bill,
    decorate_bills,
    normalize_due_day,
    search_bills,
    sort_by_due_date,
    summarize_month,
    upcoming_bills,
)

__all__ = [
    "compute_totals",
    "decorate_bill",
    "decorate_bills",
    "normalize_due_day",
    "search_bills",
    "sort_by_due_date",
    "summarize_month",
    "upcoming_bills",
]
