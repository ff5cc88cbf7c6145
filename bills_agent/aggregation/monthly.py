"""
Monthly Aggregation

Turns stored bills plus one month's paid flags into the month view:
concrete due dates, paid flags, and the roll-up totals.

DESIGN DECISION: A nominal due day that does not exist in the month is
pinned to the month's last day (31 in February -> 28th/29th). The bill
is always shown exactly once per month; it never errors and never rolls
over into the next month.

Everything here is pure and deterministic. Sums are plain float
addition with no rounding.
"""

import math
from datetime import date, timedelta
from typing import Iterable, Optional, Union

from bills_agent.models.bill import (
    Bill,
    BillWithStatus,
    MonthlySummary,
    MonthlyTotals,
)
from bills_agent.models.month import MonthKey


DUE_DATE_LABEL_FORMAT = "%m/%d/%Y"


def normalize_due_day(due_day: Union[int, float], month: MonthKey) -> int:
    """
    Clamp a nominal due day into the month.

    Rounds half up first, then clamps to [1, last day of month].
    """
    rounded = math.floor(due_day + 0.5)
    return min(max(1, rounded), month.days_in_month)


def decorate_bill(
    bill: Bill,
    month: MonthKey,
    paid_ids: Optional[set[str]] = None,
) -> BillWithStatus:
    """Attach the month's due date and paid flag to a bill."""
    due = month.due_date(normalize_due_day(bill.due_day, month))
    return BillWithStatus(
        **bill.model_dump(),
        is_paid=bill.id in (paid_ids or set()),
        due_date=due.isoformat(),
        due_date_label=due.strftime(DUE_DATE_LABEL_FORMAT),
    )


def decorate_bills(
    bills: Iterable[Bill],
    month: MonthKey,
    paid_ids: Optional[set[str]] = None,
) -> list[BillWithStatus]:
    """Decorate every bill, keeping stored order."""
    return [decorate_bill(bill, month, paid_ids) for bill in bills]


def compute_totals(bills: Iterable[BillWithStatus]) -> MonthlyTotals:
    """Roll decorated bills up into the month's totals."""
    bills = list(bills)
    return MonthlyTotals(
        total_due=sum(b.amount for b in bills),
        recurring_due=sum(b.amount for b in bills if b.is_recurring),
        paid=sum(b.amount for b in bills if b.is_paid),
        paid_recurring=sum(
            b.amount for b in bills if b.is_paid and b.is_recurring
        ),
        remaining=sum(b.amount for b in bills if not b.is_paid),
        remaining_recurring=sum(
            b.amount for b in bills if not b.is_paid and b.is_recurring
        ),
    )


def summarize_month(
    bills: Iterable[Bill],
    month: MonthKey,
    paid_ids: Optional[set[str]] = None,
) -> MonthlySummary:
    decorated = decorate_bills(bills, month, paid_ids)
    return MonthlySummary(
        month=str(month),
        bills=decorated,
        totals=compute_totals(decorated),
    )


def _due(bill: BillWithStatus) -> date:
    return date.fromisoformat(bill.due_date)


def sort_by_due_date(bills: Iterable[BillWithStatus]) -> list[BillWithStatus]:
    return sorted(bills, key=_due)


def upcoming_bills(
    bills: Iterable[BillWithStatus],
    today: Optional[date] = None,
    days: int = 7,
) -> list[BillWithStatus]:
    """
    Unpaid bills due between today and `days` days from now, inclusive.

    Returned soonest first.
    """
    start = today or date.today()
    end = start + timedelta(days=days)
    return sort_by_due_date(
        b for b in bills if not b.is_paid and start <= _due(b) <= end
    )


def search_bills(
    bills: Iterable[BillWithStatus],
    query: str = "",
) -> list[BillWithStatus]:
    """
    Filter bills by a free-text query, soonest due first.

    Matches name, due date label, amount or notes, case-insensitively.
    """
    ordered = sort_by_due_date(bills)
    q = (query or "").strip().lower()
    if not q:
        return ordered

    def _format_amount(amount: float) -> str:
        # 60.0 should match "60"
        return str(int(amount)) if float(amount).is_integer() else str(amount)

    return [
        b for b in ordered
        if q in b.name.lower()
        or q in (b.due_date_label or "").lower()
        or q in _format_amount(b.amount)
        or q in (b.notes or "").lower()
    ]
