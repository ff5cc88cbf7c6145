"""Tests for the monthly aggregation functions."""

from datetime import date

import pytest

from bills_agent.aggregation import (
    compute_totals,
    decorate_bill,
    decorate_bills,
    normalize_due_day,
    search_bills,
    summarize_month,
    upcoming_bills,
)
from bills_agent.models import Bill, BillWithStatus, MonthKey


def _bill(bill_id, due_day=1, amount=10.0, **kwargs):
    return Bill(id=bill_id, name=kwargs.pop("name", bill_id.title()),
                due_day=due_day, amount=amount, **kwargs)


class TestNormalizeDueDay:

    def test_day_31_in_leap_february(self):
        assert normalize_due_day(31, MonthKey(2024, 2)) == 29

    def test_day_31_in_common_february(self):
        assert normalize_due_day(31, MonthKey(2023, 2)) == 28

    def test_day_31_in_thirty_day_month(self):
        assert normalize_due_day(31, MonthKey(2024, 9)) == 30

    def test_rounds_half_up(self):
        assert normalize_due_day(14.5, MonthKey(2024, 1)) == 15
        assert normalize_due_day(14.4, MonthKey(2024, 1)) == 14

    def test_clamps_low_values(self):
        assert normalize_due_day(0, MonthKey(2024, 1)) == 1


class TestDecorate:

    def test_decorate_bill_leap_february(self):
        decorated = decorate_bill(_bill("net", due_day=31), MonthKey(2024, 2))
        assert decorated.due_date == "2024-02-29"
        assert decorated.due_date_label == "02/29/2024"

    def test_decorate_bill_common_february(self):
        decorated = decorate_bill(_bill("net", due_day=31), MonthKey(2023, 2))
        assert decorated.due_date == "2023-02-28"

    def test_decorate_keeps_nominal_due_day(self):
        decorated = decorate_bill(_bill("net", due_day=31), MonthKey(2023, 2))
        assert decorated.due_day == 31

    def test_paid_flag_comes_from_paid_ids(self):
        bills = [_bill("a"), _bill("b")]
        decorated = decorate_bills(bills, MonthKey(2024, 1), {"b"})
        assert [b.is_paid for b in decorated] == [False, True]

    def test_decorate_preserves_fields_and_order(self):
        bills = [_bill("z", notes="last"), _bill("a", is_recurring=False)]
        decorated = decorate_bills(bills, MonthKey(2024, 1))
        assert [b.id for b in decorated] == ["z", "a"]
        assert decorated[0].notes == "last"
        assert decorated[1].is_recurring is False


class TestTotals:

    def test_mixed_paid_recurring_and_one_time(self):
        bills = [
            BillWithStatus(id="a", name="A", due_day=1, amount=100,
                           is_recurring=True, is_paid=True),
            BillWithStatus(id="b", name="B", due_day=2, amount=50,
                           is_recurring=False, is_paid=False),
        ]
        totals = compute_totals(bills)
        assert totals.total_due == 150
        assert totals.recurring_due == 100
        assert totals.one_time_due == 50
        assert totals.paid == 100
        assert totals.remaining == 50
        assert totals.paid_recurring == 100
        assert totals.remaining_recurring == 0

    def test_empty(self):
        totals = compute_totals([])
        assert totals.total_due == 0
        assert totals.remaining == 0

    def test_paid_plus_remaining_is_total(self):
        bills = decorate_bills(
            [_bill("a", amount=19.99), _bill("b", amount=5.01), _bill("c", amount=7.5)],
            MonthKey(2024, 6),
            {"b"},
        )
        totals = compute_totals(bills)
        assert totals.paid + totals.remaining == pytest.approx(totals.total_due)

    def test_summarize_month(self):
        summary = summarize_month(
            [_bill("a", amount=100), _bill("b", amount=50, is_recurring=False)],
            MonthKey(2024, 3),
            {"a"},
        )
        assert summary.month == "2024-03"
        assert len(summary.bills) == 2
        assert summary.totals.paid_recurring == 100
        assert summary.totals.one_time_due == 50


class TestUpcomingAndSearch:

    @pytest.fixture
    def june_bills(self):
        return decorate_bills(
            [
                _bill("rent", due_day=1, amount=1200),
                _bill("power", due_day=12, amount=80, notes="autopay"),
                _bill("water", due_day=10, amount=40),
                _bill("phone", due_day=20, amount=35),
            ],
            MonthKey(2024, 6),
            {"water"},
        )

    def test_upcoming_within_a_week(self, june_bills):
        soon = upcoming_bills(june_bills, today=date(2024, 6, 8), days=7)
        assert [b.id for b in soon] == ["power"]

    def test_upcoming_window_is_inclusive(self, june_bills):
        soon = upcoming_bills(june_bills, today=date(2024, 6, 1), days=11)
        assert [b.id for b in soon] == ["rent", "power"]

    def test_upcoming_skips_paid(self, june_bills):
        soon = upcoming_bills(june_bills, today=date(2024, 6, 9), days=7)
        assert "water" not in [b.id for b in soon]

    def test_search_empty_query_sorts_by_due_date(self, june_bills):
        assert [b.id for b in search_bills(june_bills, "")] == [
            "rent", "water", "power", "phone",
        ]

    def test_search_by_name_is_case_insensitive(self, june_bills):
        assert [b.id for b in search_bills(june_bills, "RENT")] == ["rent"]

    def test_search_by_notes(self, june_bills):
        assert [b.id for b in search_bills(june_bills, "autopay")] == ["power"]

    def test_search_by_amount(self, june_bills):
        assert [b.id for b in search_bills(june_bills, "1200")] == ["rent"]

    def test_search_by_due_date_label(self, june_bills):
        assert [b.id for b in search_bills(june_bills, "06/20")] == ["phone"]
