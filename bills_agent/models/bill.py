"""
Core Data Models for Bills Agent

These models define the schemas for all data flowing through the system.
They are designed to:
1. Decode stored records exactly once, applying back-compat defaults
2. Serialize to the camelCase JSON used on disk and on the wire
3. Provide clear validation error messages

DESIGN DECISION: Bill models do NOT enforce business ranges (dueDay 1-31,
amount >= 0). The store persists what it is given; payload checks live in
bills_agent.validation so that a hand-edited data file never becomes
unreadable.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# CORE BILL MODEL
# =============================================================================

class Bill(CamelModel):
    """
    A recurring or one-time payment obligation.

    Paid/unpaid is NOT a field here: it is month-scoped and lives in
    the paid status mapping of the stored document.

    Back-compat: records written before `isRecurring` existed (or with
    it null) decode as recurring. A null `notes` decodes as "". `dueDay`
    keeps whatever number was stored; the aggregator rounds it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique, stable bill identifier"
    )
    name: str = Field(
        ...,
        description="Display label"
    )
    due_day: Union[int, float] = Field(
        ...,
        description="Nominal day of month the bill is due (1-31); rounded per month"
    )
    amount: float = Field(
        ...,
        description="Amount due"
    )
    notes: str = Field(
        default="",
        description="Optional free text"
    )
    is_recurring: bool = Field(
        default=True,
        description="False for one-time bills"
    )

    @field_validator("is_recurring", mode="before")
    @classmethod
    def missing_recurring_is_true(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("notes", mode="before")
    @classmethod
    def missing_notes_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class BillWithStatus(Bill):
    """
    A bill decorated for one month.

    Carries the month's paid flag and the concrete due date, clamped
    to the last day of short months.
    """

    is_paid: bool = False
    due_date: Optional[str] = Field(
        default=None,
        description="ISO YYYY-MM-DD due date within the month"
    )
    due_date_label: Optional[str] = Field(
        default=None,
        description="Display label for the due date (MM/DD/YYYY)"
    )


class MonthlyTotals(CamelModel):
    """
    Sums of `amount` over the month's decorated bills.

    one_time_due is derived, never stored separately.
    """

    total_due: float = 0.0
    recurring_due: float = 0.0
    paid: float = 0.0
    paid_recurring: float = 0.0
    remaining: float = 0.0
    remaining_recurring: float = 0.0

    @computed_field(alias="oneTimeDue")
    @property
    def one_time_due(self) -> float:
        return self.total_due - self.recurring_due


class MonthlySummary(CamelModel):
    """Decorated bills for a month plus their totals."""

    month: str
    bills: list[BillWithStatus] = Field(default_factory=list)
    totals: MonthlyTotals = Field(default_factory=MonthlyTotals)


class BillsDocument(CamelModel):
    """
    The persisted JSON document.

    Layout: {"bills": [...], "paidStatus": {"YYYY-MM": {"<billId>": true}}}
    Absence of an id in a month means unpaid; explicit false is never written.
    """

    bills: list[Bill] = Field(default_factory=list)
    paid_status: dict[str, dict[str, bool]] = Field(default_factory=dict)

    def find(self, bill_id: str) -> Optional[Bill]:
        return next((bill for bill in self.bills if bill.id == bill_id), None)

    def paid_ids(self, month: str) -> set[str]:
        return {
            bill_id
            for bill_id, is_paid in self.paid_status.get(month, {}).items()
            if is_paid
        }


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in a request payload."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Result of validating one payload."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> list[str]:
        """Issue messages in the order they were found."""
        return [issue.message for issue in self.issues]
