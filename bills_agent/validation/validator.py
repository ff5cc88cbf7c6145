"""
Request Payload Validation

DESIGN DECISION: The store never validates business rules. Every payload
coming from the API or the dashboard passes through BillValidator first,
and is rejected with one message per offending field.

CHECKS:
- name: required, non-empty string
- dueDay: whole number between 1 and 31
- amount: non-negative number
- notes: string if provided
- isRecurring: boolean if provided
- month: YYYY-MM (for paid status and summaries)

IMPORTANT: Validation NEVER silently fixes issues. It reports them.
Booleans are not numbers here, even though Python says they are, and
NaN/infinity are not amounts.
"""

import math
from typing import Any, Mapping

from bills_agent.models.bill import ValidationIssue, ValidationResult
from bills_agent.models.month import InvalidMonthKeyError, MonthKey


MIN_DUE_DAY = 1
MAX_DUE_DAY = 31


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class BillValidator:
    """Validates bill and paid-status payloads before they reach storage."""

    def validate_bill_payload(self, payload: Mapping[str, Any]) -> ValidationResult:
        """
        Validate a create/update payload (camelCase keys).

        Returns:
            ValidationResult; `messages` lists every problem found
        """
        issues = []

        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                message="'name' is required",
            ))

        bill_id = payload.get("id")
        if bill_id is not None and not isinstance(bill_id, str):
            issues.append(ValidationIssue(
                field="id",
                message="'id' must be a string if provided",
            ))

        due_day = payload.get("dueDay")
        if (
            not _is_number(due_day)
            or not float(due_day).is_integer()
            or not MIN_DUE_DAY <= due_day <= MAX_DUE_DAY
        ):
            issues.append(ValidationIssue(
                field="dueDay",
                message="'dueDay' must be a number between 1 and 31",
            ))

        amount = payload.get("amount")
        if not _is_number(amount) or amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                message="'amount' must be a non-negative number",
            ))

        notes = payload.get("notes")
        if notes is not None and not isinstance(notes, str):
            issues.append(ValidationIssue(
                field="notes",
                message="'notes' must be a string if provided",
            ))

        is_recurring = payload.get("isRecurring")
        if is_recurring is not None and not isinstance(is_recurring, bool):
            issues.append(ValidationIssue(
                field="isRecurring",
                message="'isRecurring' must be a boolean if provided",
            ))

        return ValidationResult(issues=issues)

    def validate_month(self, value: Any, field: str = "month") -> ValidationResult:
        """Check that a value is a well-formed YYYY-MM month key."""
        if value is None or value == "":
            return ValidationResult(issues=[ValidationIssue(
                field=field,
                message=f"'{field}' is required",
            )])
        try:
            MonthKey.parse(value)
        except InvalidMonthKeyError:
            return ValidationResult(issues=[ValidationIssue(
                field=field,
                message=f"'{field}' must be in YYYY-MM format",
            )])
        return ValidationResult()
