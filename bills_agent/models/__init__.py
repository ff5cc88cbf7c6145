"""
Data Models Package

This package contains all Pydantic models used in Bills Agent.
All data flowing through the system must conform to these schemas.
"""

from bills_agent.models.bill import (
    Bill,
    BillsDocument,
    BillWithStatus,
    MonthlySummary,
    MonthlyTotals,
    ValidationIssue,
    ValidationResult,
)
from bills_agent.models.month import InvalidMonthKeyError, MonthKey
from bills_agent.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Bill models
    "Bill",
    "BillsDocument",
    "BillWithStatus",
    "MonthlySummary",
    "MonthlyTotals",
    "ValidationIssue",
    "ValidationResult",
    # Months
    "InvalidMonthKeyError",
    "MonthKey",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
