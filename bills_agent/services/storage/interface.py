"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for a real database later
2. Keep request handling decoupled from persistence mechanics

The interface is intentionally simple - we're not building an ORM.
Just the operations the dashboard and the assistant need.

Store operations do NOT validate business rules (dueDay range, amount
sign). Callers validate first; the store focuses on persisting exactly
what it was given.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from bills_agent.models.bill import Bill, BillWithStatus, MonthlySummary
from bills_agent.models.month import MonthKey


MonthLike = Union[str, MonthKey]


class BillStorageInterface(ABC):
    """
    Abstract interface for bill storage operations.

    Any storage implementation must implement these methods.
    Month arguments accept a MonthKey or a `YYYY-MM` string;
    malformed strings raise InvalidMonthKeyError.
    """

    @abstractmethod
    async def list_bills(self) -> list[Bill]:
        """
        List all bills in stored order.

        Every returned bill has `is_recurring` set (True when the
        stored record predates the field).
        """
        pass

    @abstractmethod
    async def list_bills_with_status(self, month: MonthLike) -> list[BillWithStatus]:
        """
        List all bills decorated for a month.

        Args:
            month: The month to decorate for

        Returns:
            Bills with due date for that month and the month's paid flag
        """
        pass

    @abstractmethod
    async def get_bill(self, bill_id: str) -> Optional[Bill]:
        """
        Retrieve a bill by its ID.

        Returns:
            The bill if found, None otherwise
        """
        pass

    @abstractmethod
    async def upsert_bill(self, bill: Bill) -> Bill:
        """
        Insert a bill, or merge it into the existing bill with the same ID.

        Merging is a shallow overwrite of the fields explicitly set on
        `bill`; fields left at their defaults keep their stored value.

        Returns:
            The stored bill
        """
        pass

    @abstractmethod
    async def delete_bill(self, bill_id: str) -> bool:
        """
        Delete a bill and its paid status in every month.

        Idempotent: deleting an unknown ID changes nothing.

        Returns:
            True if a bill was removed
        """
        pass

    @abstractmethod
    async def set_paid_status(
        self,
        month: MonthLike,
        bill_id: str,
        is_paid: bool,
    ) -> bool:
        """
        Mark or unmark a bill as paid for a month.

        Idempotent. Unmarking removes the entry rather than storing False.

        Returns:
            The resulting paid flag
        """
        pass

    @abstractmethod
    async def get_paid_bill_ids(self, month: MonthLike) -> set[str]:
        """IDs marked paid in a month."""
        pass

    @abstractmethod
    async def get_monthly_summary(self, month: MonthLike) -> MonthlySummary:
        """
        Decorated bills for a month plus their totals.

        Returns:
            MonthlySummary with total due, recurring/one-time due,
            paid, remaining, paid-recurring and remaining-recurring
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""

    def __init__(self, entity_id: str, entity_type: str = "Bill"):
        self.entity_id = entity_id
        self.entity_type = entity_type
        super().__init__(f"{entity_type} not found")
