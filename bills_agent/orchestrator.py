"""
Main Orchestrator for Bills Agent

This module ties together all the components and defines the
end-to-end flows for:
1. Bill management (validate -> store -> audit)
2. Chat (month summary -> assistant -> reply)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- The assistant only sees the summary the store computed
- Every mutation is audited

The API layer only translates HTTP to these calls and maps the
exceptions raised here to status codes.
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union
from uuid import UUID, uuid4

from bills_agent.agents import AssistantUnavailableError, BillsAssistant
from bills_agent.audit import AuditLogger, create_correlation_id
from bills_agent.models.bill import Bill, BillWithStatus, MonthlySummary
from bills_agent.models.month import MonthKey
from bills_agent.services.storage import (
    BillStorageInterface,
    JsonFileBillStorage,
    NotFoundError,
)
from bills_agent.validation import BillValidator


class ValidationFailedError(Exception):
    """A payload was rejected; `messages` holds one entry per problem."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


def generate_bill_id() -> str:
    """Short random ID for bills created without one."""
    return uuid4().hex[:8]


def _clean_notes(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


class BillManagementFlow:
    """
    Orchestrates bill CRUD and monthly paid status.

    Flow for every mutation:
    1. Validate the payload (reject with per-field messages)
    2. Normalize (trim strings, default notes/isRecurring)
    3. Persist through the store
    4. Audit
    """

    def __init__(
        self,
        bill_storage: BillStorageInterface,
        validator: Optional[BillValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._bill_storage = bill_storage
        self._validator = validator or BillValidator()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def storage(self) -> BillStorageInterface:
        return self._bill_storage

    def _require_valid_month(self, month: Any) -> MonthKey:
        result = self._validator.validate_month(month)
        if not result.is_valid:
            raise ValidationFailedError(result.messages)
        return MonthKey.parse(month)

    def _require_valid_bill(
        self,
        payload: Mapping[str, Any],
        operation: str,
        correlation_id: UUID,
        bill_id: Optional[str] = None,
    ) -> None:
        result = self._validator.validate_bill_payload(payload)
        if not result.is_valid:
            self._audit_logger.log_validation_failed(
                operation=operation,
                messages=result.messages,
                bill_id=bill_id,
                correlation_id=correlation_id,
            )
            raise ValidationFailedError(result.messages)

    async def list_bills(
        self,
        month: Optional[str] = None,
    ) -> Union[list[Bill], list[BillWithStatus]]:
        """
        All bills; decorated with due date and paid flag when a month is given.

        An empty month counts as no month.
        """
        if not month:
            return await self._bill_storage.list_bills()
        key = self._require_valid_month(month)
        return await self._bill_storage.list_bills_with_status(key)

    async def get_bill(self, bill_id: str) -> Bill:
        bill = await self._bill_storage.get_bill(bill_id)
        if bill is None:
            raise NotFoundError(bill_id)
        return bill

    async def create_bill(
        self,
        payload: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Bill:
        """
        Create a bill from a request payload.

        An absent or blank `id` gets a generated one. A payload whose
        `id` already exists replaces that bill.

        Raises:
            ValidationFailedError: If the payload is invalid
        """
        correlation_id = correlation_id or create_correlation_id()
        self._require_valid_bill(payload, "create", correlation_id)

        raw_id = payload.get("id")
        bill_id = raw_id.strip() if isinstance(raw_id, str) else ""
        is_recurring = payload.get("isRecurring")

        bill = Bill(
            id=bill_id or generate_bill_id(),
            name=payload["name"].strip(),
            due_day=int(payload["dueDay"]),
            amount=float(payload["amount"]),
            notes=_clean_notes(payload.get("notes")),
            is_recurring=True if is_recurring is None else is_recurring,
        )

        stored = await self._bill_storage.upsert_bill(bill)
        self._audit_logger.log_bill_saved(
            bill_id=stored.id,
            name=stored.name,
            amount=stored.amount,
            created=True,
            correlation_id=correlation_id,
        )
        return stored

    async def update_bill(
        self,
        bill_id: str,
        payload: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Bill:
        """
        Update an existing bill.

        The payload is laid over the stored bill, so partial updates work.
        The path ID always wins over any `id` in the payload.

        Raises:
            NotFoundError: If the bill doesn't exist (store is untouched)
            ValidationFailedError: If the merged bill is invalid
        """
        correlation_id = correlation_id or create_correlation_id()
        existing = await self.get_bill(bill_id)

        merged = {**existing.model_dump(by_alias=True), **payload, "id": bill_id}
        if merged.get("isRecurring") is None:
            merged["isRecurring"] = existing.is_recurring
        self._require_valid_bill(merged, "update", correlation_id, bill_id)

        bill = Bill(
            id=bill_id,
            name=merged["name"].strip(),
            due_day=int(merged["dueDay"]),
            amount=float(merged["amount"]),
            notes=_clean_notes(merged.get("notes")),
            is_recurring=merged["isRecurring"],
        )

        stored = await self._bill_storage.upsert_bill(bill)
        self._audit_logger.log_bill_saved(
            bill_id=stored.id,
            name=stored.name,
            amount=stored.amount,
            created=False,
            correlation_id=correlation_id,
        )
        return stored

    async def delete_bill(
        self,
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Delete a bill and its paid status in every month.

        Raises:
            NotFoundError: If the bill doesn't exist
        """
        correlation_id = correlation_id or create_correlation_id()
        await self.get_bill(bill_id)
        await self._bill_storage.delete_bill(bill_id)
        self._audit_logger.log_bill_deleted(
            bill_id=bill_id,
            correlation_id=correlation_id,
        )

    async def set_paid_status(
        self,
        bill_id: str,
        payload: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, bool]:
        """
        Mark a bill paid or unpaid for the payload's month.

        Returns:
            (month, is_paid) as stored

        Raises:
            NotFoundError: If the bill doesn't exist
            ValidationFailedError: If `month` is missing or malformed
        """
        correlation_id = correlation_id or create_correlation_id()
        await self.get_bill(bill_id)

        key = self._require_valid_month(payload.get("month"))
        requested = bool(payload.get("isPaid"))
        is_paid = await self._bill_storage.set_paid_status(key, bill_id, requested)

        self._audit_logger.log_payment_status_updated(
            bill_id=bill_id,
            month=str(key),
            is_paid=is_paid,
            correlation_id=correlation_id,
        )
        return str(key), is_paid

    async def monthly_summary(self, month: Optional[str] = None) -> MonthlySummary:
        """Summary for a month; the current month when none (or "") is given."""
        key = MonthKey.current() if not month else self._require_valid_month(month)
        return await self._bill_storage.get_monthly_summary(key)


class ChatFlow:
    """
    Orchestrates the chat flow.

    FLOW:
    1. Resolve the month (current month by default)
    2. Ask the store for that month's summary
    3. Hand bills + totals + question to the assistant

    The assistant never reads the store directly.
    """

    def __init__(
        self,
        bill_storage: BillStorageInterface,
        assistant: Optional[BillsAssistant] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[BillValidator] = None,
    ):
        self._bill_storage = bill_storage
        self._assistant = assistant or BillsAssistant()
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or BillValidator()

    @property
    def is_available(self) -> bool:
        return self._assistant.is_available

    async def answer(
        self,
        payload: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """
        Answer a user's question about a month of bills.

        Raises:
            ValidationFailedError: Missing message or malformed month
            AssistantUnavailableError: The assistant could not answer
        """
        correlation_id = correlation_id or create_correlation_id()

        message = payload.get("message")
        if not isinstance(message, str) or not message.strip():
            raise ValidationFailedError(["'message' is required"])

        month = payload.get("month")
        if isinstance(month, str) and month:
            result = self._validator.validate_month(month)
            if not result.is_valid:
                raise ValidationFailedError(result.messages)
            key = MonthKey.parse(month)
        else:
            key = MonthKey.current()

        summary = await self._bill_storage.get_monthly_summary(key)

        try:
            reply = await self._assistant.ask(
                message=message.strip(),
                month=summary.month,
                bills=summary.bills,
                totals=summary.totals,
            )
        except AssistantUnavailableError as e:
            self._audit_logger.log_chat_failed(
                month=summary.month,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_chat_answered(
            month=summary.month,
            bill_count=len(summary.bills),
            correlation_id=correlation_id,
        )
        return reply


def create_app_components(
    data_file: Optional[Union[str, Path]] = None,
    assistant: Optional[BillsAssistant] = None,
) -> tuple[BillManagementFlow, ChatFlow, JsonFileBillStorage]:
    """
    Factory function to create all application components.

    Args:
        data_file: JSON file to store bills in (default from settings)
        assistant: Pre-built assistant (default: built from settings)

    Returns:
        (bill_flow, chat_flow, bill_storage)
    """
    bill_storage = JsonFileBillStorage(data_file)
    audit_logger = AuditLogger()
    validator = BillValidator()

    bill_flow = BillManagementFlow(
        bill_storage=bill_storage,
        validator=validator,
        audit_logger=audit_logger,
    )
    chat_flow = ChatFlow(
        bill_storage=bill_storage,
        assistant=assistant or BillsAssistant(),
        audit_logger=audit_logger,
        validator=validator,
    )

    return bill_flow, chat_flow, bill_storage
