"""
Audit Models for Bills Agent

Every mutation of the bill store and every assistant call is logged.
This provides:
1. Traceability of who changed what, and when
2. Debugging information when the assistant fails

DESIGN DECISION: Audit events are append-only structured log records.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Bill lifecycle
    BILL_CREATED = "bill_created"
    BILL_UPDATED = "bill_updated"
    BILL_DELETED = "bill_deleted"

    # Month-scoped status
    PAYMENT_STATUS_UPDATED = "payment_status_updated"

    # Request validation
    VALIDATION_FAILED = "validation_failed"

    # Assistant
    CHAT_ANSWERED = "chat_answered"
    CHAT_FAILED = "chat_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'bill', 'month', 'chat')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events from one request"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.bill_saved(bill_id="a1b2", name="Rent", ...)
    """

    @staticmethod
    def bill_saved(
        bill_id: str,
        name: str,
        amount: float,
        created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        verb = "created" if created else "updated"
        return AuditEvent(
            event_type=(
                AuditEventType.BILL_CREATED if created
                else AuditEventType.BILL_UPDATED
            ),
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Bill '{name}' {verb}",
            details={"name": name, "amount": amount},
        )

    @staticmethod
    def bill_deleted(
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_DELETED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description="Bill deleted along with its paid status",
        )

    @staticmethod
    def payment_status_updated(
        bill_id: str,
        month: str,
        is_paid: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_STATUS_UPDATED,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Bill marked {'paid' if is_paid else 'unpaid'} for {month}",
            details={"month": month, "is_paid": is_paid},
        )

    @staticmethod
    def validation_failed(
        operation: str,
        messages: list[str],
        bill_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="bill",
            entity_id=bill_id,
            correlation_id=correlation_id,
            description=f"Rejected {operation} payload",
            details={"operation": operation, "errors": messages},
        )

    @staticmethod
    def chat_answered(
        month: str,
        bill_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_ANSWERED,
            entity_type="chat",
            entity_id=month,
            correlation_id=correlation_id,
            description="Assistant answered a question",
            details={"month": month, "bill_count": bill_count},
        )

    @staticmethod
    def chat_failed(
        month: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHAT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="chat",
            entity_id=month,
            correlation_id=correlation_id,
            description="Assistant call failed",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
