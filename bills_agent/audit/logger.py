"""
Audit Logger

DESIGN DECISION: Every store mutation and every assistant call is logged.
This provides:
1. Traceability of changes to the household's bills
2. Debugging capability when the assistant misbehaves

The audit logger:
- Writes structured JSON through structlog
- Never raises into the request that is being audited
- Supports correlation IDs to trace the events of one request
"""

import logging
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

import structlog

from bills_agent.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stderr.

    structlog renders the JSON line itself, so the stdlib format is just
    the message.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log only; the bills file is not
    an audit trail.
    """

    def __init__(self, logger_name: str = "bills_agent.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log call itself failed.
        """
        try:
            log_dict = event.to_log_dict()
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Auditing must not break the request being audited
            logging.getLogger(__name__).error(
                "audit logging failed for %s: %s", event.event_id, e
            )
            return False
        return True

    def _record(self, build: Callable[..., AuditEvent], **fields: Any) -> bool:
        """Build an event from `fields` and log it; a failed build is logged, not raised."""
        try:
            event = build(**fields)
        except Exception as e:
            logging.getLogger(__name__).error(
                "audit event %s could not be built: %s", build.__name__, e
            )
            return False
        return self.log(event)

    def log_bill_saved(
        self,
        bill_id: str,
        name: str,
        amount: float,
        created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log bill creation or update."""
        self._record(
            AuditEventBuilder.bill_saved,
            bill_id=bill_id,
            name=name,
            amount=amount,
            created=created,
            correlation_id=correlation_id,
        )

    def log_bill_deleted(
        self,
        bill_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(
            AuditEventBuilder.bill_deleted,
            bill_id=bill_id,
            correlation_id=correlation_id,
        )

    def log_payment_status_updated(
        self,
        bill_id: str,
        month: str,
        is_paid: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(
            AuditEventBuilder.payment_status_updated,
            bill_id=bill_id,
            month=month,
            is_paid=is_paid,
            correlation_id=correlation_id,
        )

    def log_validation_failed(
        self,
        operation: str,
        messages: list[str],
        bill_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected payload."""
        self._record(
            AuditEventBuilder.validation_failed,
            operation=operation,
            messages=messages,
            bill_id=bill_id,
            correlation_id=correlation_id,
        )

    def log_chat_answered(
        self,
        month: str,
        bill_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(
            AuditEventBuilder.chat_answered,
            month=month,
            bill_count=bill_count,
            correlation_id=correlation_id,
        )

    def log_chat_failed(
        self,
        month: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an assistant failure."""
        self._record(
            AuditEventBuilder.chat_failed,
            month=month,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self._record(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a request and pass it through all
    subsequent operations.
    """
    return uuid4()
