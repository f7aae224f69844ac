"""
Audit Logger

DESIGN DECISION: Every submit attempt and every store mutation is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. User can see history of their interactions

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace all events of one submit attempt
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.config import get_settings
from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.services.storage import AuditStorageInterface


def configure_logging(level: Optional[str] = None) -> None:
    """Route structlog through stdlib logging, rendering JSON lines."""
    level = (level or get_settings().app.log_level).upper()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

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
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("finance_tracker.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Audit persistence must never break a user flow
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_transaction_submitted(
        self,
        direction: str,
        account_id: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_submitted(
            direction=direction,
            account_id=account_id,
            correlation_id=correlation_id,
        ))

    async def log_validation_rejected(
        self,
        error_type: str,
        message: str,
        fields: list[str],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_validation_rejected(
            error_type=error_type,
            message=message,
            fields=fields,
            correlation_id=correlation_id,
        ))

    async def log_transaction_saved(
        self,
        transaction_id: str,
        direction: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            direction=direction,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_transaction_save_failed(
        self,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_save_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_receipt_uploaded(
        self,
        transaction_id: str,
        filename: str,
        size: int,
        url: str,
    ) -> None:
        await self.log(AuditEventBuilder.receipt_uploaded(
            transaction_id=transaction_id,
            filename=filename,
            size=size,
            url=url,
        ))

    async def log_category_created(
        self,
        category_id: str,
        name: str,
        direction: str,
    ) -> None:
        await self.log(AuditEventBuilder.category_created(
            category_id=category_id,
            name=name,
            direction=direction,
        ))

    async def log_category_creation_failed(
        self,
        name: str,
        error_message: str,
    ) -> None:
        await self.log(AuditEventBuilder.category_creation_failed(
            name=name,
            error_message=error_message,
        ))

    async def log_suggestion_chosen(self, name: str) -> None:
        await self.log(AuditEventBuilder.category_suggestion_chosen(name))

    async def recent_events(self, limit: int = 20) -> list[AuditEvent]:
        """Newest persisted events, for the history view. Empty without storage."""
        if not self._storage:
            return []
        return await self._storage.get_recent_events(limit=limit)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a submit attempt and pass it through
    every event that attempt produces.
    """
    return uuid4()
