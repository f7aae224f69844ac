"""
Audit Models for Finance Tracker

Every submit attempt and every store mutation is recorded.
This provides:
1. Traceability from a form click to the stored record
2. Debugging information when the backend rejects something
3. A history the user can inspect

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transaction entry
    TRANSACTION_SUBMITTED = "transaction_submitted"
    TRANSACTION_VALIDATION_REJECTED = "transaction_validation_rejected"
    TRANSACTION_SAVED = "transaction_saved"
    TRANSACTION_SAVE_FAILED = "transaction_save_failed"
    RECEIPT_UPLOADED = "receipt_uploaded"

    # Category management
    CATEGORY_CREATED = "category_created"
    CATEGORY_CREATION_FAILED = "category_creation_failed"
    CATEGORY_SUGGESTION_CHOSEN = "category_suggestion_chosen"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'category', 'receipt')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - all events of one submit attempt share this
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
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
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_saved(transaction_id, "expense", "10.50", cid)
    """

    @staticmethod
    def transaction_submitted(
        direction: str,
        account_id: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SUBMITTED,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"User submitted a new {direction} transaction",
            details={
                "direction": direction,
                "account_id": account_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_validation_rejected(
        error_type: str,
        message: str,
        fields: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_VALIDATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction draft rejected: {error_type}",
            details={
                "error_type": error_type,
                "fields": fields,
            },
            error_message=message,
        )

    @staticmethod
    def transaction_saved(
        transaction_id: str,
        direction: str,
        amount: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction saved: {direction} {amount}",
            details={
                "direction": direction,
                "amount": amount,
            },
        )

    @staticmethod
    def transaction_save_failed(
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="transaction",
            correlation_id=correlation_id,
            description="Transaction store rejected the submission",
            error_message=error_message,
        )

    @staticmethod
    def receipt_uploaded(
        transaction_id: str,
        filename: str,
        size: int,
        url: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_UPLOADED,
            entity_type="receipt",
            entity_id=transaction_id,
            description=f"Receipt uploaded: {filename}",
            details={
                "filename": filename,
                "size_bytes": size,
                "url": url,
            },
        )

    @staticmethod
    def category_created(
        category_id: str,
        name: str,
        direction: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_CREATED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category created: {name}",
            details={
                "name": name,
                "direction": direction,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_creation_failed(
        name: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_CREATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="category",
            description=f"Category could not be created: {name}",
            details={"name": name},
            error_message=error_message,
        )

    @staticmethod
    def category_suggestion_chosen(name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_SUGGESTION_CHOSEN,
            entity_type="category",
            description=f"User picked suggested category: {name}",
            details={"name": name},
            is_user_action=True,
        )
