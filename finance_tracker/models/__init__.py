"""
Data Models Package

This package contains all Pydantic models used by Finance Tracker.
All data flowing between stores, forms and the UI conforms to these schemas.
"""

from finance_tracker.models.finance import (
    DIRECTIONS,
    Account,
    AccountType,
    Category,
    CategoryDraft,
    CreditCard,
    DefaultCategory,
    FormState,
    FundingKind,
    FundingTarget,
    NewTransaction,
    ReceiptFile,
    RecurrenceFrequency,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "DIRECTIONS",
    "Account",
    "AccountType",
    "Category",
    "CategoryDraft",
    "CreditCard",
    "DefaultCategory",
    "FormState",
    "FundingKind",
    "FundingTarget",
    "NewTransaction",
    "ReceiptFile",
    "RecurrenceFrequency",
    "Transaction",
    "TransactionDraft",
    "TransactionStatus",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
