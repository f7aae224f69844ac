"""
Storage Services Package

Provides the store contracts the forms depend on, an in-memory
implementation, and a Google Sheets backed implementation.
"""

from finance_tracker.services.storage.interface import (
    AccountStore,
    AuditStorageInterface,
    CategoryStore,
    ConnectionError,
    CreditCardStore,
    DuplicateError,
    StorageError,
    TransactionStore,
)
from finance_tracker.services.storage.memory import (
    InMemoryAccountStore,
    InMemoryAuditStorage,
    InMemoryCategoryStore,
    InMemoryCreditCardStore,
    InMemoryTransactionStore,
)
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsAccountStore,
    GoogleSheetsAuditStorage,
    GoogleSheetsCategoryStore,
    GoogleSheetsClient,
    GoogleSheetsCreditCardStore,
    GoogleSheetsTransactionStore,
)

__all__ = [
    # Interfaces
    "AccountStore",
    "AuditStorageInterface",
    "CategoryStore",
    "CreditCardStore",
    "TransactionStore",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "StorageError",
    # In-memory implementation
    "InMemoryAccountStore",
    "InMemoryAuditStorage",
    "InMemoryCategoryStore",
    "InMemoryCreditCardStore",
    "InMemoryTransactionStore",
    # Google Sheets implementation
    "GoogleSheetsAccountStore",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsCategoryStore",
    "GoogleSheetsClient",
    "GoogleSheetsCreditCardStore",
    "GoogleSheetsTransactionStore",
]
