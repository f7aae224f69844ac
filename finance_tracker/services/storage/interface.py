"""
Abstract Store Interfaces

DESIGN DECISION: Forms never reach for a global store. Each store is an
explicit collaborator passed in at construction. This allows us to:
1. Swap Google Sheets for a managed database later
2. Use in-memory stores for testing
3. Test filtering, validation and submission without a UI or a backend

Categories, accounts and credit cards are read-only from the forms'
point of view. The only writes are creating a transaction and
creating a category.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_tracker.models.audit import AuditEvent
from finance_tracker.models.finance import (
    Account,
    Category,
    CategoryDraft,
    CreditCard,
    NewTransaction,
    ReceiptFile,
    Transaction,
)


class CategoryStore(ABC):
    """The user's categories."""

    @abstractmethod
    async def read(self) -> tuple[list[Category], bool]:
        """
        Current categories and whether they are still loading.

        Returns:
            (categories, loading)
        """
        pass

    @abstractmethod
    async def create(self, draft: CategoryDraft) -> Category:
        """
        Persist a new category.

        Raises:
            StorageError: If the backend rejects it
        """
        pass


class AccountStore(ABC):
    """The user's accounts (credit cards excluded)."""

    @abstractmethod
    async def read(self) -> list[Account]:
        pass


class CreditCardStore(ABC):
    """The user's credit cards."""

    @abstractmethod
    async def read(self) -> list[CreditCard]:
        pass


class TransactionStore(ABC):
    """Persists transactions."""

    @abstractmethod
    async def create(
        self,
        transaction: NewTransaction,
        receipt: Optional[ReceiptFile] = None,
    ) -> Transaction:
        """
        Persist a validated transaction, optionally with a receipt.

        Args:
            transaction: Payload built by the validator
            receipt: File to attach, if any

        Returns:
            The stored transaction with id and timestamps

        Raises:
            StorageError: Any backend rejection (network, auth, constraint).
                          The message is meant to be shown to the user.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event. Returns True if logged successfully."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """The most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
