"""
In-Memory Store Implementations

Used by the test suite and by the app when no backend is configured.
Behaves like the real stores: inactive rows are hidden, ids and
timestamps are assigned on create, failures surface as StorageError.
"""

from typing import Iterable, Optional

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
from finance_tracker.services.receipts import ReceiptUploader
from finance_tracker.services.storage.interface import (
    AccountStore,
    AuditStorageInterface,
    CategoryStore,
    CreditCardStore,
    DuplicateError,
    StorageError,
    TransactionStore,
)


class InMemoryCategoryStore(CategoryStore):

    def __init__(self, categories: Iterable[Category] = (), loading: bool = False):
        self._categories = list(categories)
        self.loading = loading

    async def read(self) -> tuple[list[Category], bool]:
        return [c for c in self._categories if c.is_active], self.loading

    async def create(self, draft: CategoryDraft) -> Category:
        if any(c.name.casefold() == draft.name.casefold() for c in self._categories if c.is_active):
            raise DuplicateError(f"Category already exists: {draft.name}")

        category = Category(
            name=draft.name,
            icon=draft.icon,
            color=draft.color,
            transaction_type=draft.transaction_type,
            parent_id=draft.parent_id,
        )
        self._categories.append(category)
        return category


class InMemoryAccountStore(AccountStore):

    def __init__(self, accounts: Iterable[Account] = ()):
        self._accounts = list(accounts)

    async def read(self) -> list[Account]:
        return [a for a in self._accounts if a.is_active]


class InMemoryCreditCardStore(CreditCardStore):

    def __init__(self, credit_cards: Iterable[CreditCard] = ()):
        self._credit_cards = list(credit_cards)

    async def read(self) -> list[CreditCard]:
        return list(self._credit_cards)


class InMemoryTransactionStore(TransactionStore):
    """
    Keeps created transactions in a list.

    Set `fail_with` to make the next create calls raise, which is how
    tests simulate a backend rejection.
    """

    def __init__(self, receipt_uploader: Optional[ReceiptUploader] = None):
        self._receipt_uploader = receipt_uploader
        self.transactions: list[Transaction] = []
        self.receipts: dict[str, ReceiptFile] = {}
        self.fail_with: Optional[Exception] = None

    async def create(
        self,
        transaction: NewTransaction,
        receipt: Optional[ReceiptFile] = None,
    ) -> Transaction:
        if self.fail_with is not None:
            raise self.fail_with

        stored = Transaction(**transaction.model_dump())
        if receipt is not None:
            if self._receipt_uploader is not None:
                try:
                    url = await self._receipt_uploader.upload(receipt, stored.id)
                except Exception as e:
                    raise StorageError(f"Failed to upload receipt: {e}")
            else:
                url = f"memory://receipts/{stored.id}/{receipt.filename}"
            stored = stored.model_copy(update={"receipt_url": url})
            self.receipts[stored.id] = receipt

        self.transactions.append(stored)
        return stored


class InMemoryAuditStorage(AuditStorageInterface):

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return sorted(self.events, key=lambda e: e.timestamp, reverse=True)[:limit]
