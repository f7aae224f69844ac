"""
Component Wiring for Finance Tracker

This module builds the stores and hands them to the forms. It is the
only place that knows which backend is in use: the forms only see the
store contracts.

DESIGN DECISION: If Google Sheets is not configured, the app still
starts on in-memory stores seeded with a small demo dataset, so the
forms can be tried without credentials. Nothing entered there survives
a restart.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.catalog import DEFAULT_CATEGORIES
from finance_tracker.config import get_settings
from finance_tracker.forms import CategoryManagementPanel, TransactionEntryForm
from finance_tracker.models.finance import Account, AccountType, Category, CreditCard
from finance_tracker.notifications import CollectingNotifier, Notifier
from finance_tracker.services.receipts import CloudinaryReceiptService, ReceiptUploader
from finance_tracker.services.storage import (
    AccountStore,
    CategoryStore,
    CreditCardStore,
    GoogleSheetsAccountStore,
    GoogleSheetsAuditStorage,
    GoogleSheetsCategoryStore,
    GoogleSheetsClient,
    GoogleSheetsCreditCardStore,
    GoogleSheetsTransactionStore,
    InMemoryAccountStore,
    InMemoryAuditStorage,
    InMemoryCategoryStore,
    InMemoryCreditCardStore,
    InMemoryTransactionStore,
    TransactionStore,
)

logger = structlog.get_logger(__name__)


@dataclass
class Stores:
    categories: CategoryStore
    accounts: AccountStore
    credit_cards: CreditCardStore
    transactions: TransactionStore
    audit_logger: AuditLogger
    backend: str  # "google_sheets" | "memory"


def create_demo_stores() -> Stores:
    """In-memory stores with a couple of accounts, a card and starter categories."""
    starter = [
        Category(
            name=entry.name,
            icon=entry.icon,
            color=entry.color,
            transaction_type=entry.transaction_type,
        )
        for entry in DEFAULT_CATEGORIES
        if entry.name in ("Salário", "Alimentação", "Transporte", "Moradia")
    ]
    return Stores(
        categories=InMemoryCategoryStore(starter),
        accounts=InMemoryAccountStore([
            Account(name="Conta Corrente", type=AccountType.CHECKING, balance=Decimal("2500.00")),
            Account(name="Carteira", type=AccountType.WALLET, balance=Decimal("150.00")),
        ]),
        credit_cards=InMemoryCreditCardStore([
            CreditCard(name="Cartão Principal", bank_name="Nubank", closing_day=3, due_day=10),
        ]),
        transactions=InMemoryTransactionStore(),
        audit_logger=AuditLogger(InMemoryAuditStorage()),
        backend="memory",
    )


def _receipt_uploader() -> Optional[ReceiptUploader]:
    try:
        return CloudinaryReceiptService()
    except Exception as e:
        logger.warning("receipt_storage_not_configured", error=str(e))
        return None


def create_stores(use_storage: bool = True) -> Stores:
    """
    Build the stores for the configured backend.

    Args:
        use_storage: Whether to try Google Sheets.
                    Set to False to always use the in-memory demo stores.
    """
    if not use_storage:
        return create_demo_stores()

    try:
        client = GoogleSheetsClient()
    except Exception as e:
        # Storage not configured - continue without it
        logger.warning("storage_not_configured", error=str(e))
        return create_demo_stores()

    return Stores(
        categories=GoogleSheetsCategoryStore(client),
        accounts=GoogleSheetsAccountStore(client),
        credit_cards=GoogleSheetsCreditCardStore(client),
        transactions=GoogleSheetsTransactionStore(client, _receipt_uploader()),
        audit_logger=AuditLogger(GoogleSheetsAuditStorage(client)),
        backend="google_sheets",
    )


def create_app_components(
    stores: Optional[Stores] = None,
    notifier: Optional[Notifier] = None,
) -> tuple[TransactionEntryForm, CategoryManagementPanel, Notifier]:
    """
    Factory function to create the forms over one set of stores.

    Returns:
        (transaction_form, category_panel, notifier)
    """
    stores = stores or create_stores()
    notifier = notifier or CollectingNotifier()
    app_settings = get_settings().app

    transaction_form = TransactionEntryForm(
        category_store=stores.categories,
        account_store=stores.accounts,
        credit_card_store=stores.credit_cards,
        transaction_store=stores.transactions,
        notifier=notifier,
        audit_logger=stores.audit_logger,
    )
    category_panel = CategoryManagementPanel(
        category_store=stores.categories,
        notifier=notifier,
        audit_logger=stores.audit_logger,
        max_suggestions=app_settings.max_category_suggestions,
        default_icon=app_settings.default_category_icon,
        default_color=app_settings.default_category_color,
    )
    return transaction_form, category_panel, notifier
