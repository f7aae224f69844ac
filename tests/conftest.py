"""
Shared fixtures.

Everything here is in-memory: no Google Sheets, no Cloudinary.
"""

from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.forms import CategoryManagementPanel, TransactionEntryForm
from finance_tracker.models.finance import (
    Account,
    AccountType,
    Category,
    CreditCard,
    TransactionType,
)
from finance_tracker.notifications import CollectingNotifier
from finance_tracker.services.storage import (
    InMemoryAccountStore,
    InMemoryAuditStorage,
    InMemoryCategoryStore,
    InMemoryCreditCardStore,
    InMemoryTransactionStore,
)

TODAY = date(2024, 3, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def categories():
    return [
        Category(id="cat-salary", name="Salário", icon="💰", color="#10B981",
                 transaction_type=TransactionType.INCOME),
        Category(id="cat-food", name="Alimentação", icon="🍽️", color="#EF4444",
                 transaction_type=TransactionType.EXPENSE),
        Category(id="cat-freelance", name="Freelance", icon="💻", color="#3B82F6",
                 transaction_type=TransactionType.INCOME),
        Category(id="cat-transport", name="Transporte", icon="🚗", color="#F97316",
                 transaction_type=TransactionType.EXPENSE),
    ]


@pytest.fixture
def accounts():
    return [
        Account(id="acc-checking", name="Conta Corrente", type=AccountType.CHECKING,
                balance=Decimal("1000"), bank_name="Itaú"),
        Account(id="acc-wallet", name="Carteira", type=AccountType.WALLET),
    ]


@pytest.fixture
def credit_cards():
    return [
        CreditCard(id="card-nubank", name="Roxinho", bank_name="Nubank", closing_day=3, due_day=10),
    ]


@pytest.fixture
def category_store(categories):
    return InMemoryCategoryStore(categories)


@pytest.fixture
def transaction_store():
    return InMemoryTransactionStore()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def transaction_form(category_store, accounts, credit_cards, transaction_store, notifier, audit_storage, today):
    return TransactionEntryForm(
        category_store=category_store,
        account_store=InMemoryAccountStore(accounts),
        credit_card_store=InMemoryCreditCardStore(credit_cards),
        transaction_store=transaction_store,
        notifier=notifier,
        audit_logger=AuditLogger(audit_storage),
        today=lambda: today,
    )


@pytest.fixture
def category_panel(category_store, notifier, audit_storage):
    return CategoryManagementPanel(
        category_store=category_store,
        notifier=notifier,
        audit_logger=AuditLogger(audit_storage),
    )
