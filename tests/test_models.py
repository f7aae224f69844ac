"""
Tests for Finance Tracker

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (with in-memory stores)
3. No real API calls in tests
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from finance_tracker.models.finance import (
    AccountType,
    Category,
    CategoryDraft,
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


class TestFinanceModels:
    """Tests for finance Pydantic models."""

    def test_category_creation(self):
        """Test Category model creation with defaults."""
        category = Category(name="Pets", transaction_type=TransactionType.EXPENSE)
        assert category.name == "Pets"
        assert category.icon == "📋"
        assert category.color == "#6B7280"
        assert category.is_active is True
        assert category.id

    def test_category_strips_whitespace(self):
        """Test that whitespace is stripped from category name."""
        category = Category(name="  Pets  ", transaction_type=TransactionType.EXPENSE)
        assert category.name == "Pets"

    def test_category_rejects_transfer_direction(self):
        """Categories are either income or expense."""
        with pytest.raises(ValueError):
            Category(name="Movimentação", transaction_type=TransactionType.TRANSFER)

    def test_category_rejects_bad_color(self):
        with pytest.raises(ValueError):
            Category(name="Pets", color="purple", transaction_type=TransactionType.EXPENSE)

    def test_category_is_frozen(self):
        category = Category(name="Pets", transaction_type=TransactionType.EXPENSE)
        with pytest.raises(ValidationError):
            category.transaction_type = TransactionType.INCOME

    def test_funding_target_labels(self):
        """Test labels shown in the account/card selector."""
        account = FundingTarget(
            id="a", name="Conta Corrente", kind=FundingKind.ACCOUNT,
            display_icon="🏦", account_type=AccountType.CHECKING,
        )
        card = FundingTarget(
            id="c", name="Roxinho", kind=FundingKind.CREDIT_CARD,
            display_icon="💳", account_type=AccountType.CREDIT_CARD, bank_name="Nubank",
        )
        assert account.label == "Conta Corrente (Conta)"
        assert card.label == "Roxinho (Cartão - Nubank)"

    def test_receipt_file_properties(self):
        receipt = ReceiptFile(filename="Nota.PDF", content=b"%PDF-1.4")
        assert receipt.size == 8
        assert receipt.extension == "pdf"
        assert ReceiptFile(filename="noext", content=b"x").extension == ""

    def test_transaction_draft_defaults(self):
        """A fresh draft is an empty expense dated today."""
        draft = TransactionDraft()
        assert draft.type == TransactionType.EXPENSE
        assert draft.amount == ""
        assert draft.category_id == ""
        assert draft.status == TransactionStatus.COMPLETED
        assert draft.date == date.today().isoformat()

    def test_transaction_draft_validates_assignment(self):
        draft = TransactionDraft()
        with pytest.raises(ValidationError):
            draft.type = TransactionType.TRANSFER

    def test_category_draft_defaults(self):
        draft = CategoryDraft()
        assert draft.transaction_type == TransactionType.EXPENSE
        assert draft.icon == "📋"
        assert draft.color == "#6B7280"

    def test_new_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in (Decimal("0"), Decimal("-1")):
            with pytest.raises(ValueError):
                NewTransaction(
                    type=TransactionType.EXPENSE,
                    amount=amount,
                    description="Almoço",
                    account_id="a",
                    category_id="c",
                    date=date(2024, 3, 15),
                )

    def test_new_transaction_recurrence_validation(self):
        """Recurring transactions need a frequency and a sane end date."""
        base = dict(
            type=TransactionType.EXPENSE,
            amount=Decimal("50"),
            description="Academia",
            account_id="a",
            category_id="c",
            date=date(2024, 3, 15),
        )
        with pytest.raises(ValueError):
            NewTransaction(**base, is_recurring=True)

        with pytest.raises(ValueError):
            NewTransaction(
                **base,
                is_recurring=True,
                recurrence_frequency=RecurrenceFrequency.MONTHLY,
                recurrence_end_date=date(2024, 1, 1),
            )

        ok = NewTransaction(
            **base,
            is_recurring=True,
            recurrence_frequency=RecurrenceFrequency.MONTHLY,
            recurrence_end_date=date(2024, 12, 31),
        )
        assert ok.recurrence_frequency == RecurrenceFrequency.MONTHLY

    def test_transaction_gets_id_and_timestamps(self):
        transaction = Transaction(
            type=TransactionType.INCOME,
            amount=Decimal("3000"),
            description="Salário março",
            account_id="a",
            category_id="c",
            date=date(2024, 3, 5),
        )
        assert transaction.id
        assert transaction.receipt_url is None
        assert transaction.created_at <= transaction.updated_at
        assert transaction.created_at.tzinfo is not None


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_SUBMITTED,
            description="Test transaction submitted",
        )
        assert event.event_type == AuditEventType.TRANSACTION_SUBMITTED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.utcoffset() == timedelta(0)

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            description="Transaction saved",
            details={"direction": "expense", "amount": "10.50"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_saved"
        assert log_dict["details"]["amount"] == "10.50"

    def test_audit_event_to_sheets_row(self):
        """Test conversion to sheets row."""
        event = AuditEvent(
            event_type=AuditEventType.CATEGORY_CREATED,
            description="Category created",
            is_user_action=True,
        )
        row = event.to_sheets_row()
        assert len(row) == 11  # Expected number of columns
        assert row[2] == "category_created"  # event_type
        assert row[8] == ""  # no details
        assert row[10] == "True"  # is_user_action

    def test_audit_event_builder_transaction_saved(self):
        """Test AuditEventBuilder.transaction_saved."""
        correlation_id = uuid4()

        event = AuditEventBuilder.transaction_saved(
            transaction_id="tx-1",
            direction="income",
            amount="3000",
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.TRANSACTION_SAVED
        assert event.entity_id == "tx-1"
        assert event.correlation_id == correlation_id
        assert event.details["direction"] == "income"

    def test_audit_event_builder_validation_rejected(self):
        """Rejected drafts are warnings, not errors."""
        event = AuditEventBuilder.transaction_validation_rejected(
            error_type="MissingFieldError",
            message="Por favor, preencha todos os campos obrigatórios",
            fields=["category_id"],
            correlation_id=uuid4(),
        )

        assert event.severity == AuditSeverity.WARNING
        assert event.details["fields"] == ["category_id"]
        assert event.error_message

    def test_audit_event_builder_category_created(self):
        event = AuditEventBuilder.category_created(
            category_id="cat-1",
            name="Pets",
            direction="expense",
        )
        assert event.entity_type == "category"
        assert event.is_user_action is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
