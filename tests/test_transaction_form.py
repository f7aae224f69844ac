"""
Tests for the transaction entry workflow.

The form runs end to end against in-memory stores: read model,
editing, validation, submission, notifications and audit trail.
"""

import asyncio
from decimal import Decimal

import pytest

from finance_tracker.errors import (
    CategoryMismatchError,
    InvalidAmountError,
    MissingFieldError,
    SubmissionError,
    SubmissionInProgressError,
)
from finance_tracker.forms import TransactionEntryForm
from finance_tracker.models.audit import AuditEventType
from finance_tracker.models.finance import (
    FormState,
    TransactionStatus,
    TransactionType,
)
from finance_tracker.services.storage import (
    InMemoryAccountStore,
    InMemoryCategoryStore,
    InMemoryCreditCardStore,
    InMemoryTransactionStore,
    StorageError,
)


def _fill(form: TransactionEntryForm, **overrides) -> None:
    fields = dict(
        amount="10,50",
        description="Almoço",
        account_id="acc-checking",
        category_id="cat-food",
    )
    fields.update(overrides)
    form.update(**fields)


def _levels(notifier):
    return [n.level for n in notifier.pending]


class TestReadModel:

    def test_refresh_loads_options(self, transaction_form):
        asyncio.run(transaction_form.refresh())

        assert [t.id for t in transaction_form.funding_targets()] == [
            "acc-checking", "acc-wallet", "card-nubank",
        ]
        assert [c.id for c in transaction_form.category_options()] == ["cat-food", "cat-transport"]
        assert transaction_form.categories_loading is False

    def test_category_options_follow_direction(self, transaction_form):
        asyncio.run(transaction_form.refresh())
        transaction_form.set_direction(TransactionType.INCOME)

        assert [c.id for c in transaction_form.category_options()] == ["cat-salary", "cat-freelance"]
        assert transaction_form.submit_label == "Adicionar Receita"

    def test_loading_flag_passes_through(self, notifier):
        form = TransactionEntryForm(
            category_store=InMemoryCategoryStore(loading=True),
            account_store=InMemoryAccountStore(),
            credit_card_store=InMemoryCreditCardStore(),
            transaction_store=InMemoryTransactionStore(),
            notifier=notifier,
        )
        asyncio.run(form.refresh())

        assert form.categories_loading is True
        assert form.category_options() == []
        assert form.funding_targets() == []

    def test_failed_refresh_keeps_previous_lists(self, categories, accounts, notifier):
        """A store error on re-read leaves categories and loading flag as they were."""
        class FlakyAccountStore(InMemoryAccountStore):
            fail = False

            async def read(self):
                if self.fail:
                    raise StorageError("sheet unavailable")
                return await super().read()

        category_store = InMemoryCategoryStore(categories)
        account_store = FlakyAccountStore(accounts)
        form = TransactionEntryForm(
            category_store=category_store,
            account_store=account_store,
            credit_card_store=InMemoryCreditCardStore(),
            transaction_store=InMemoryTransactionStore(),
            notifier=notifier,
        )
        asyncio.run(form.refresh())

        category_store.loading = True
        category_store._categories = []
        account_store.fail = True
        with pytest.raises(StorageError):
            asyncio.run(form.refresh())

        assert form.categories_loading is False
        assert [c.id for c in form.category_options()] == ["cat-food", "cat-transport"]
        assert [t.id for t in form.funding_targets()] == ["acc-checking", "acc-wallet"]

    def test_initial_state(self, transaction_form, today):
        assert transaction_form.direction == TransactionType.EXPENSE
        assert transaction_form.draft.date == today.isoformat()
        assert transaction_form.state == FormState.EDITING
        assert transaction_form.is_submitting is False
        assert transaction_form.submit_label == "Adicionar Despesa"


class TestEditing:

    def test_switching_direction_clears_mismatched_category(self, transaction_form):
        asyncio.run(transaction_form.refresh())
        transaction_form.update(category_id="cat-food")

        transaction_form.set_direction(TransactionType.INCOME)

        assert transaction_form.draft.category_id == ""

    def test_same_direction_keeps_category(self, transaction_form):
        asyncio.run(transaction_form.refresh())
        transaction_form.update(category_id="cat-food")

        transaction_form.set_direction(TransactionType.EXPENSE)

        assert transaction_form.draft.category_id == "cat-food"

    def test_update_rejects_unknown_fields(self, transaction_form):
        with pytest.raises(ValueError):
            transaction_form.update(type=TransactionType.INCOME)
        with pytest.raises(ValueError):
            transaction_form.update(status=TransactionStatus.PENDING)

    def test_attach_and_clear_receipt(self, transaction_form):
        receipt = transaction_form.attach_receipt("nota.pdf", b"%PDF-1.4", "application/pdf")

        assert transaction_form.draft.receipt == receipt
        transaction_form.clear_receipt()
        assert transaction_form.draft.receipt is None


class TestSubmission:

    def test_successful_submit(self, transaction_form, transaction_store, notifier, today):
        """Exactly one create call, completed, with the parsed amount."""
        asyncio.run(transaction_form.refresh())
        _fill(transaction_form)

        transaction = asyncio.run(transaction_form.submit())

        assert len(transaction_store.transactions) == 1
        stored = transaction_store.transactions[0]
        assert stored == transaction
        assert stored.amount == Decimal("10.50")
        assert stored.status == TransactionStatus.COMPLETED
        assert stored.type == TransactionType.EXPENSE
        assert stored.date == today
        assert [(n.level, n.message) for n in notifier.pending] == [
            ("success", "Despesa adicionada com sucesso!"),
        ]
        assert transaction_form.last_outcome == FormState.SUCCESS
        assert transaction_form.state == FormState.EDITING

    def test_success_resets_everything_but_direction(self, transaction_form, notifier, today):
        asyncio.run(transaction_form.refresh())
        transaction_form.set_direction(TransactionType.INCOME)
        _fill(
            transaction_form,
            category_id="cat-salary",
            date="2024-03-01",
            notes="Março",
            tags=["trabalho"],
        )
        transaction_form.attach_receipt("holerite.pdf", b"%PDF-1.4")

        asyncio.run(transaction_form.submit())

        draft = transaction_form.draft
        assert draft.type == TransactionType.INCOME
        assert draft.amount == ""
        assert draft.description == ""
        assert draft.account_id == ""
        assert draft.category_id == ""
        assert draft.notes == ""
        assert draft.tags == []
        assert draft.receipt is None
        assert draft.date == today.isoformat()
        assert notifier.pending[0].message == "Receita adicionada com sucesso!"

    def test_empty_category_never_reaches_store(self, transaction_form, transaction_store, notifier):
        asyncio.run(transaction_form.refresh())
        _fill(transaction_form, category_id="")

        result = asyncio.run(transaction_form.submit())

        assert result is None
        assert transaction_store.transactions == []
        assert _levels(notifier) == ["error"]
        assert notifier.pending[0].message == "Por favor, preencha todos os campos obrigatórios"
        assert isinstance(transaction_form.last_error, MissingFieldError)

    def test_empty_amount_reported_as_missing(self, transaction_form, notifier):
        _fill(transaction_form, amount="")

        asyncio.run(transaction_form.submit())

        assert isinstance(transaction_form.last_error, MissingFieldError)
        assert _levels(notifier) == ["error"]

    def test_invalid_amount_keeps_draft(self, transaction_form, transaction_store, notifier):
        _fill(transaction_form, amount="abc")

        asyncio.run(transaction_form.submit())

        assert transaction_store.transactions == []
        assert isinstance(transaction_form.last_error, InvalidAmountError)
        assert notifier.pending[0].message == "Valor deve ser um número positivo"
        assert transaction_form.draft.amount == "abc"
        assert transaction_form.draft.description == "Almoço"

    def test_category_of_other_direction_rejected(self, transaction_form, transaction_store):
        asyncio.run(transaction_form.refresh())
        _fill(transaction_form, category_id="cat-salary")

        asyncio.run(transaction_form.submit())

        assert transaction_store.transactions == []
        assert isinstance(transaction_form.last_error, CategoryMismatchError)

    def test_store_failure_keeps_draft_for_retry(self, transaction_form, transaction_store, notifier):
        asyncio.run(transaction_form.refresh())
        _fill(transaction_form)
        transaction_store.fail_with = StorageError("violates foreign key constraint")

        assert asyncio.run(transaction_form.submit()) is None

        assert [(n.level, n.message) for n in notifier.pending] == [
            ("error", "violates foreign key constraint"),
        ]
        assert isinstance(transaction_form.last_error, SubmissionError)
        assert transaction_form.last_outcome == FormState.FAILURE
        assert transaction_form.state == FormState.EDITING
        assert transaction_form.draft.amount == "10,50"
        assert transaction_form.draft.category_id == "cat-food"

        # Manual retry
        transaction_store.fail_with = None
        notifier.drain()
        asyncio.run(transaction_form.submit())

        assert len(transaction_store.transactions) == 1
        assert _levels(notifier) == ["success"]

    def test_store_failure_without_message(self, transaction_form, transaction_store, notifier):
        _fill(transaction_form)
        transaction_store.fail_with = RuntimeError()

        asyncio.run(transaction_form.submit())

        assert notifier.pending[0].message == "Erro ao adicionar transação"

    def test_receipt_is_passed_to_store(self, transaction_form, transaction_store):
        _fill(transaction_form)
        transaction_form.attach_receipt("cupom.png", b"\x89PNG", "image/png")

        transaction = asyncio.run(transaction_form.submit())

        assert transaction.receipt_url == f"memory://receipts/{transaction.id}/cupom.png"
        assert transaction_store.receipts[transaction.id].filename == "cupom.png"

    def test_submit_while_in_flight_is_refused(self, transaction_form, notifier):
        class SlowStore(InMemoryTransactionStore):
            def __init__(self):
                super().__init__()
                self.entered = asyncio.Event()
                self.release = asyncio.Event()

            async def create(self, transaction, receipt=None):
                self.entered.set()
                await self.release.wait()
                return await super().create(transaction, receipt)

        async def scenario():
            store = SlowStore()
            transaction_form._transaction_store = store
            _fill(transaction_form)

            first = asyncio.create_task(transaction_form.submit())
            await store.entered.wait()

            assert transaction_form.is_submitting is True
            assert transaction_form.submit_label == "Adicionando..."
            with pytest.raises(SubmissionInProgressError):
                await transaction_form.submit()

            store.release.set()
            await first
            return store

        store = asyncio.run(scenario())

        assert len(store.transactions) == 1
        assert _levels(notifier) == ["success"]
        assert transaction_form.is_submitting is False


class TestSubmissionAudit:

    def test_success_trail_shares_correlation_id(self, transaction_form, audit_storage):
        _fill(transaction_form)
        transaction_form.attach_receipt("nota.pdf", b"%PDF-1.4")

        transaction = asyncio.run(transaction_form.submit())

        types = [e.event_type for e in audit_storage.events]
        assert types == [
            AuditEventType.TRANSACTION_SUBMITTED,
            AuditEventType.TRANSACTION_SAVED,
            AuditEventType.RECEIPT_UPLOADED,
        ]
        submitted, saved, _ = audit_storage.events
        assert submitted.correlation_id == saved.correlation_id
        assert saved.entity_id == transaction.id

    def test_rejection_is_audited(self, transaction_form, audit_storage):
        _fill(transaction_form, account_id="")

        asyncio.run(transaction_form.submit())

        assert len(audit_storage.events) == 1
        event = audit_storage.events[0]
        assert event.event_type == AuditEventType.TRANSACTION_VALIDATION_REJECTED
        assert event.details["fields"] == ["account_id"]

    def test_store_failure_is_audited(self, transaction_form, transaction_store, audit_storage):
        _fill(transaction_form)
        transaction_store.fail_with = StorageError("network down")

        asyncio.run(transaction_form.submit())

        assert [e.event_type for e in audit_storage.events] == [
            AuditEventType.TRANSACTION_SUBMITTED,
            AuditEventType.TRANSACTION_SAVE_FAILED,
        ]
        assert audit_storage.events[1].error_message == "network down"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
