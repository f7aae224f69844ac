"""
Transaction Entry Form

Holds the draft the user is editing, derives the category and funding
options from the injected stores, and drives one submission at a time:

    EDITING -> VALIDATING -> SUBMITTING -> SUCCESS | FAILURE -> EDITING

SUCCESS clears the draft (the direction toggle is kept). FAILURE keeps
it so the user can fix it and click submit again. Every attempt ends in
exactly one notification, and only a draft that passed validation ever
reaches the transaction store.
"""

from datetime import date
from typing import Callable, Optional

from finance_tracker.audit import AuditLogger, create_correlation_id
from finance_tracker.errors import (
    FormError,
    MissingFieldError,
    SubmissionError,
    SubmissionInProgressError,
)
from finance_tracker.models.finance import (
    Account,
    Category,
    CreditCard,
    FormState,
    FundingTarget,
    ReceiptFile,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from finance_tracker.notifications import Notifier
from finance_tracker.selectors import filter_categories, unify_funding_sources
from finance_tracker.services.storage import (
    AccountStore,
    CategoryStore,
    CreditCardStore,
    TransactionStore,
)
from finance_tracker.validation import TransactionValidator

SUCCESS_MESSAGES = {
    TransactionType.INCOME: "Receita adicionada com sucesso!",
    TransactionType.EXPENSE: "Despesa adicionada com sucesso!",
}
DIRECTION_LABELS = {
    TransactionType.INCOME: "Receita",
    TransactionType.EXPENSE: "Despesa",
}
GENERIC_FAILURE_MESSAGE = "Erro ao adicionar transação"

# Fields the user edits directly; direction and receipt have their own setters
EDITABLE_FIELDS = frozenset({
    "amount",
    "description",
    "account_id",
    "category_id",
    "date",
    "notes",
    "tags",
    "is_recurring",
    "recurrence_frequency",
    "recurrence_end_date",
})


class TransactionEntryForm:
    """
    New-transaction form, independent of any UI toolkit.

    Every collaborator is passed in, so the whole workflow runs in tests
    against in-memory stores and a collecting notifier.
    """

    def __init__(
        self,
        category_store: CategoryStore,
        account_store: AccountStore,
        credit_card_store: CreditCardStore,
        transaction_store: TransactionStore,
        notifier: Notifier,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[TransactionValidator] = None,
        today: Callable[[], date] = date.today,
    ):
        self._category_store = category_store
        self._account_store = account_store
        self._credit_card_store = credit_card_store
        self._transaction_store = transaction_store
        self._notifier = notifier
        self._audit_logger = audit_logger
        self._validator = validator or TransactionValidator()
        self._today = today

        self._categories: list[Category] = []
        self._accounts: list[Account] = []
        self._credit_cards: list[CreditCard] = []
        self.categories_loading = False

        self.draft = TransactionDraft(date=self._today().isoformat())
        self.state = FormState.EDITING
        self.last_outcome: Optional[FormState] = None
        self.last_error: Optional[FormError] = None

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    async def refresh(self) -> None:
        """
        Re-read categories, accounts and credit cards from their stores.

        All three are read before any is kept, so a failing store leaves
        the previous lists in place.
        """
        categories, loading = await self._category_store.read()
        accounts = await self._account_store.read()
        credit_cards = await self._credit_card_store.read()

        self._categories, self.categories_loading = categories, loading
        self._accounts = accounts
        self._credit_cards = credit_cards

    @property
    def direction(self) -> TransactionType:
        return self.draft.type

    def category_options(self) -> list[Category]:
        return filter_categories(self._categories, self.draft.type)

    def funding_targets(self) -> list[FundingTarget]:
        return unify_funding_sources(self._accounts, self._credit_cards)

    @property
    def is_submitting(self) -> bool:
        return self.state in (FormState.VALIDATING, FormState.SUBMITTING)

    @property
    def submit_label(self) -> str:
        if self.is_submitting:
            return "Adicionando..."
        return f"Adicionar {DIRECTION_LABELS[self.draft.type]}"

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_direction(self, direction: TransactionType) -> None:
        """
        Switch between income and expense.

        A selected category that does not belong to the new direction
        is cleared, so the user has to pick again.
        """
        direction = TransactionType(direction)
        if direction == self.draft.type:
            return

        self.draft.type = direction
        if self.draft.category_id and self.draft.category_id not in {
            c.id for c in self.category_options()
        }:
            self.draft.category_id = ""

    def update(self, **fields) -> None:
        """Set draft fields by name."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Not editable through update(): {sorted(unknown)}")
        for name, value in fields.items():
            setattr(self.draft, name, value)

    def attach_receipt(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> ReceiptFile:
        receipt = ReceiptFile(filename=filename, content=content, content_type=content_type)
        self.draft.receipt = receipt
        return receipt

    def clear_receipt(self) -> None:
        self.draft.receipt = None

    def _reset_draft(self) -> None:
        self.draft = TransactionDraft(
            type=self.draft.type,
            date=self._today().isoformat(),
        )

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self) -> Optional[Transaction]:
        """
        Validate the draft and create the transaction.

        Returns:
            The stored transaction, or None if validation or the store failed.
            Failures are reported through the notifier, never raised.

        Raises:
            SubmissionInProgressError: A previous submit has not finished yet.
        """
        if self.is_submitting:
            raise SubmissionInProgressError("A submission is already in progress")

        correlation_id = create_correlation_id()
        self.state = FormState.VALIDATING
        try:
            return await self._run_submission(correlation_id)
        finally:
            self.state = FormState.EDITING

    async def _run_submission(self, correlation_id) -> Optional[Transaction]:
        try:
            payload = self._validator.validate(self.draft, self._categories)
        except FormError as e:
            self._finish_failure(e)
            if self._audit_logger:
                fields = e.fields if isinstance(e, MissingFieldError) else []
                await self._audit_logger.log_validation_rejected(
                    error_type=type(e).__name__,
                    message=str(e),
                    fields=fields,
                    correlation_id=correlation_id,
                )
            return None

        self.state = FormState.SUBMITTING
        if self._audit_logger:
            await self._audit_logger.log_transaction_submitted(
                direction=payload.type.value,
                account_id=payload.account_id,
                correlation_id=correlation_id,
            )

        receipt = self.draft.receipt
        try:
            transaction = await self._transaction_store.create(payload, receipt)
        except Exception as e:
            error = SubmissionError(str(e) or GENERIC_FAILURE_MESSAGE)
            self._finish_failure(error)
            if self._audit_logger:
                await self._audit_logger.log_transaction_save_failed(
                    error_message=str(e) or type(e).__name__,
                    correlation_id=correlation_id,
                )
            return None

        self.state = FormState.SUCCESS
        self.last_outcome = FormState.SUCCESS
        self.last_error = None
        self._notifier.success(SUCCESS_MESSAGES[payload.type])
        self._reset_draft()

        if self._audit_logger:
            await self._audit_logger.log_transaction_saved(
                transaction_id=transaction.id,
                direction=transaction.type.value,
                amount=str(transaction.amount),
                correlation_id=correlation_id,
            )
            if receipt is not None and transaction.receipt_url:
                await self._audit_logger.log_receipt_uploaded(
                    transaction_id=transaction.id,
                    filename=receipt.filename,
                    size=receipt.size,
                    url=transaction.receipt_url,
                )
        return transaction

    def _finish_failure(self, error: FormError) -> None:
        self.state = FormState.FAILURE
        self.last_outcome = FormState.FAILURE
        self.last_error = error
        self._notifier.error(str(error))
