"""
Two-Stage Draft Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - PRESENCE:
- amount, description, account and category must be filled in
- This runs before anything is parsed, so an empty amount is reported
  as a missing field and never as an invalid number

STAGE 2 - SEMANTIC:
- Amount is plain digits and parses to a positive number (decimal comma accepted)
- Date is a real ISO date
- Selected category belongs to the draft's direction
- Text lengths and recurrence fields are within bounds, reported in Portuguese

IMPORTANT: Validation NEVER mutates the draft. It either returns the
payload for the store or raises a FormError for the form to report.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import ValidationError

from finance_tracker.errors import (
    CategoryMismatchError,
    DuplicateCategoryError,
    InvalidAmountError,
    InvalidFieldError,
    MissingFieldError,
)
from finance_tracker.models.finance import (
    Category,
    CategoryDraft,
    DESCRIPTION_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    NewTransaction,
    TransactionDraft,
    TransactionStatus,
)

REQUIRED_TRANSACTION_FIELDS = ("amount", "description", "account_id", "category_id")

# Digits with an optional fractional part, after the decimal comma is normalized
AMOUNT_PATTERN = re.compile(r"[0-9]+(\.[0-9]+)?")


def parse_amount(raw: str) -> Decimal:
    """
    Parse a user-typed amount.

    A decimal comma is turned into a decimal point first, so "10,50"
    and "10.50" both give Decimal("10.50"). Only plain digits with an
    optional fractional part are accepted: no sign, exponent,
    underscore or thousands separator. Anything that is not greater
    than zero raises InvalidAmountError.
    """
    text = raw.strip().replace(",", ".", 1)
    if not AMOUNT_PATTERN.fullmatch(text):
        raise InvalidAmountError(raw)

    value = Decimal(text)
    if value <= 0:
        raise InvalidAmountError(raw)

    return value


class TransactionValidator:
    """Turns a TransactionDraft into a NewTransaction, or raises."""

    def missing_fields(self, draft: TransactionDraft) -> list[str]:
        """Stage 1: required fields that are empty (whitespace counts as empty)."""
        return [
            name for name in REQUIRED_TRANSACTION_FIELDS
            if not getattr(draft, name).strip()
        ]

    def _parse_date(self, raw: str) -> date:
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            raise InvalidFieldError("date", f"Data inválida: {raw}")

    def _check_category(
        self,
        draft: TransactionDraft,
        categories: Optional[Iterable[Category]],
    ) -> None:
        # Categories the form does not know about are left to the backend
        if categories is None:
            return
        for category in categories:
            if category.id == draft.category_id:
                if category.transaction_type != draft.type:
                    raise CategoryMismatchError(draft.category_id)
                return

    def _check_limits(self, draft: TransactionDraft, when: date) -> None:
        if len(draft.description.strip()) > DESCRIPTION_MAX_LENGTH:
            raise InvalidFieldError(
                "description",
                f"Descrição deve ter no máximo {DESCRIPTION_MAX_LENGTH} caracteres",
            )
        if len(draft.notes.strip()) > NOTES_MAX_LENGTH:
            raise InvalidFieldError(
                "notes",
                f"Observações devem ter no máximo {NOTES_MAX_LENGTH} caracteres",
            )
        if draft.is_recurring and draft.recurrence_frequency is None:
            raise InvalidFieldError(
                "recurrence_frequency",
                "Informe a frequência da transação recorrente",
            )
        if draft.recurrence_end_date and draft.recurrence_end_date < when:
            raise InvalidFieldError(
                "recurrence_end_date",
                "A data final da recorrência não pode ser anterior à data da transação",
            )

    def validate(
        self,
        draft: TransactionDraft,
        categories: Optional[Iterable[Category]] = None,
    ) -> NewTransaction:
        """
        Run both stages and build the store payload.

        Args:
            draft: The draft as the user left it
            categories: Known categories, used for the direction check.
                        If None, the direction check is skipped.

        Raises:
            MissingFieldError, InvalidAmountError, CategoryMismatchError,
            InvalidFieldError
        """
        missing = self.missing_fields(draft)
        if missing:
            raise MissingFieldError(missing)

        amount = parse_amount(draft.amount)
        when = self._parse_date(draft.date)
        self._check_category(draft, categories)
        self._check_limits(draft, when)

        try:
            return NewTransaction(
                type=draft.type,
                amount=amount,
                description=draft.description,
                account_id=draft.account_id,
                category_id=draft.category_id,
                date=when,
                status=TransactionStatus.COMPLETED,
                notes=draft.notes or None,
                tags=[tag.strip() for tag in draft.tags if tag.strip()],
                is_recurring=draft.is_recurring,
                recurrence_frequency=draft.recurrence_frequency,
                recurrence_end_date=draft.recurrence_end_date,
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "transaction"
            raise InvalidFieldError(field, first["msg"])


class CategoryValidator:
    """Checks a CategoryDraft before it goes to the category store."""

    def validate(
        self,
        draft: CategoryDraft,
        existing: Iterable[Category],
    ) -> CategoryDraft:
        """
        Return a cleaned copy of the draft.

        Raises:
            MissingFieldError: name is empty
            DuplicateCategoryError: name matches an existing category (case-insensitive)
        """
        name = draft.name.strip()
        if not name:
            raise MissingFieldError(["name"], "Nome da categoria é obrigatório")

        if any(category.name.casefold() == name.casefold() for category in existing):
            raise DuplicateCategoryError(name)

        return draft.model_copy(update={
            "name": name,
            "icon": draft.icon.strip() or CategoryDraft.model_fields["icon"].default,
        })
