"""
Category Management Panel

Lists the user's categories split by direction, suggests catalog
categories the user does not have yet, and creates new categories
through the category store.

Picking a suggestion only pre-fills and opens the creation form; a
category is created only when the user submits that form.
"""

from typing import Iterable, Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.catalog import DEFAULT_CATEGORIES
from finance_tracker.errors import FormError, SubmissionError, SubmissionInProgressError
from finance_tracker.models.finance import (
    Category,
    CategoryDraft,
    DefaultCategory,
    FormState,
    TransactionType,
)
from finance_tracker.notifications import Notifier
from finance_tracker.selectors import partition_categories, suggest_categories
from finance_tracker.services.storage import CategoryStore
from finance_tracker.validation import CategoryValidator

CREATED_MESSAGE = "Categoria adicionada com sucesso!"
GENERIC_FAILURE_MESSAGE = "Erro ao adicionar categoria"

logger = structlog.get_logger(__name__)


class CategoryManagementPanel:

    def __init__(
        self,
        category_store: CategoryStore,
        notifier: Notifier,
        catalog: Iterable[DefaultCategory] = DEFAULT_CATEGORIES,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[CategoryValidator] = None,
        max_suggestions: int = 6,
        default_icon: str = "📋",
        default_color: str = "#6B7280",
    ):
        self._category_store = category_store
        self._notifier = notifier
        self._catalog = tuple(catalog)
        self._audit_logger = audit_logger
        self._validator = validator or CategoryValidator()
        self._max_suggestions = max_suggestions
        self._default_icon = default_icon
        self._default_color = default_color

        self.categories: list[Category] = []
        self.loading = True
        self.show_form = False
        self.draft = self._blank_draft()
        self.state = FormState.EDITING

    def _blank_draft(self) -> CategoryDraft:
        return CategoryDraft(
            icon=self._default_icon,
            color=self._default_color,
            transaction_type=TransactionType.EXPENSE,
        )

    async def refresh(self) -> None:
        self.categories, self.loading = await self._category_store.read()

    @property
    def income_categories(self) -> list[Category]:
        return partition_categories(self.categories)[0]

    @property
    def expense_categories(self) -> list[Category]:
        return partition_categories(self.categories)[1]

    def suggestions(self) -> list[DefaultCategory]:
        return suggest_categories(self.categories, self._catalog, self._max_suggestions)

    # ------------------------------------------------------------------
    # Creation form
    # ------------------------------------------------------------------

    def open_form(self) -> None:
        self.show_form = True

    def toggle_form(self) -> None:
        self.show_form = not self.show_form

    def cancel(self) -> None:
        """Close the form. What was typed is kept for the next time it opens."""
        self.show_form = False

    def update(self, **fields) -> None:
        for name, value in fields.items():
            setattr(self.draft, name, value)

    async def choose_suggestion(self, suggestion: DefaultCategory) -> None:
        """Pre-fill the creation form from a catalog entry and open it."""
        self.draft = CategoryDraft(
            name=suggestion.name,
            icon=suggestion.icon,
            color=suggestion.color,
            transaction_type=suggestion.transaction_type,
        )
        self.show_form = True
        if self._audit_logger:
            await self._audit_logger.log_suggestion_chosen(suggestion.name)

    async def submit(self) -> Optional[Category]:
        """
        Create the category in the store.

        On success the form closes, resets to defaults and the category
        list is re-read. On failure the form stays open with the draft.
        Either way exactly one notification is emitted.
        """
        if self.state == FormState.SUBMITTING:
            raise SubmissionInProgressError("A submission is already in progress")

        self.state = FormState.SUBMITTING
        try:
            return await self._create()
        finally:
            self.state = FormState.EDITING

    async def _create(self) -> Optional[Category]:
        try:
            draft = self._validator.validate(self.draft, self.categories)
            try:
                category = await self._category_store.create(draft)
            except Exception as e:
                raise SubmissionError(str(e) or GENERIC_FAILURE_MESSAGE)
        except FormError as e:
            self._notifier.error(str(e))
            if self._audit_logger:
                await self._audit_logger.log_category_creation_failed(
                    name=self.draft.name,
                    error_message=str(e),
                )
            return None

        self._notifier.success(CREATED_MESSAGE)
        self.show_form = False
        self.draft = self._blank_draft()

        if self._audit_logger:
            await self._audit_logger.log_category_created(
                category_id=category.id,
                name=category.name,
                direction=category.transaction_type.value,
            )

        try:
            await self.refresh()
        except Exception as e:
            # The category exists; show it locally until the next successful read
            logger.warning("category_refresh_failed", error=str(e))
            self.categories = [*self.categories, category]
        return category
