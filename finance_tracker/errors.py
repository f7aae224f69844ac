"""
Form error taxonomy.

Validation errors are raised and handled inside the forms and never reach
a store. SubmissionError wraps whatever a store raised, so the form can
show its message and keep the draft for a manual retry.
"""

from typing import Iterable


class FormError(Exception):
    """Base exception for form workflow errors."""
    pass


class MissingFieldError(FormError):
    """One or more required fields are empty."""

    def __init__(self, fields: Iterable[str], message: str = "Por favor, preencha todos os campos obrigatórios"):
        self.fields = list(fields)
        super().__init__(message)


class InvalidAmountError(FormError):
    """Amount is not a positive finite number."""

    def __init__(self, raw: str, message: str = "Valor deve ser um número positivo"):
        self.raw = raw
        super().__init__(message)


class CategoryMismatchError(FormError):
    """Selected category belongs to the other direction."""

    def __init__(self, category_id: str, message: str = "A categoria selecionada não corresponde ao tipo da transação"):
        self.category_id = category_id
        super().__init__(message)


class InvalidFieldError(FormError):
    """A field holds a value the backend would never accept (bad date, bad color...)."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class DuplicateCategoryError(FormError):
    """A category with the same name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Já existe uma categoria chamada '{name}'")


class SubmissionError(FormError):
    """The store rejected a submission (network, auth, constraint...)."""
    pass


class SubmissionInProgressError(FormError):
    """submit() was called while a previous submission is still in flight."""
    pass
