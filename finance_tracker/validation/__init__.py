"""Draft validation package."""

from finance_tracker.validation.validator import (
    CategoryValidator,
    TransactionValidator,
    parse_amount,
)

__all__ = ["CategoryValidator", "TransactionValidator", "parse_amount"]
