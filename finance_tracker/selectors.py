"""
Read-model derivations over the store collections.

All functions here are pure: they take the collections the stores
returned and build what the forms display. Nothing is cached; the
inputs are user-scale lists and are re-derived on every render.
"""

from typing import Iterable, Sequence

from finance_tracker.models.finance import (
    Account,
    AccountType,
    Category,
    CreditCard,
    DefaultCategory,
    FundingKind,
    FundingTarget,
    TransactionType,
)

ACCOUNT_ICON = "🏦"
CREDIT_CARD_ICON = "💳"


def unify_funding_sources(
    accounts: Iterable[Account],
    credit_cards: Iterable[CreditCard],
) -> list[FundingTarget]:
    """
    Merge accounts and credit cards into one list of funding targets.

    Accounts come first, then credit cards, each in its original order.
    """
    targets = [
        FundingTarget(
            id=account.id,
            name=account.name,
            kind=FundingKind.ACCOUNT,
            display_icon=ACCOUNT_ICON,
            account_type=account.type,
        )
        for account in accounts
    ]
    targets.extend(
        FundingTarget(
            id=card.id,
            name=card.name,
            kind=FundingKind.CREDIT_CARD,
            display_icon=CREDIT_CARD_ICON,
            account_type=AccountType.CREDIT_CARD,
            bank_name=card.bank_name,
        )
        for card in credit_cards
    )
    return targets


def filter_categories(
    categories: Iterable[Category],
    direction: TransactionType,
) -> list[Category]:
    """Categories whose direction matches, in source order."""
    return [c for c in categories if c.transaction_type == direction]


def partition_categories(
    categories: Sequence[Category],
) -> tuple[list[Category], list[Category]]:
    """Split categories into (income, expense)."""
    return (
        filter_categories(categories, TransactionType.INCOME),
        filter_categories(categories, TransactionType.EXPENSE),
    )


def suggest_categories(
    existing: Iterable[Category],
    catalog: Iterable[DefaultCategory],
    limit: int = 6,
) -> list[DefaultCategory]:
    """
    Catalog entries the user does not have yet.

    A catalog entry is skipped when its name matches an existing category
    name case-insensitively. Catalog order is kept and at most `limit`
    entries are returned.
    """
    if limit <= 0:
        return []

    taken = {category.name.casefold() for category in existing}
    suggestions = []
    for entry in catalog:
        if entry.name.casefold() in taken:
            continue
        suggestions.append(entry)
        if len(suggestions) == limit:
            break
    return suggestions
