"""Form workflows: transaction entry and category management."""

from finance_tracker.forms.category_panel import CategoryManagementPanel
from finance_tracker.forms.transaction_form import TransactionEntryForm

__all__ = ["CategoryManagementPanel", "TransactionEntryForm"]
