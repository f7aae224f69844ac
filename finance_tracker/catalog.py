"""
Default category catalog.

Offered as suggestions in the category panel. Nothing here is ever
persisted unless the user submits it through the creation form.
"""

from finance_tracker.models.finance import DefaultCategory, TransactionType

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


DEFAULT_CATEGORIES: tuple[DefaultCategory, ...] = (
    # Income
    DefaultCategory(name="Salário", icon="💼", color="#10B981", transaction_type=INCOME),
    DefaultCategory(name="Freelance", icon="💻", color="#06B6D4", transaction_type=INCOME),
    DefaultCategory(name="Investimentos", icon="📈", color="#8B5CF6", transaction_type=INCOME),
    DefaultCategory(name="Outras Receitas", icon="💰", color="#22C55E", transaction_type=INCOME),
    # Expense
    DefaultCategory(name="Alimentação", icon="🍽️", color="#EF4444", transaction_type=EXPENSE),
    DefaultCategory(name="Transporte", icon="🚗", color="#F59E0B", transaction_type=EXPENSE),
    DefaultCategory(name="Moradia", icon="🏠", color="#3B82F6", transaction_type=EXPENSE),
    DefaultCategory(name="Saúde", icon="🏥", color="#EC4899", transaction_type=EXPENSE),
    DefaultCategory(name="Educação", icon="📚", color="#6366F1", transaction_type=EXPENSE),
    DefaultCategory(name="Lazer", icon="🎮", color="#14B8A6", transaction_type=EXPENSE),
    DefaultCategory(name="Compras", icon="🛍️", color="#F97316", transaction_type=EXPENSE),
    DefaultCategory(name="Contas", icon="🧾", color="#64748B", transaction_type=EXPENSE),
    DefaultCategory(name="Pets", icon="🐾", color="#A16207", transaction_type=EXPENSE),
    DefaultCategory(name="Academia", icon="🏋️", color="#0EA5E9", transaction_type=EXPENSE),
    DefaultCategory(name="Presentes", icon="🎁", color="#D946EF", transaction_type=EXPENSE),
    DefaultCategory(name="Viagens", icon="✈️", color="#0891B2", transaction_type=EXPENSE),
)
