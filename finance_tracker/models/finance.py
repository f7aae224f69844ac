"""
Core Data Models for Finance Tracker

These models define the schemas for everything the transaction-entry and
categorization workflow reads, edits and submits. They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging
4. Mirror the backend's persisted record shapes

DESIGN DECISION: Records owned by the backend (categories, accounts,
credit cards, transactions) are read-only pydantic models here.
Only the drafts are mutable, because the user edits them field by field.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a transaction or category.

    Transfers exist in the backend schema but are never offered by the
    entry form or used by categories.
    """
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class AccountType(str, Enum):
    """Kinds of funding accounts the backend knows about."""
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    WALLET = "wallet"
    INVESTMENT = "investment"


class TransactionStatus(str, Enum):
    """Settlement status of a transaction."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecurrenceFrequency(str, Enum):
    """How often a recurring transaction repeats."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class FundingKind(str, Enum):
    """Where a funding target comes from."""
    ACCOUNT = "account"
    CREDIT_CARD = "credit_card"


class FormState(str, Enum):
    """
    Lifecycle of a form submission.

    A form always settles back to EDITING once the outcome
    (SUCCESS or FAILURE) has been reported.
    """
    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


DIRECTIONS = (TransactionType.INCOME, TransactionType.EXPENSE)

DESCRIPTION_MAX_LENGTH = 500
NOTES_MAX_LENGTH = 1000


def _require_direction(value: TransactionType) -> TransactionType:
    if value not in DIRECTIONS:
        raise ValueError(f"Direction must be income or expense, got: {value.value}")
    return value


# =============================================================================
# BACKEND-OWNED RECORDS (read-only here)
# =============================================================================

class Category(BaseModel):
    """
    A user category used to classify transactions.

    CRITICAL: transaction_type never changes after creation.
    Category filtering in the entry form depends on it.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Category identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    icon: str = Field(
        default="📋",
        description="Glyph shown next to the name"
    )
    color: str = Field(
        default="#6B7280",
        pattern="^#[0-9A-Fa-f]{6}$",
        description="Hex color"
    )
    transaction_type: TransactionType
    parent_id: Optional[str] = Field(
        default=None,
        description="Parent category for one level of hierarchy"
    )
    is_active: bool = True

    @field_validator('transaction_type')
    @classmethod
    def validate_direction(cls, v: TransactionType) -> TransactionType:
        return _require_direction(v)


class Account(BaseModel):
    """A bank account, wallet or investment account."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType
    balance: Decimal = Decimal("0")
    bank_name: Optional[str] = None
    is_active: bool = True


class CreditCard(BaseModel):
    """A credit card. Stored by the backend as an account of type credit_card."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=100)
    bank_name: str = ""
    credit_limit: Optional[Decimal] = Field(default=None, ge=0)
    closing_day: Optional[int] = Field(default=None, ge=1, le=31)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

class FundingTarget(BaseModel):
    """
    Display-ready account or credit card a transaction can be charged against.

    Built on demand from the account and credit card collections.
    Never persisted.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: FundingKind
    display_icon: str
    account_type: AccountType
    bank_name: Optional[str] = None

    @property
    def label(self) -> str:
        if self.kind == FundingKind.CREDIT_CARD:
            return f"{self.name} (Cartão - {self.bank_name or ''})"
        return f"{self.name} (Conta)"


class DefaultCategory(BaseModel):
    """Entry of the static default-category catalog."""
    model_config = ConfigDict(frozen=True)

    name: str
    icon: str
    color: str
    transaction_type: TransactionType


# =============================================================================
# DRAFTS (form-local, mutable)
# =============================================================================

class ReceiptFile(BaseModel):
    """A receipt or invoice attached to a transaction draft."""

    filename: str = Field(..., min_length=1)
    content_type: str = Field(
        default="application/octet-stream",
        description="MIME type reported by the browser"
    )
    content: bytes = Field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1].lower() if "." in self.filename else ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _today_iso() -> str:
    return date.today().isoformat()


class TransactionDraft(BaseModel):
    """
    In-progress transaction being edited in the entry form.

    CRITICAL: amount is the raw user text. It is only turned into a
    number by the validator, which accepts a decimal comma or point.
    """
    model_config = ConfigDict(validate_assignment=True)

    # Declared before `date`, which shadows the datetime.date name below it
    recurrence_end_date: Optional[date] = None

    type: TransactionType = TransactionType.EXPENSE
    amount: str = ""
    description: str = ""
    account_id: str = ""
    category_id: str = ""
    date: str = Field(default_factory=_today_iso)
    receipt: Optional[ReceiptFile] = None
    # Not user-editable; every submission is stored as completed
    status: TransactionStatus = TransactionStatus.COMPLETED
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    is_recurring: bool = False
    recurrence_frequency: Optional[RecurrenceFrequency] = None

    @field_validator('type')
    @classmethod
    def validate_direction(cls, v: TransactionType) -> TransactionType:
        return _require_direction(v)


class CategoryDraft(BaseModel):
    """Fields of the new-category form."""
    model_config = ConfigDict(validate_assignment=True)

    name: str = ""
    icon: str = "📋"
    color: str = Field(default="#6B7280", pattern="^#[0-9A-Fa-f]{6}$")
    transaction_type: TransactionType = TransactionType.EXPENSE
    parent_id: Optional[str] = None

    @field_validator('transaction_type')
    @classmethod
    def validate_direction(cls, v: TransactionType) -> TransactionType:
        return _require_direction(v)


# =============================================================================
# SUBMISSION PAYLOAD AND PERSISTED TRANSACTION
# =============================================================================

class NewTransaction(BaseModel):
    """
    Validated payload handed to the transaction store.

    Only the validator builds these, from a TransactionDraft that passed
    every check. The store assigns id and timestamps.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType
    amount: Decimal = Field(..., gt=0, description="Positive amount")
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    account_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    date: date
    status: TransactionStatus = TransactionStatus.COMPLETED
    notes: Optional[str] = Field(default=None, max_length=NOTES_MAX_LENGTH)
    tags: list[str] = Field(default_factory=list)
    is_recurring: bool = False
    recurrence_frequency: Optional[RecurrenceFrequency] = None
    recurrence_end_date: Optional[date] = None

    @model_validator(mode='after')
    def validate_recurrence(self) -> 'NewTransaction':
        """Validate recurrence fields against each other and the date."""
        if self.is_recurring and self.recurrence_frequency is None:
            raise ValueError("Recurring transactions need a frequency")

        if self.recurrence_end_date and self.recurrence_end_date < self.date:
            raise ValueError("Recurrence end date cannot be before transaction date")

        return self


class Transaction(NewTransaction):
    """A transaction as persisted by the backend."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    receipt_url: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
