"""
Google Sheets Store Implementations

DESIGN DECISION: Google Sheets is used as the backend because:
1. Users can view and fix their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No relational constraints (we check what we can before writing)
- Limited query capabilities (we filter in Python)

Layout follows the backend's record shapes: credit cards are rows of the
Accounts sheet with type "credit_card", exactly as they are accounts of
that type in the managed database.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.models.audit import AuditEvent, AuditEventType, AuditSeverity
from finance_tracker.models.finance import (
    Account,
    AccountType,
    Category,
    CategoryDraft,
    CreditCard,
    NewTransaction,
    ReceiptFile,
    Transaction,
    TransactionType,
)
from finance_tracker.services.receipts import ReceiptError, ReceiptUploader
from finance_tracker.services.storage.interface import (
    AccountStore,
    AuditStorageInterface,
    CategoryStore,
    ConnectionError,
    CreditCardStore,
    DuplicateError,
    StorageError,
    TransactionStore,
)

logger = structlog.get_logger(__name__)


CATEGORY_COLUMNS = [
    "id",
    "name",
    "icon",
    "color",
    "transaction_type",
    "parent_id",
    "is_active",
    "created_at",
]

ACCOUNT_COLUMNS = [
    "id",
    "name",
    "type",
    "balance",
    "bank_name",
    "credit_limit",
    "closing_day",
    "due_day",
    "is_active",
    "created_at",
]

TRANSACTION_COLUMNS = [
    "id",
    "created_at",
    "updated_at",
    "type",
    "amount",
    "description",
    "account_id",
    "category_id",
    "date",
    "status",
    "notes",
    "tags_json",
    "is_recurring",
    "recurrence_frequency",
    "recurrence_end_date",
    "receipt_url",
]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


def _cell(row: list, index: int, default: str = "") -> str:
    """Read a cell, tolerating short rows and blanks."""
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


def _is_true(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _parse_timestamp(value: str) -> datetime:
    """ISO timestamp from a sheet cell; rows without an offset are UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self._settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str], rows: int = 1000) -> gspread.Worksheet:
        """Get or create a worksheet, writing the header row on creation."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_categories_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.categories_sheet_name, CATEGORY_COLUMNS)

    def get_accounts_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.accounts_sheet_name, ACCOUNT_COLUMNS)

    def get_transactions_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(
            self._settings.transactions_sheet_name,
            TRANSACTION_COLUMNS,
            rows=5000,
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        return self.get_worksheet(self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000)


def _data_rows(sheet: gspread.Worksheet) -> list[list]:
    """All non-empty rows below the header."""
    return [row for row in sheet.get_all_values()[1:] if row and row[0]]


class GoogleSheetsCategoryStore(CategoryStore):
    """Categories, one per row. Inactive rows are soft-deleted and never returned."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _category_to_row(self, category: Category) -> list:
        return [
            category.id,
            category.name,
            category.icon,
            category.color,
            category.transaction_type.value,
            category.parent_id or "",
            str(category.is_active),
            datetime.now(timezone.utc).isoformat(),
        ]

    def _row_to_category(self, row: list) -> Category:
        return Category(
            id=_cell(row, 0),
            name=_cell(row, 1),
            icon=_cell(row, 2, "📋"),
            color=_cell(row, 3, "#6B7280"),
            transaction_type=TransactionType(_cell(row, 4)),
            parent_id=_cell(row, 5) or None,
            is_active=_is_true(_cell(row, 6, "true")),
        )

    def _load(self) -> list[Category]:
        categories = []
        for row in _data_rows(self._client.get_categories_sheet()):
            try:
                category = self._row_to_category(row)
            except ValueError as e:
                logger.warning("category_row_skipped", row_id=_cell(row, 0), error=str(e))
                continue
            if category.is_active:
                categories.append(category)
        return categories

    async def read(self) -> tuple[list[Category], bool]:
        try:
            return self._load(), False
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read categories: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _append(self, row: list) -> None:
        self._client.get_categories_sheet().append_row(row, value_input_option="RAW")

    async def create(self, draft: CategoryDraft) -> Category:
        try:
            existing = self._load()
        except Exception as e:
            raise StorageError(f"Failed to read categories: {e}")

        if any(c.name.casefold() == draft.name.casefold() for c in existing):
            raise DuplicateError(f"Category already exists: {draft.name}")

        category = Category(
            name=draft.name,
            icon=draft.icon,
            color=draft.color,
            transaction_type=draft.transaction_type,
            parent_id=draft.parent_id,
        )
        try:
            self._append(self._category_to_row(category))
        except Exception as e:
            raise StorageError(f"Failed to save category: {e}")
        return category


class _AccountsSheetReader:
    """Shared access to the Accounts sheet for accounts and credit cards."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _active_rows(self) -> list[list]:
        try:
            rows = _data_rows(self._client.get_accounts_sheet())
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read accounts: {e}")
        return [row for row in rows if _is_true(_cell(row, 8, "true"))]


class GoogleSheetsAccountStore(_AccountsSheetReader, AccountStore):
    """Account rows whose type is anything but credit_card."""

    def _row_to_account(self, row: list) -> Account:
        return Account(
            id=_cell(row, 0),
            name=_cell(row, 1),
            type=AccountType(_cell(row, 2)),
            balance=Decimal(_cell(row, 3, "0")),
            bank_name=_cell(row, 4) or None,
        )

    async def read(self) -> list[Account]:
        accounts = []
        for row in self._active_rows():
            if _cell(row, 2) == AccountType.CREDIT_CARD.value:
                continue
            try:
                accounts.append(self._row_to_account(row))
            except (ValueError, ArithmeticError) as e:
                logger.warning("account_row_skipped", row_id=_cell(row, 0), error=str(e))
        return accounts


class GoogleSheetsCreditCardStore(_AccountsSheetReader, CreditCardStore):
    """Account rows of type credit_card."""

    def _row_to_card(self, row: list) -> CreditCard:
        return CreditCard(
            id=_cell(row, 0),
            name=_cell(row, 1),
            bank_name=_cell(row, 4),
            credit_limit=Decimal(_cell(row, 5)) if _cell(row, 5) else None,
            closing_day=int(_cell(row, 6)) if _cell(row, 6) else None,
            due_day=int(_cell(row, 7)) if _cell(row, 7) else None,
        )

    async def read(self) -> list[CreditCard]:
        cards = []
        for row in self._active_rows():
            if _cell(row, 2) != AccountType.CREDIT_CARD.value:
                continue
            try:
                cards.append(self._row_to_card(row))
            except (ValueError, ArithmeticError) as e:
                logger.warning("credit_card_row_skipped", row_id=_cell(row, 0), error=str(e))
        return cards


class GoogleSheetsTransactionStore(TransactionStore):
    """
    Transactions, one per row.

    If a receipt is attached it is uploaded first and the row stores its URL.
    A failed upload aborts the create; no row is written.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        receipt_uploader: Optional[ReceiptUploader] = None,
    ):
        self._client = client or GoogleSheetsClient()
        self._receipt_uploader = receipt_uploader

    def _transaction_to_row(self, transaction: Transaction) -> list:
        return [
            transaction.id,
            transaction.created_at.isoformat(),
            transaction.updated_at.isoformat(),
            transaction.type.value,
            str(transaction.amount),
            transaction.description,
            transaction.account_id,
            transaction.category_id,
            transaction.date.isoformat(),
            transaction.status.value,
            transaction.notes or "",
            json.dumps(transaction.tags),
            str(transaction.is_recurring),
            transaction.recurrence_frequency.value if transaction.recurrence_frequency else "",
            transaction.recurrence_end_date.isoformat() if transaction.recurrence_end_date else "",
            transaction.receipt_url or "",
        ]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _append(self, row: list) -> None:
        self._client.get_transactions_sheet().append_row(row, value_input_option="RAW")

    async def create(
        self,
        transaction: NewTransaction,
        receipt: Optional[ReceiptFile] = None,
    ) -> Transaction:
        """Save a transaction to Google Sheets."""
        stored = Transaction(**transaction.model_dump())

        if receipt is not None:
            if self._receipt_uploader is None:
                raise StorageError("Receipt storage is not configured")
            try:
                url = await self._receipt_uploader.upload(receipt, stored.id)
            except ReceiptError as e:
                raise StorageError(str(e))
            stored = stored.model_copy(update={"receipt_url": url})

        try:
            self._append(self._transaction_to_row(stored))
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")
        return stored


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        return AuditEvent(
            event_id=UUID(_cell(row, 0)),
            timestamp=_parse_timestamp(_cell(row, 1)),
            event_type=AuditEventType(_cell(row, 2)),
            severity=AuditSeverity(_cell(row, 3)),
            entity_type=_cell(row, 4) or None,
            entity_id=_cell(row, 5) or None,
            correlation_id=UUID(_cell(row, 6)) if _cell(row, 6) else None,
            description=_cell(row, 7),
            details=json.loads(_cell(row, 8)) if _cell(row, 8) else {},
            error_message=_cell(row, 9) or None,
            is_user_action=_is_true(_cell(row, 10, "false")),
        )

    def _load_events(self) -> list[AuditEvent]:
        try:
            rows = _data_rows(self._client.get_audit_sheet())
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = []
        for row in rows:
            try:
                events.append(self._row_to_event(row))
            except ValueError as e:
                logger.warning("audit_row_skipped", row_id=_cell(row, 0), error=str(e))
        return events

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to write audit event: {e}")

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = self._load_events()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
