"""Services package."""

from finance_tracker.services.receipts import (
    CloudinaryReceiptService,
    ReceiptError,
    ReceiptUploader,
    ReceiptUploadError,
    UnsupportedReceiptError,
)
from finance_tracker.services.storage import (
    AccountStore,
    AuditStorageInterface,
    CategoryStore,
    ConnectionError,
    CreditCardStore,
    DuplicateError,
    StorageError,
    TransactionStore,
)

__all__ = [
    # Receipt services
    "CloudinaryReceiptService",
    "ReceiptError",
    "ReceiptUploader",
    "ReceiptUploadError",
    "UnsupportedReceiptError",
    # Store contracts
    "AccountStore",
    "AuditStorageInterface",
    "CategoryStore",
    "CreditCardStore",
    "TransactionStore",
    # Storage exceptions
    "ConnectionError",
    "DuplicateError",
    "StorageError",
]
