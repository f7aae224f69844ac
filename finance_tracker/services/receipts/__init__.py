"""Receipt storage services package."""

from finance_tracker.services.receipts.interface import (
    ReceiptError,
    ReceiptUploader,
    ReceiptUploadError,
    UnsupportedReceiptError,
)
from finance_tracker.services.receipts.cloudinary_service import (
    CloudinaryReceiptService,
)

__all__ = [
    "CloudinaryReceiptService",
    "ReceiptError",
    "ReceiptUploader",
    "ReceiptUploadError",
    "UnsupportedReceiptError",
]
