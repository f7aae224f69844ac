"""Receipt uploader contract."""

from abc import ABC, abstractmethod

from finance_tracker.models.finance import ReceiptFile


class ReceiptUploader(ABC):
    """Stores a receipt somewhere addressable and returns its URL."""

    @abstractmethod
    async def upload(self, receipt: ReceiptFile, transaction_id: str) -> str:
        pass


class ReceiptError(Exception):
    """Base exception for receipt handling errors."""
    pass


class UnsupportedReceiptError(ReceiptError):
    """The attachment is not a receipt we can store."""
    pass


class ReceiptUploadError(ReceiptError):
    """Failed to upload the receipt."""
    pass
