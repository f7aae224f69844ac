"""
Receipt Storage Service using Cloudinary

DESIGN DECISION: Receipts (photos of invoices, PDF notas fiscais) are
binary blobs the transaction sheet cannot hold. We upload them to
Cloudinary and keep only the returned URL on the transaction row.

This service handles:
1. Checking the attachment is a supported, intact file
2. Uploading it under a stable public id
3. Returning the secure URL

CRITICAL: A receipt that fails inspection is rejected before any
network call. Only transient Cloudinary errors are retried.
"""

import hashlib
from io import BytesIO
from typing import Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from PIL import Image, UnidentifiedImageError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import AppSettings, CloudinarySettings, get_settings
from finance_tracker.models.finance import ReceiptFile
from finance_tracker.services.receipts.interface import (
    ReceiptUploader,
    ReceiptUploadError,
    UnsupportedReceiptError,
)

IMAGE_FORMATS = {"jpg", "jpeg", "png", "webp"}


class CloudinaryReceiptService(ReceiptUploader):
    """
    Receipt uploader backed by Cloudinary.

    Flow:
    1. Inspect the file (extension, size, content)
    2. Upload to the receipts folder
    3. Return the secure URL
    """

    def __init__(
        self,
        settings: Optional[CloudinarySettings] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._settings = settings or get_settings().cloudinary
        self._app_settings = app_settings or get_settings().app
        self._configured = False

    def _configure(self):
        """Configure Cloudinary SDK."""
        if not self._configured:
            cloudinary.config(
                cloud_name=self._settings.cloud_name,
                api_key=self._settings.api_key,
                api_secret=self._settings.api_secret,
                secure=True,
            )
            self._configured = True

    def _generate_public_id(self, transaction_id: str, filename: str) -> str:
        """
        Generate a unique public ID for Cloudinary.

        Format: {transaction_id}_{filename_hash}
        """
        filename_hash = hashlib.md5(filename.encode()).hexdigest()[:8]
        return f"{transaction_id}_{filename_hash}"

    def inspect_receipt(self, receipt: ReceiptFile) -> None:
        """
        Reject receipts we should not upload.

        Raises:
            UnsupportedReceiptError: wrong extension, too large, empty or corrupt
        """
        allowed = self._app_settings.supported_receipt_formats_list
        if receipt.extension not in allowed:
            raise UnsupportedReceiptError(
                f"Formato de arquivo não suportado: {receipt.filename}. "
                f"Formatos aceitos: {', '.join(allowed)}"
            )

        if receipt.size == 0:
            raise UnsupportedReceiptError(f"Arquivo vazio: {receipt.filename}")

        if receipt.size > self._app_settings.max_receipt_size_bytes:
            raise UnsupportedReceiptError(
                f"Arquivo muito grande ({receipt.size / (1024 * 1024):.1f} MB). "
                f"Máximo: {self._app_settings.max_receipt_size_mb} MB"
            )

        if receipt.extension in IMAGE_FORMATS:
            try:
                with Image.open(BytesIO(receipt.content)) as img:
                    img.verify()
            except (UnidentifiedImageError, OSError, SyntaxError):
                raise UnsupportedReceiptError(
                    f"Imagem corrompida ou ilegível: {receipt.filename}"
                )
        elif receipt.extension == "pdf" and not receipt.content.startswith(b"%PDF"):
            raise UnsupportedReceiptError(f"PDF inválido: {receipt.filename}")

    @retry(
        retry=retry_if_exception_type(CloudinaryError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _upload_bytes(self, receipt: ReceiptFile, public_id: str) -> dict:
        return cloudinary.uploader.upload(
            receipt.content,
            public_id=public_id,
            folder=self._settings.receipts_folder,
            resource_type="auto",
            filename_override=receipt.filename,
        )

    async def upload(self, receipt: ReceiptFile, transaction_id: str) -> str:
        """
        Upload a receipt for a transaction.

        Returns:
            Secure URL of the stored receipt

        Raises:
            UnsupportedReceiptError: If the file fails inspection
            ReceiptUploadError: If Cloudinary rejects the upload
        """
        self.inspect_receipt(receipt)
        self._configure()

        public_id = self._generate_public_id(transaction_id, receipt.filename)
        try:
            result = await self._upload_bytes(receipt, public_id)
        except CloudinaryError as e:
            raise ReceiptUploadError(f"Cloudinary error: {e}")

        url = result.get("secure_url", result.get("url", ""))
        if not url:
            raise ReceiptUploadError("No URL returned from Cloudinary")
        return url
