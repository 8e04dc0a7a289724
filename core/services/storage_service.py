# =============================================================================
# core/services/storage_service.py - Blob Upload Operations
# =============================================================================
# Handles validated uploads to the Blob Store (resumes, profile pictures,
# testimonial videos) and best-effort removal of replaced blobs.
# =============================================================================

import logging
import os
import time

from app.exceptions import FileTooLargeError, InvalidFileTypeError, NoFileError, StorageUploadError
from lib.blob_store import BlobStore
from lib.record_store import RecordStoreError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Blob Store operations.

    Example:
        storage = StorageService(blob_store)
        storage.validate_extension("cv.pdf", [".pdf"])
        url = storage.upload("resumes/u1/cv.pdf", data, "application/pdf")
    """

    def __init__(self, blobs: BlobStore):
        self.blobs = blobs

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_extension(filename: str | None, allowed: list[str]) -> str:
        """
        Check the file extension against an allowlist.

        Returns:
            The lowercased extension, e.g. ".pdf"
        """
        if not filename:
            raise NoFileError()
        ext = os.path.splitext(filename)[1].lower()
        if ext not in allowed:
            raise InvalidFileTypeError(filename, allowed)
        return ext

    @staticmethod
    def validate_content_type(filename: str | None, content_type: str | None, prefix: str) -> None:
        """Check the MIME type family, e.g. prefix "image/" or "video/"."""
        if not filename:
            raise NoFileError()
        if not content_type or not content_type.startswith(prefix):
            raise InvalidFileTypeError(filename, [f"{prefix}*"])

    @staticmethod
    def validate_size(data: bytes, max_bytes: int) -> None:
        if len(data) > max_bytes:
            raise FileTooLargeError(
                size_mb=len(data) / (1024 * 1024),
                max_mb=max_bytes // (1024 * 1024),
            )

    @staticmethod
    def build_path(folder: str, owner_id: str, filename: str) -> str:
        """
        Unique blob path: {folder}/{owner_id}_{millis}_{filename}

        The timestamp keeps re-uploads from overwriting a blob that an older
        record may still reference.
        """
        safe_name = os.path.basename(filename).replace(" ", "_")
        return f"{folder}/{owner_id}_{int(time.time() * 1000)}_{safe_name}"

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def upload(self, path: str, data: bytes, content_type: str | None) -> str:
        """
        Upload bytes and return the download URL.

        Raises:
            StorageUploadError: If the Blob Store rejects the upload
        """
        try:
            url = self.blobs.put(path, data, content_type or "application/octet-stream")
        except RecordStoreError as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(e.message)

        logger.info(f"Uploaded file to storage: {path} ({len(data)} bytes)")
        return url

    def delete_quietly(self, path: str | None) -> bool:
        """
        Remove a blob that is no longer referenced.

        Failures are logged, never raised.
        """
        if not path:
            return False
        try:
            removed = self.blobs.delete(path)
        except RecordStoreError as e:
            logger.warning(f"Failed to delete blob {path}: {e}")
            return False

        if removed:
            logger.info(f"Deleted file from storage: {path}")
        return removed

    def log_orphan(self, path: str, error: Exception) -> None:
        """Record a blob whose metadata write failed after upload."""
        logger.error(f"Blob {path} uploaded but metadata update failed; orphaned: {error}")
