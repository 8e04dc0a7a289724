# =============================================================================
# core/services/resume_service.py - Resume Business Logic
# =============================================================================
# A user's resume is a blob plus metadata on their "users" document:
# resumeURL, resumePath, resumeName, resumeUpdatedAt and resumePublic.
#
# Public resumes can be browsed and reviewed by other users; see
# FeedbackService for the review threads.
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    ResumeNotFoundError,
    ResumeNotPublicError,
    UserNotFoundError,
    ValidationFailedError,
)
from core.models.user import PublicResume
from core.services.storage_service import StorageService
from core.services.user_service import USERS_COLLECTION
from lib.record_store import Filter, RecordStore, RecordStoreError
from lib.utils import utc_now

logger = logging.getLogger(__name__)

RESUMES_FOLDER = "resumes"


def _public_view(user_id: str, record: dict[str, Any]) -> PublicResume:
    return PublicResume(
        user_id=user_id,
        user_name=record.get("fullName"),
        college=record.get("college") or "Not specified",
        resume_url=record["resumeURL"],
        resume_name=record.get("resumeName"),
        resume_updated_at=record.get("resumeUpdatedAt"),
        photo_url=record.get("photoURL") or None,
    )


class ResumeService:
    """
    Service for resume upload, visibility and lookup.

    Example:
        service = ResumeService(store, StorageService(blobs))
        service.upload(user.id, "cv.pdf", data, "application/pdf")
        service.toggle_public(user.id)
    """

    def __init__(self, store: RecordStore, storage: StorageService):
        self.store = store
        self.storage = storage

    def _get_user(self, user_id: str) -> dict[str, Any]:
        record = self.store.get(USERS_COLLECTION, user_id)
        if record is None:
            raise UserNotFoundError(user_id)
        return record

    def upload(
        self,
        user_id: str,
        filename: str | None,
        data: bytes,
        content_type: str | None,
        allowed_extensions: list[str],
        max_bytes: int,
    ) -> dict[str, Any]:
        """
        Upload (or replace) the user's resume.

        The old blob is removed best-effort once the new one is recorded.
        Visibility carries over from the previous resume.

        Raises:
            NoFileError / InvalidFileTypeError / FileTooLargeError: Bad upload
            StorageUploadError: If the Blob Store rejects the file
        """
        self.storage.validate_extension(filename, allowed_extensions)
        self.storage.validate_size(data, max_bytes)

        previous = self.store.get(USERS_COLLECTION, user_id) or {}
        is_public = previous.get("resumePublic") is True

        path = self.storage.build_path(RESUMES_FOLDER, user_id, filename)
        url = self.storage.upload(path, data, content_type)

        fields = {
            "resumeURL": url,
            "resumePath": path,
            "resumeName": filename,
            "resumeUpdatedAt": utc_now(),
            "resumePublic": is_public,
        }
        try:
            if not self.store.update(USERS_COLLECTION, user_id, fields):
                self.store.create(
                    USERS_COLLECTION, {"createdAt": utc_now(), **fields}, record_id=user_id
                )
        except RecordStoreError as e:
            self.storage.log_orphan(path, e)
            raise

        old_path = previous.get("resumePath")
        if old_path and old_path != path:
            self.storage.delete_quietly(old_path)

        logger.info(f"Resume uploaded for {user_id}: {path}")
        return {
            "message": "Resume uploaded successfully",
            "resumeURL": url,
            "resumeName": filename,
            "isPublic": is_public,
        }

    def get_own(self, user_id: str) -> dict[str, Any]:
        record = self._get_user(user_id)
        if not record.get("resumeURL"):
            raise ResumeNotFoundError(user_id)
        return {
            "resumeURL": record["resumeURL"],
            "resumeName": record.get("resumeName"),
            "resumeUpdatedAt": record.get("resumeUpdatedAt"),
            "isPublic": record.get("resumePublic") is True,
        }

    def delete(self, user_id: str) -> None:
        """Clear the resume metadata, then remove the blob best-effort."""
        record = self._get_user(user_id)
        path = record.get("resumePath")
        if not path:
            raise ResumeNotFoundError(user_id)

        self.store.update(USERS_COLLECTION, user_id, {
            "resumeURL": None,
            "resumePath": None,
            "resumeName": None,
            "resumeUpdatedAt": None,
        })
        self.storage.delete_quietly(path)
        logger.info(f"Resume deleted for {user_id}")

    def list_public(self) -> list[PublicResume]:
        """Every resume whose owner made it public."""
        records = self.store.query(USERS_COLLECTION, [Filter("resumePublic", "==", True)])
        return [_public_view(r["id"], r) for r in records if r.get("resumeURL")]

    def toggle_public(self, user_id: str) -> dict[str, Any]:
        record = self._get_user(user_id)
        if not record.get("resumeURL"):
            raise ValidationFailedError("You need to upload a resume first")

        is_public = record.get("resumePublic") is not True
        self.store.update(USERS_COLLECTION, user_id, {"resumePublic": is_public})
        logger.info(f"Resume of {user_id} is now {'public' if is_public else 'private'}")
        return {
            "message": f"Resume is now {'public' if is_public else 'private'}",
            "isPublic": is_public,
        }

    def get_for_viewer(self, user_id: str, viewer_id: str) -> PublicResume:
        """
        Get someone's resume.

        Raises:
            ResumeNotPublicError: If it is private and the viewer isn't the owner
        """
        record = self._get_user(user_id)
        if not record.get("resumeURL"):
            raise ResumeNotFoundError(user_id)
        if record.get("resumePublic") is not True and viewer_id != user_id:
            raise ResumeNotPublicError(user_id)
        return _public_view(user_id, record)
