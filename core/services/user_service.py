# =============================================================================
# core/services/user_service.py - User Profile Business Logic
# =============================================================================
# Profiles live in "users" under the auth user id. A profile is created from
# token claims the first time it is requested.
# =============================================================================

import logging
from typing import Any

from app.exceptions import ValidationFailedError
from core.models.user import ProfileUpdate
from core.services.storage_service import StorageService
from lib.record_store import RecordStore, RecordStoreError
from lib.utils import utc_now

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
PROFILE_PICTURES_FOLDER = "profilePictures"


class UserService:
    """Service for user profiles."""

    def __init__(self, store: RecordStore):
        self.store = store

    def get_or_create_profile(
        self,
        user_id: str,
        email: str | None = None,
        display_name: str | None = None,
        photo_url: str | None = None,
    ) -> dict[str, Any]:
        """
        Get a user's profile, creating it from auth claims if missing.

        Returns:
            The profile document (camelCase keys, including "id")
        """
        record = self.store.get(USERS_COLLECTION, user_id)
        if record is not None:
            return record

        fields = {
            "fullName": display_name or "",
            "email": email or "",
            "phoneNumber": "",
            "college": "",
            "photoURL": photo_url or "",
            "createdAt": utc_now(),
        }
        self.store.create(USERS_COLLECTION, fields, record_id=user_id)
        logger.info(f"Created profile for user {user_id}")
        return {"id": user_id, **fields}

    def update_profile(self, user_id: str, update: ProfileUpdate) -> dict[str, Any]:
        """
        Update the writable profile fields.

        Email is not writable here; it belongs to the auth provider.
        """
        fields = update.model_dump(by_alias=True, exclude_unset=True)
        if not fields:
            raise ValidationFailedError("No profile fields to update")

        fields["updatedAt"] = utc_now()
        self._write(user_id, fields)
        logger.info(f"Updated profile of {user_id}: {sorted(fields)}")
        return fields

    def upload_profile_image(
        self,
        user_id: str,
        storage: StorageService,
        filename: str | None,
        data: bytes,
        content_type: str | None,
        max_bytes: int,
    ) -> dict[str, str]:
        """
        Store a new profile picture and point the profile at it.

        The previous picture is removed best-effort.

        Returns:
            {"downloadURL", "storagePath"}
        """
        storage.validate_content_type(filename, content_type, "image/")
        storage.validate_size(data, max_bytes)

        previous = self.store.get(USERS_COLLECTION, user_id) or {}
        path = storage.build_path(PROFILE_PICTURES_FOLDER, user_id, filename)
        url = storage.upload(path, data, content_type)

        try:
            self._write(user_id, {
                "photoURL": url,
                "photoStoragePath": path,
                "updatedAt": utc_now(),
            })
        except RecordStoreError as e:
            storage.log_orphan(path, e)
            raise

        storage.delete_quietly(previous.get("photoStoragePath"))
        return {"downloadURL": url, "storagePath": path}

    def _write(self, user_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into the profile, creating the document if needed."""
        if not self.store.update(USERS_COLLECTION, user_id, fields):
            self.store.create(USERS_COLLECTION, {"createdAt": utc_now(), **fields}, record_id=user_id)
