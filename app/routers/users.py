# =============================================================================
# app/routers/users.py - User Profile Endpoints
# =============================================================================
# All endpoints act on the authenticated user's own profile.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.dependencies import BlobStoreDep, RecordStoreDep
from app.exceptions import NoFileError
from core.models.user import ProfileUpdate
from core.services.storage_service import StorageService
from core.services.user_service import UserService

router = APIRouter()


@router.get("/profile")
def get_profile(
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Get the caller's profile, creating it from token claims on first access."""
    return UserService(store).get_or_create_profile(
        user.id,
        email=user.email,
        display_name=user.display_name,
        photo_url=user.photo_url,
    )


@router.put("/profile")
def update_profile(
    request: ProfileUpdate,
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Update fullName, phoneNumber, college or photoURL.

    Email is managed by the auth provider and can't be changed here.
    """
    UserService(store).update_profile(user.id, request)
    return {"message": "Profile updated successfully"}


@router.post("/upload-profile-image")
def upload_profile_image(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    profile_image: Annotated[UploadFile | None, File(alias="profileImage")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """Upload a new profile picture (multipart field "profileImage")."""
    if profile_image is None:
        raise NoFileError("image file")

    return UserService(store).upload_profile_image(
        user.id,
        StorageService(blobs),
        filename=profile_image.filename,
        data=profile_image.file.read(),
        content_type=profile_image.content_type,
        max_bytes=settings.max_image_size_bytes,
    )
