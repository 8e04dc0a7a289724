# =============================================================================
# app/routers/testimonials.py - Video Testimonial Endpoints
# =============================================================================
# Listing and detail are public. Create/update/delete require an admin and
# take multipart form data with an optional "video" file.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from app.auth import AuthUser, get_current_admin
from app.config import settings
from app.dependencies import BlobStoreDep, RecordStoreDep
from core.models.testimonial import Testimonial, TestimonialPage
from core.services.storage_service import StorageService
from core.services.testimonial_service import TestimonialService, VideoUpload

router = APIRouter()


def _video(upload: UploadFile | None) -> VideoUpload | None:
    if upload is None:
        return None
    return VideoUpload(
        filename=upload.filename,
        data=upload.file.read(),
        content_type=upload.content_type,
    )


@router.get("", response_model=TestimonialPage, response_model_by_alias=True)
def list_testimonials(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int | None, Query(ge=1, le=100, description="Items per page")] = None,
):
    """List testimonials, newest first, one page at a time."""
    return TestimonialService(store, StorageService(blobs)).list_page(
        page=page,
        page_size=limit or settings.TESTIMONIALS_PAGE_SIZE,
    )


@router.get("/{testimonial_id}", response_model=Testimonial, response_model_by_alias=True)
def get_testimonial(
    testimonial_id: Annotated[str, Path(description="Testimonial id")],
    store: RecordStoreDep,
    blobs: BlobStoreDep,
):
    """Get one testimonial."""
    return TestimonialService(store, StorageService(blobs)).get(testimonial_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Testimonial,
    response_model_by_alias=True,
)
def create_testimonial(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    program_name: Annotated[str | None, Form(alias="programName")] = None,
    video: Annotated[UploadFile | None, File(description="Video file")] = None,
    admin: AuthUser = Depends(get_current_admin),
):
    """Upload a video testimonial. Title and video are required."""
    return TestimonialService(store, StorageService(blobs)).create(
        actor_id=admin.id,
        title=title,
        video=_video(video),
        max_bytes=settings.max_video_size_bytes,
        description=description,
        program_name=program_name,
    )


@router.put("/{testimonial_id}", response_model=Testimonial, response_model_by_alias=True)
def update_testimonial(
    testimonial_id: Annotated[str, Path(description="Testimonial id")],
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    program_name: Annotated[str | None, Form(alias="programName")] = None,
    video: Annotated[UploadFile | None, File(description="Replacement video")] = None,
    admin: AuthUser = Depends(get_current_admin),
):
    """Update a testimonial; sending a video replaces the old one."""
    return TestimonialService(store, StorageService(blobs)).update(
        testimonial_id,
        actor_id=admin.id,
        max_bytes=settings.max_video_size_bytes,
        title=title,
        description=description,
        program_name=program_name,
        video=_video(video),
    )


@router.delete("/{testimonial_id}")
def delete_testimonial(
    testimonial_id: Annotated[str, Path(description="Testimonial id")],
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    admin: AuthUser = Depends(get_current_admin),
):
    """Delete a testimonial and its video."""
    TestimonialService(store, StorageService(blobs)).delete(testimonial_id)
    return {"message": "Testimonial deleted successfully"}
