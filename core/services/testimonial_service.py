# =============================================================================
# core/services/testimonial_service.py - Video Testimonials
# =============================================================================
# Public listing plus admin create/update/delete. Videos live in the Blob
# Store under testimonials/; the record keeps the blob path in "fileName".
# =============================================================================

import logging
import math
from dataclasses import dataclass
from typing import Any

from app.exceptions import NoFileError, TestimonialNotFoundError, ValidationFailedError
from core.models.testimonial import (
    DEFAULT_THUMBNAIL_URL,
    PagePagination,
    Testimonial,
    TestimonialPage,
)
from core.services.listing import fetch_ordered
from core.services.storage_service import StorageService
from lib.record_store import OrderBy, RecordStore, RecordStoreError
from lib.utils import utc_now

logger = logging.getLogger(__name__)

TESTIMONIALS_COLLECTION = "testimonials"
TESTIMONIALS_FOLDER = "testimonials"


@dataclass
class VideoUpload:
    """An uploaded video file, already read into memory."""

    filename: str | None
    data: bytes
    content_type: str | None


class TestimonialService:
    """Service for video testimonials."""

    def __init__(self, store: RecordStore, storage: StorageService):
        self.store = store
        self.storage = storage

    def list_page(self, page: int = 1, page_size: int = 6) -> TestimonialPage:
        """
        Page through testimonials, newest first.

        Pages are 1-based; a page past the end is empty.
        """
        records = fetch_ordered(
            self.store,
            TESTIMONIALS_COLLECTION,
            order_by=OrderBy("createdAt", descending=True),
        )
        total_count = len(records)
        total_pages = math.ceil(total_count / page_size)
        offset = (page - 1) * page_size

        return TestimonialPage(
            testimonials=[Testimonial.from_record(r) for r in records[offset:offset + page_size]],
            pagination=PagePagination(
                current_page=page,
                total_pages=total_pages,
                total_count=total_count,
                has_more=page < total_pages,
            ),
        )

    def get(self, testimonial_id: str) -> Testimonial:
        record = self.store.get(TESTIMONIALS_COLLECTION, testimonial_id)
        if record is None:
            raise TestimonialNotFoundError(testimonial_id)
        return Testimonial.from_record(record)

    def _store_video(self, video: VideoUpload, max_bytes: int) -> tuple[str, str]:
        self.storage.validate_content_type(video.filename, video.content_type, "video/")
        self.storage.validate_size(video.data, max_bytes)
        path = self.storage.build_path(TESTIMONIALS_FOLDER, "video", video.filename)
        return path, self.storage.upload(path, video.data, video.content_type)

    def create(
        self,
        actor_id: str,
        title: str | None,
        video: VideoUpload | None,
        max_bytes: int,
        description: str | None = None,
        program_name: str | None = None,
    ) -> Testimonial:
        """
        Upload a video and record the testimonial.

        Raises:
            ValidationFailedError: If the title is blank
            NoFileError: If no video was sent
        """
        if not title or not title.strip():
            raise ValidationFailedError("Title and video file are required", field="title")
        if video is None or not video.data:
            raise NoFileError("video")

        path, url = self._store_video(video, max_bytes)
        fields = {
            "title": title,
            "description": description or "",
            "programName": program_name or "",
            "videoUrl": url,
            "thumbnailUrl": DEFAULT_THUMBNAIL_URL,
            "fileName": path,
            "createdAt": utc_now(),
            "createdBy": actor_id,
        }
        try:
            testimonial_id = self.store.create(TESTIMONIALS_COLLECTION, fields)
        except RecordStoreError as e:
            self.storage.log_orphan(path, e)
            raise

        logger.info(f"Testimonial {testimonial_id} created by {actor_id}")
        return Testimonial.from_record({"id": testimonial_id, **fields})

    def update(
        self,
        testimonial_id: str,
        actor_id: str,
        max_bytes: int,
        title: str | None = None,
        description: str | None = None,
        program_name: str | None = None,
        video: VideoUpload | None = None,
    ) -> Testimonial:
        """
        Update fields and optionally replace the video.

        A blank title keeps the current one; description and program name are
        replaced whenever they are sent. The old video is removed best-effort.
        """
        current = self.get(testimonial_id)

        fields: dict[str, Any] = {
            "title": title or current.title,
            "updatedAt": utc_now(),
            "updatedBy": actor_id,
        }
        if description is not None:
            fields["description"] = description
        if program_name is not None:
            fields["programName"] = program_name

        new_path = None
        if video is not None and video.data:
            new_path, url = self._store_video(video, max_bytes)
            fields["videoUrl"] = url
            fields["fileName"] = new_path

        try:
            self.store.update(TESTIMONIALS_COLLECTION, testimonial_id, fields)
        except RecordStoreError as e:
            if new_path:
                self.storage.log_orphan(new_path, e)
            raise

        if new_path:
            self.storage.delete_quietly(current.file_name)

        logger.info(f"Testimonial {testimonial_id} updated by {actor_id}")
        return self.get(testimonial_id)

    def delete(self, testimonial_id: str) -> None:
        current = self.get(testimonial_id)
        self.store.delete(TESTIMONIALS_COLLECTION, testimonial_id)
        self.storage.delete_quietly(current.file_name)
        logger.info(f"Testimonial {testimonial_id} deleted")
