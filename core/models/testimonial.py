# =============================================================================
# core/models/testimonial.py - Testimonial Schemas
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Served until real thumbnails are generated for uploaded videos
DEFAULT_THUMBNAIL_URL = "/img/default-thumbnail.jpg"


class Testimonial(BaseModel):
    """A video testimonial as stored in "testimonials"."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str = ""
    program_name: str = ""
    video_url: str | None = None
    thumbnail_url: str = DEFAULT_THUMBNAIL_URL
    # Blob path of the video, kept so it can be replaced/removed
    file_name: str | None = None
    created_at: datetime | None = None
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Testimonial":
        return cls.model_validate(record)


class PagePagination(BaseModel):
    """Page-based pagination info."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int
    total_pages: int
    total_count: int
    has_more: bool


class TestimonialPage(BaseModel):
    """One page of testimonials."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    testimonials: list[Testimonial]
    pagination: PagePagination
