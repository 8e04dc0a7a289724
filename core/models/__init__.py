# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - feedback.py: Threaded resume feedback
# - contribution.py: User-submitted programs and moderation requests
# - program.py: Published catalog entries
# - testimonial.py: Video testimonials
# - user.py: User profile and public resume schemas
#
# Persisted/JSON field names are camelCase; attributes are snake_case.
# =============================================================================

from .feedback import FeedbackCreate, FeedbackItem, VoteResponse
from .contribution import (
    ApproveRequest,
    Contribution,
    ContributionCreate,
    ContributionStatus,
    RejectRequest,
    StatusUpdateRequest,
)
from .program import Program, ProgramUpdate
from .testimonial import DEFAULT_THUMBNAIL_URL, PagePagination, Testimonial, TestimonialPage
from .user import ProfileUpdate, PublicResume

__all__ = [
    # Feedback
    "FeedbackCreate",
    "FeedbackItem",
    "VoteResponse",
    # Contribution
    "ApproveRequest",
    "Contribution",
    "ContributionCreate",
    "ContributionStatus",
    "RejectRequest",
    "StatusUpdateRequest",
    # Program
    "Program",
    "ProgramUpdate",
    # Testimonial
    "DEFAULT_THUMBNAIL_URL",
    "PagePagination",
    "Testimonial",
    "TestimonialPage",
    # User
    "ProfileUpdate",
    "PublicResume",
]
