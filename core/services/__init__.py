# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import AuthService
from .contribution_service import ContributionService
from .feedback_service import FeedbackService
from .listing import fetch_ordered
from .moderation_service import ModerationService
from .program_service import ProgramService
from .resume_service import ResumeService
from .storage_service import StorageService
from .testimonial_service import TestimonialService, VideoUpload
from .user_service import UserService

__all__ = [
    "AuthService",
    "ContributionService",
    "FeedbackService",
    "fetch_ordered",
    "ModerationService",
    "ProgramService",
    "ResumeService",
    "StorageService",
    "TestimonialService",
    "VideoUpload",
    "UserService",
]
