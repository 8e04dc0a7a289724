# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Services raise these; main.py turns them into JSON responses. Anything
# else becomes a generic 500 with no internal detail.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ProgramHubException(Exception):
    """
    Base exception for the ProgramHub API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "PROGRAMHUB_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation Exceptions (400)
# =============================================================================

class ValidationFailedError(ProgramHubException):
    """Raised when a required field is missing or invalid."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            details={"field": field} if field else None,
        )


class InvalidStatusError(ProgramHubException):
    """Raised when a moderation status is not one we can transition to."""

    def __init__(self, status: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid status value: {status}",
            code="INVALID_STATUS",
            status_code=400,
            suggestion=f"Use one of: {', '.join(allowed)}",
            details={"status": status, "allowed": allowed},
        )


class NoFileError(ProgramHubException):
    """Raised when an upload endpoint receives no file."""

    def __init__(self, what: str = "file"):
        super().__init__(
            message=f"No {what} uploaded",
            code="NO_FILE",
            status_code=400,
            suggestion=f"Attach the {what} as multipart form data",
        )


class InvalidFileTypeError(ProgramHubException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(ProgramHubException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=400,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


# =============================================================================
# Not Found Exceptions (404)
# =============================================================================

class NotFoundError(ProgramHubException):
    """Raised when a referenced record does not exist."""

    def __init__(self, kind: str, record_id: str, suggestion: str | None = None):
        super().__init__(
            message=f"{kind} not found: {record_id}",
            code=f"{kind.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=404,
            suggestion=suggestion or f"Check that the {kind.lower()} id is correct",
            details={"id": record_id},
        )


class FeedbackNotFoundError(NotFoundError):
    def __init__(self, feedback_id: str):
        super().__init__("Feedback", feedback_id)


class ContributionNotFoundError(NotFoundError):
    def __init__(self, contribution_id: str):
        super().__init__("Contribution", contribution_id)


class ProgramNotFoundError(NotFoundError):
    def __init__(self, program_id: str):
        super().__init__("Program", program_id)


class TestimonialNotFoundError(NotFoundError):
    def __init__(self, testimonial_id: str):
        super().__init__("Testimonial", testimonial_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class ResumeNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__(
            "Resume",
            user_id,
            suggestion="Upload a resume first using POST /api/resume/upload",
        )


# =============================================================================
# Authorization Exceptions (401 / 403 / 429)
# =============================================================================

class FeedbackDeleteForbiddenError(ProgramHubException):
    """Only the feedback's author or the resume owner may delete it."""

    def __init__(self, feedback_id: str):
        super().__init__(
            message="You are not authorized to delete this feedback",
            code="FEEDBACK_DELETE_FORBIDDEN",
            status_code=403,
            details={"feedback_id": feedback_id},
        )


class AdminRequiredError(ProgramHubException):
    def __init__(self):
        super().__init__(
            message="Access denied: Admin privileges required",
            code="ADMIN_REQUIRED",
            status_code=403,
        )


class ResumeNotPublicError(ProgramHubException):
    def __init__(self, user_id: str):
        super().__init__(
            message="This resume is not public",
            code="RESUME_NOT_PUBLIC",
            status_code=403,
            details={"user_id": user_id},
        )


class InvalidCredentialsError(ProgramHubException):
    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AuthRateLimitedError(ProgramHubException):
    def __init__(self):
        super().__init__(
            message="Too many login attempts. Please try again later.",
            code="RATE_LIMITED",
            status_code=429,
            suggestion="Wait a few minutes before trying again",
        )


class SignupRejectedError(ProgramHubException):
    """Raised when the auth provider refuses a registration."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="SIGNUP_REJECTED",
            status_code=400,
        )


# =============================================================================
# Conflict Exceptions (409)
# =============================================================================

class VoteConflictError(ProgramHubException):
    """Raised when concurrent votes kept invalidating our read."""

    def __init__(self, feedback_id: str, attempts: int):
        super().__init__(
            message="Feedback was modified concurrently; vote not recorded",
            code="VOTE_CONFLICT",
            status_code=409,
            suggestion="Retry the vote",
            details={"feedback_id": feedback_id, "attempts": attempts},
        )


class InvalidTransitionError(ProgramHubException):
    """Raised when moderating a contribution that is no longer pending."""

    def __init__(self, contribution_id: str, current: str, requested: str):
        super().__init__(
            message=f"Contribution is already {current}; cannot mark it {requested}",
            code="INVALID_TRANSITION",
            status_code=409,
            details={
                "contribution_id": contribution_id,
                "current_status": current,
                "requested_status": requested,
            },
        )


# =============================================================================
# Store Exceptions (500)
# =============================================================================

class StorageUploadError(ProgramHubException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to upload file to storage",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


class IndexRequiredError(ProgramHubException):
    """Raised when an ordered listing can't be served even unordered."""

    def __init__(self, collection: str, index_hint: str | None = None):
        super().__init__(
            message="Database index required. Please contact the administrator with this information.",
            code="INDEX_REQUIRED",
            status_code=500,
            suggestion=index_hint,
            details={"collection": collection},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def programhub_exception_handler(
    request: Request,
    exc: ProgramHubException
) -> JSONResponse:
    """
    Convert ProgramHubException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
