# =============================================================================
# app/routers/resume.py - Resume and Resume Feedback Endpoints
# =============================================================================
# Resume upload/visibility plus threaded peer feedback:
#   POST   /feedback/{userId}               comment or reply on a resume
#   GET    /feedback/{userId}               reply tree for a resume
#   DELETE /feedback/{feedbackId}           ?deleteReplies=true|false
#   POST   /feedback/{feedbackId}/upvote    toggle
#   POST   /feedback/{feedbackId}/downvote  toggle
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.dependencies import BlobStoreDep, RecordStoreDep
from app.exceptions import NoFileError
from core.models.feedback import FeedbackCreate, VoteResponse
from core.models.user import PublicResume
from core.services.feedback_service import FeedbackService
from core.services.resume_service import ResumeService
from core.services.storage_service import StorageService
from lib.votes import VoteDirection

router = APIRouter()


# =============================================================================
# Resume
# =============================================================================

@router.post("/upload")
def upload_resume(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    resume: Annotated[UploadFile | None, File(description="PDF, DOC or DOCX")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload or replace the caller's resume (multipart field "resume").

    Allowed: .pdf, .doc, .docx up to MAX_RESUME_SIZE_MB.
    """
    if resume is None:
        raise NoFileError()

    return ResumeService(store, StorageService(blobs)).upload(
        user.id,
        filename=resume.filename,
        data=resume.file.read(),
        content_type=resume.content_type,
        allowed_extensions=settings.resume_extensions_list,
        max_bytes=settings.max_resume_size_bytes,
    )


@router.get("")
def get_resume(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Get the caller's resume metadata."""
    return ResumeService(store, StorageService(blobs)).get_own(user.id)


@router.delete("")
def delete_resume(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Delete the caller's resume."""
    ResumeService(store, StorageService(blobs)).delete(user.id)
    return {"message": "Resume deleted successfully"}


@router.get("/public", response_model=list[PublicResume], response_model_by_alias=True)
def list_public_resumes(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Resumes whose owners opted in to peer review."""
    return ResumeService(store, StorageService(blobs)).list_public()


@router.put("/toggle-public")
def toggle_public(
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Flip the caller's resume between public and private."""
    return ResumeService(store, StorageService(blobs)).toggle_public(user.id)


@router.get("/user/{user_id}", response_model=PublicResume, response_model_by_alias=True)
def get_user_resume(
    user_id: Annotated[str, Path(description="Owner's user id")],
    store: RecordStoreDep,
    blobs: BlobStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """View another user's resume. Private resumes are visible to their owner only."""
    return ResumeService(store, StorageService(blobs)).get_for_viewer(user_id, viewer_id=user.id)


# =============================================================================
# Feedback
# =============================================================================

@router.post("/feedback/{user_id}", status_code=status.HTTP_201_CREATED)
def add_feedback(
    user_id: Annotated[str, Path(description="Resume owner's user id")],
    request: FeedbackCreate,
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Comment on a resume, or reply to a comment by passing parentId."""
    item = FeedbackService(store).add_feedback(
        resume_owner_id=user_id,
        reviewer_id=user.id,
        content=request.content,
        parent_id=request.parent_id,
    )
    return item.to_response(user.id)


@router.get("/feedback/{user_id}")
def get_feedback(
    user_id: Annotated[str, Path(description="Resume owner's user id")],
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Get the feedback tree for a resume.

    Top-level comments newest first; replies oldest first at every depth.
    """
    return FeedbackService(store).list_thread(user_id, viewer_id=user.id)


@router.delete("/feedback/{feedback_id}")
def delete_feedback(
    feedback_id: Annotated[str, Path(description="Feedback id")],
    store: RecordStoreDep,
    delete_replies: Annotated[
        bool,
        Query(alias="deleteReplies", description="Also delete every reply beneath it"),
    ] = True,
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete a comment. Allowed for its author and the resume owner.

    With deleteReplies=false, direct replies are kept and become top-level.
    """
    deleted = FeedbackService(store).delete_feedback(
        feedback_id, actor_id=user.id, cascade=delete_replies
    )
    return {
        "message": "Feedback deleted successfully",
        "deletedCount": len(deleted),
    }


@router.post("/feedback/{feedback_id}/upvote", response_model=VoteResponse, response_model_exclude_none=True)
def upvote_feedback(
    feedback_id: Annotated[str, Path(description="Feedback id")],
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Upvote, or remove the caller's upvote if already given."""
    return FeedbackService(store).vote(feedback_id, user.id, VoteDirection.UP)


@router.post("/feedback/{feedback_id}/downvote", response_model=VoteResponse, response_model_exclude_none=True)
def downvote_feedback(
    feedback_id: Annotated[str, Path(description="Feedback id")],
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """Downvote, or remove the caller's downvote if already given."""
    return FeedbackService(store).vote(feedback_id, user.id, VoteDirection.DOWN)
