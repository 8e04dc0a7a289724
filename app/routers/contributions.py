# =============================================================================
# app/routers/contributions.py - Contribution Endpoints
# =============================================================================
# Users submit programs for review and see their own submissions.
# The /admin/* shortcuts predate the admin router and are kept for
# existing clients; both go through ModerationService.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.auth import AuthUser, get_current_admin, get_current_user
from app.dependencies import RecordStoreDep
from core.models.contribution import ApproveRequest, ContributionCreate, RejectRequest
from core.services.contribution_service import ContributionService
from core.services.moderation_service import ModerationService

router = APIRouter()

# Used by the reject shortcut when the admin gives no reason
DEFAULT_REJECTION_REASON = "Does not meet our criteria"


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_contribution(
    request: ContributionCreate,
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """
    Submit a program for review.

    Name and website are required. The contribution starts as pending.
    """
    contribution_id = ContributionService(store).submit(
        user_id=user.id,
        name=request.name,
        website=request.website,
        description=request.description,
        user_email=user.email,
        user_display_name=user.display_name,
    )
    return {
        "id": contribution_id,
        "message": "Contribution submitted successfully and pending review",
    }


@router.get("/my-contributions")
def my_contributions(
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
):
    """The caller's contributions, newest first."""
    return ContributionService(store).list_for_user(user.id)


# =============================================================================
# Admin shortcuts
# =============================================================================

@router.get("/admin/pending")
def pending_contributions(
    store: RecordStoreDep,
    admin: AuthUser = Depends(get_current_admin),
):
    """Every pending contribution, newest first."""
    return ContributionService(store).list_pending()


@router.put("/admin/approve/{contribution_id}")
def approve_contribution(
    contribution_id: Annotated[str, Path(description="Contribution id")],
    store: RecordStoreDep,
    request: ApproveRequest | None = None,
    admin: AuthUser = Depends(get_current_admin),
):
    """Approve a pending contribution; applicationMonth is required."""
    request = request or ApproveRequest()
    return ModerationService(store).approve(
        contribution_id,
        actor_id=admin.id,
        application_month=request.application_month,
        logo=request.logo,
    )


@router.put("/admin/reject/{contribution_id}")
def reject_contribution(
    contribution_id: Annotated[str, Path(description="Contribution id")],
    store: RecordStoreDep,
    request: RejectRequest | None = None,
    admin: AuthUser = Depends(get_current_admin),
):
    """Reject a pending contribution, with a default reason if none is given."""
    reason = request.reason if request and request.reason else DEFAULT_REJECTION_REASON
    return ModerationService(store).reject(contribution_id, actor_id=admin.id, reason=reason)
