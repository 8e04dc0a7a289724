# =============================================================================
# app/routers/admin.py - Admin Endpoints
# =============================================================================
# Contribution moderation, dashboard stats and program management.
# Every route requires a user listed in ADMIN_USER_IDS.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, get_current_admin
from app.config import settings
from app.dependencies import RecordStoreDep
from core.models.contribution import StatusUpdateRequest
from core.models.program import Program, ProgramUpdate
from core.services.contribution_service import ContributionService
from core.services.moderation_service import ModerationService
from core.services.program_service import ProgramService

router = APIRouter(dependencies=[Depends(get_current_admin)])


# =============================================================================
# Contributions
# =============================================================================

@router.get("/contributions")
def list_contributions(
    store: RecordStoreDep,
    status: Annotated[str, Query(description="pending, approved, rejected or all")] = "all",
    limit: Annotated[int | None, Query(ge=1, le=100, description="Page size")] = None,
    last_id: Annotated[str | None, Query(alias="lastId", description="Last id of the previous page")] = None,
):
    """
    Page through contributions, newest first.

    Pass pagination.lastId from one response as lastId to get the next page.
    """
    return ContributionService(store).list_page(
        status=status,
        limit=limit or settings.ADMIN_PAGE_SIZE,
        last_id=last_id,
    )


@router.get("/contributions/{contribution_id}")
def get_contribution(
    contribution_id: Annotated[str, Path(description="Contribution id")],
    store: RecordStoreDep,
):
    """Get one contribution with its moderation metadata."""
    return ContributionService(store).get(contribution_id)


@router.put("/contributions/{contribution_id}/status")
def update_contribution_status(
    contribution_id: Annotated[str, Path(description="Contribution id")],
    request: StatusUpdateRequest,
    store: RecordStoreDep,
    admin: AuthUser = Depends(get_current_admin),
):
    """
    Approve or reject a pending contribution.

    Approving requires applicationMonth and publishes a Program.
    Rejecting requires a reason.
    """
    return ModerationService(store).transition(
        contribution_id,
        actor_id=admin.id,
        status=request.status,
        application_month=request.application_month,
        reason=request.reason,
        logo=request.logo,
    )


@router.delete("/contributions/{contribution_id}")
def delete_contribution(
    contribution_id: Annotated[str, Path(description="Contribution id")],
    store: RecordStoreDep,
):
    """Delete a contribution. Programs published from it are kept."""
    ContributionService(store).delete(contribution_id)
    return {"message": "Contribution deleted successfully"}


@router.get("/dashboard-stats")
def dashboard_stats(store: RecordStoreDep):
    """Counts per status, total programs and the 5 latest contributions."""
    return ContributionService(store).dashboard_stats()


# =============================================================================
# Programs
# =============================================================================

@router.put("/programs/{program_id}", response_model=Program, response_model_by_alias=True)
def update_program(
    program_id: Annotated[str, Path(description="Program id")],
    request: ProgramUpdate,
    store: RecordStoreDep,
):
    """Edit a published program. Omitted fields are unchanged."""
    return ProgramService(store).update_program(program_id, request)


@router.delete("/programs/{program_id}")
def delete_program(
    program_id: Annotated[str, Path(description="Program id")],
    store: RecordStoreDep,
):
    """Delete a published program."""
    ProgramService(store).delete_program(program_id)
    return {"message": "Program deleted successfully"}
