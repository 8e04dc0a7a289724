# =============================================================================
# core/services/moderation_service.py - Contribution Moderation Workflow
# =============================================================================
# Moves a contribution out of "pending":
#   approve -> publishes one Program, then marks the contribution approved
#   reject  -> records the reason and marks the contribution rejected
#
# Both targets are terminal. The Program is written before the status, so
# if the status write fails a retry publishes the Program again
# (at-least-once publication).
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    ContributionNotFoundError,
    InvalidStatusError,
    InvalidTransitionError,
    ValidationFailedError,
)
from core.models.contribution import Contribution, ContributionStatus
from lib.record_store import RecordStore
from lib.utils import utc_now

logger = logging.getLogger(__name__)

CONTRIBUTIONS_COLLECTION = "programstd"
PROGRAMS_COLLECTION = "programs"

# Statuses an admin may move a pending contribution to
TRANSITION_TARGETS = [ContributionStatus.APPROVED.value, ContributionStatus.REJECTED.value]


class ModerationService:
    """
    Admin moderation of submitted programs.

    Example:
        result = ModerationService(store).approve(contribution_id, admin.id, "March")
        result["programId"]  # id of the published Program
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def _get_pending(self, contribution_id: str, requested: ContributionStatus) -> Contribution:
        record = self.store.get(CONTRIBUTIONS_COLLECTION, contribution_id)
        if record is None:
            raise ContributionNotFoundError(contribution_id)

        contribution = Contribution.from_record(record)
        if contribution.status is not ContributionStatus.PENDING:
            raise InvalidTransitionError(
                contribution_id, contribution.status.value, requested.value
            )
        return contribution

    def approve(
        self,
        contribution_id: str,
        actor_id: str,
        application_month: str | None,
        logo: str | None = "",
    ) -> dict[str, Any]:
        """
        Approve a pending contribution and publish it as a Program.

        Raises:
            ValidationFailedError: If application_month is blank (nothing written)
            ContributionNotFoundError: If the contribution doesn't exist
            InvalidTransitionError: If it isn't pending
        """
        if not application_month or not application_month.strip():
            raise ValidationFailedError(
                "Application month is required for approval", field="applicationMonth"
            )

        contribution = self._get_pending(contribution_id, ContributionStatus.APPROVED)
        now = utc_now()

        program_id = self.store.create(PROGRAMS_COLLECTION, {
            "name": contribution.name,
            "applicationLink": contribution.website,
            "description": contribution.description or "",
            "applicationMonth": application_month,
            "logo": logo or "",
            "createdAt": now,
            "contributedBy": contribution.user_id,
            "contributionId": contribution.id,
        })

        self.store.update(CONTRIBUTIONS_COLLECTION, contribution_id, {
            "status": ContributionStatus.APPROVED.value,
            "approvedAt": now,
            "approvedBy": actor_id,
            "applicationMonth": application_month,
            "updatedAt": now,
            "updatedBy": actor_id,
        })

        logger.info(
            f"Contribution {contribution_id} approved by {actor_id}; program {program_id} published"
        )
        return {
            "message": "Contribution approved and added to programs",
            "status": ContributionStatus.APPROVED.value,
            "programId": program_id,
        }

    def reject(
        self,
        contribution_id: str,
        actor_id: str,
        reason: str | None,
    ) -> dict[str, Any]:
        """
        Reject a pending contribution.

        Raises:
            ValidationFailedError: If reason is blank
            ContributionNotFoundError: If the contribution doesn't exist
            InvalidTransitionError: If it isn't pending
        """
        if not reason or not reason.strip():
            raise ValidationFailedError("Rejection reason is required", field="reason")

        self._get_pending(contribution_id, ContributionStatus.REJECTED)
        now = utc_now()

        self.store.update(CONTRIBUTIONS_COLLECTION, contribution_id, {
            "status": ContributionStatus.REJECTED.value,
            "rejectedAt": now,
            "rejectedBy": actor_id,
            "rejectionReason": reason,
            "updatedAt": now,
            "updatedBy": actor_id,
        })

        logger.info(f"Contribution {contribution_id} rejected by {actor_id}")
        return {
            "message": "Contribution rejected",
            "status": ContributionStatus.REJECTED.value,
        }

    def transition(
        self,
        contribution_id: str,
        actor_id: str,
        status: str,
        application_month: str | None = None,
        reason: str | None = None,
        logo: str | None = "",
    ) -> dict[str, Any]:
        """
        Dispatch on the requested status.

        Raises:
            InvalidStatusError: If status is not "approved" or "rejected"
        """
        if status == ContributionStatus.APPROVED.value:
            return self.approve(contribution_id, actor_id, application_month, logo)
        if status == ContributionStatus.REJECTED.value:
            return self.reject(contribution_id, actor_id, reason)
        raise InvalidStatusError(str(status), TRANSITION_TARGETS)
