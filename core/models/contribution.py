# =============================================================================
# core/models/contribution.py - Contribution Schemas
# =============================================================================
# A contribution is a user-submitted program awaiting moderation.
# Stored in the "programstd" collection.
#
# Flow: pending -> approved (publishes a Program)
#       pending -> rejected
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContributionStatus(str, Enum):
    """
    Moderation states for a contribution.

    - pending: submitted, waiting for an admin
    - approved: accepted, a Program was published from it (terminal)
    - rejected: declined with a reason (terminal)
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Contribution(BaseModel):
    """A submitted program as stored in "programstd"."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    website: str
    description: str = ""
    user_id: str
    user_email: str | None = None
    user_display_name: str | None = None
    status: ContributionStatus = ContributionStatus.PENDING
    created_at: datetime | None = None

    # Transition metadata
    updated_at: datetime | None = None
    updated_by: str | None = None
    approved_at: datetime | None = None
    approved_by: str | None = None
    application_month: str | None = None
    rejected_at: datetime | None = None
    rejected_by: str | None = None
    rejection_reason: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Contribution":
        return cls.model_validate(record)


class ContributionCreate(BaseModel):
    """
    Request body for submitting a program.

    Example:
        {"name": "Foo Fellowship", "website": "https://foo.org", "description": "..."}
    """

    name: str = Field(default="", description="Program name (required)")
    website: str = Field(default="", description="Program website (required)")
    description: str | None = Field(default=None, description="Optional description")


class StatusUpdateRequest(BaseModel):
    """
    Admin request to move a contribution to a new status.

    applicationMonth is required when approving; reason when rejecting.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    application_month: str | None = None
    reason: str | None = None
    logo: str | None = None


class ApproveRequest(BaseModel):
    """Body of the admin approve shortcut."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    application_month: str | None = None
    logo: str | None = None


class RejectRequest(BaseModel):
    """Body of the admin reject shortcut."""

    reason: str | None = None
