# =============================================================================
# core/models/feedback.py - Resume Feedback Schemas
# =============================================================================
# These models define the shape of threaded resume feedback:
# - FeedbackItem: one comment or reply as stored in "resumeFeedback"
# - FeedbackCreate: request body for posting a comment/reply
# - VoteResponse: result of an upvote/downvote call
#
# A FeedbackItem points at its parent by id only. The reply tree is rebuilt
# on every read by lib.feedback_tree.build_tree.
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class FeedbackItem(BaseModel):
    """
    One feedback comment on a resume.

    Attribute names are snake_case; the persisted/JSON names are camelCase
    (resumeOwnerId, upvotedBy, ...).

    Invariant: a reviewer id is never in both upvoted_by and downvoted_by.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    resume_owner_id: str
    reviewer_id: str
    reviewer_name: str | None = None
    reviewer_photo_url: str | None = Field(default=None, alias="reviewerPhotoURL")
    content: str = ""

    # None for a top-level comment
    parent_id: str | None = None

    votes: int = 0
    upvoted_by: set[str] = Field(default_factory=set)
    downvoted_by: set[str] = Field(default_factory=set)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("parent_id", mode="before")
    @classmethod
    def _blank_parent_is_none(cls, value: Any) -> Any:
        return value or None

    @field_validator("votes", mode="before")
    @classmethod
    def _missing_votes_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("upvoted_by", "downvoted_by", mode="before")
    @classmethod
    def _missing_voters_is_empty(cls, value: Any) -> Any:
        return set() if value is None else value

    @field_serializer("upvoted_by", "downvoted_by")
    def _serialize_voters(self, voters: set[str]) -> list[str]:
        return sorted(voters)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "FeedbackItem":
        """Build from a Record Store document (camelCase keys)."""
        return cls.model_validate(record)

    def to_response(self, viewer_id: str | None = None) -> dict[str, Any]:
        """
        Serialize for API responses, flagging the viewer's own vote.

        Example:
            {"id": "...", "votes": 2, "upvoted": True, "downvoted": False, ...}
        """
        data = self.model_dump(by_alias=True, mode="json")
        data["upvoted"] = viewer_id is not None and viewer_id in self.upvoted_by
        data["downvoted"] = viewer_id is not None and viewer_id in self.downvoted_by
        return data


class FeedbackCreate(BaseModel):
    """Request body for adding feedback to a resume."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str = Field(default="", description="Comment text (must not be blank)")
    parent_id: str | None = Field(
        default=None,
        description="Id of the comment being replied to; omit for a top-level comment",
    )


class VoteResponse(BaseModel):
    """Result of an upvote or downvote."""

    message: str
    votes: int
    upvoted: bool | None = None
    downvoted: bool | None = None
