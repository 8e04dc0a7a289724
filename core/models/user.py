# =============================================================================
# core/models/user.py - User Profile Schemas
# =============================================================================
# Profiles live in the "users" collection, keyed by the Supabase Auth user id.
# The same document carries the user's resume metadata.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProfileUpdate(BaseModel):
    """
    Request body for PUT /users/profile.

    Example:
        {"fullName": "Ada Lovelace", "college": "Howard University"}
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str | None = None
    phone_number: str | None = None
    college: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")


class PublicResume(BaseModel):
    """A resume visible to other users for review."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    user_name: str | None = None
    college: str = "Not specified"
    resume_url: str = Field(alias="resumeURL")
    resume_name: str | None = None
    resume_updated_at: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
