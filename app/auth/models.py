# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database. is_admin comes from ADMIN_USER_IDS.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    is_admin: bool = False


class LoginRequest(BaseModel):
    """Email/password sign-in."""
    email: str = Field(..., examples=["ada@example.com"])
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """
    Email/password registration.

    Example:
        {"email": "ada@example.com", "password": "...", "displayName": "Ada Lovelace"}
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str = ""
    password: str = ""
    display_name: str = ""
    college: Optional[str] = None


class GoogleLoginRequest(BaseModel):
    """Google sign-in with an ID token (credential) obtained client-side."""

    credential: str = ""
    access_token: Optional[str] = None


class SessionResponse(BaseModel):
    """Tokens and identity returned after a successful sign-in."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user: dict


class UserResponse(BaseModel):
    """
    Current user info for GET /auth/me.

    Includes profile data from the "users" collection when it exists.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    is_admin: bool = False
