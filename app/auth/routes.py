# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Credential exchange with Supabase Auth (password, Google ID token) plus
# token introspection. Logout is stateless: the client drops its token.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user
from app.auth.models import (
    AuthUser,
    GoogleLoginRequest,
    LoginRequest,
    SessionResponse,
    SignupRequest,
    UserResponse,
)
from app.dependencies import RecordStoreDep
from core.services.auth_service import AuthService
from core.services.user_service import USERS_COLLECTION

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=SessionResponse, response_model_by_alias=True)
def login(request: LoginRequest, store: RecordStoreDep):
    """
    Sign in with email and password.

    Raises:
        401: Invalid credentials
        429: Too many attempts
    """
    return AuthService(store).login(request.email, request.password)


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionResponse,
    response_model_by_alias=True,
)
def signup(request: SignupRequest, store: RecordStoreDep):
    """
    Register with email, password and display name.

    Raises:
        400: Missing fields, email already registered, weak password
    """
    return AuthService(store).signup(
        email=request.email,
        password=request.password,
        display_name=request.display_name,
        college=request.college,
    )


@router.post("/google", response_model=SessionResponse, response_model_by_alias=True)
def google_login(request: GoogleLoginRequest, store: RecordStoreDep):
    """Sign in with a Google ID token obtained client-side."""
    return AuthService(store).google(request.credential, request.access_token)


@router.post("/logout")
async def logout():
    """Nothing to revoke server-side; the client discards its token."""
    return {"message": "Logged out successfully"}


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user": user.model_dump(),
    }


@router.get("/me", response_model=UserResponse, response_model_by_alias=True)
def get_current_user_info(
    store: RecordStoreDep,
    user: AuthUser = Depends(get_current_user),
) -> UserResponse:
    """
    Get the current user with profile data when a profile exists.

    Raises:
        401: If not authenticated
    """
    profile = store.get(USERS_COLLECTION, user.id) or {}
    return UserResponse(
        id=user.id,
        email=user.email or profile.get("email"),
        full_name=profile.get("fullName") or user.display_name,
        photo_url=profile.get("photoURL") or user.photo_url,
        is_admin=user.is_admin,
    )
