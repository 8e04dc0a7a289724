# =============================================================================
# core/services/auth_service.py - Sign-in via Supabase Auth
# =============================================================================
# Password and Google sign-in are delegated to Supabase Auth; this service
# maps provider errors to API errors and keeps the "users" profile in step
# (created on signup / first Google login, lastLogin touched on every login).
#
# Every call uses a fresh anon client so sessions never leak between
# requests or into the shared service-role client.
# =============================================================================

import logging
from typing import Any, Callable

from supabase import AuthApiError, Client

from app.exceptions import (
    AuthRateLimitedError,
    InvalidCredentialsError,
    SignupRejectedError,
    ValidationFailedError,
)
from core.services.user_service import USERS_COLLECTION
from lib.record_store import RecordStore
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now

logger = logging.getLogger(__name__)


def _session_payload(response: Any, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    """Flatten a Supabase AuthResponse into the API's session shape."""
    user = response.user
    session = response.session
    metadata = user.user_metadata or {}
    return {
        "token": session.access_token if session else None,
        "refreshToken": session.refresh_token if session else None,
        "expiresIn": session.expires_in if session else None,
        "user": {
            "uid": user.id,
            "email": user.email,
            "displayName": metadata.get("full_name") or metadata.get("name"),
            "photoURL": metadata.get("avatar_url") or metadata.get("picture"),
            **(extra or {}),
        },
    }


class AuthService:
    """
    Service for credential exchange with Supabase Auth.

    Example:
        payload = AuthService(store).login("ada@example.com", "secret")
        payload["token"]  # bearer token for subsequent requests
    """

    def __init__(
        self,
        store: RecordStore,
        client_factory: Callable[[], Client] | None = None,
    ):
        self.store = store
        self.client_factory = client_factory or SupabaseClient.new_auth_client

    def _touch_login(self, user_id: str, profile_if_new: dict[str, Any]) -> None:
        now = utc_now()
        if not self.store.update(USERS_COLLECTION, user_id, {"lastLogin": now}):
            self.store.create(
                USERS_COLLECTION,
                {**profile_if_new, "createdAt": now, "lastLogin": now},
                record_id=user_id,
            )
            logger.info(f"Created profile for user {user_id}")

    def login(self, email: str, password: str) -> dict[str, Any]:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AuthRateLimitedError: Provider is throttling sign-ins
        """
        try:
            response = self.client_factory().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as e:
            if e.status == 429:
                raise AuthRateLimitedError()
            if 400 <= (e.status or 0) < 500:
                logger.info(f"Login rejected for {email}: {e.message}")
                raise InvalidCredentialsError()
            raise

        user = response.user
        metadata = user.user_metadata or {}
        self._touch_login(user.id, {
            "fullName": metadata.get("full_name") or "",
            "email": user.email or email,
        })

        profile = self.store.get(USERS_COLLECTION, user.id) or {}
        logger.info(f"User {user.id} logged in")
        return _session_payload(response, {
            "displayName": metadata.get("full_name") or profile.get("fullName"),
            "photoURL": metadata.get("avatar_url") or profile.get("photoURL"),
        })

    def signup(
        self,
        email: str,
        password: str,
        display_name: str,
        college: str | None = None,
    ) -> dict[str, Any]:
        """
        Register a new account and create its profile.

        The token is None when the project requires email confirmation.

        Raises:
            ValidationFailedError: Missing email, password or name
            SignupRejectedError: Email taken, weak password or bad email
            AuthRateLimitedError: Provider is throttling sign-ups
        """
        if not email or not password or not display_name:
            raise ValidationFailedError("Email, password, and name are required")

        try:
            response = self.client_factory().auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"full_name": display_name}},
            })
        except AuthApiError as e:
            if e.status == 429:
                raise AuthRateLimitedError()
            if 400 <= (e.status or 0) < 500:
                logger.info(f"Signup rejected for {email}: {e.message}")
                raise SignupRejectedError(e.message)
            raise

        user = response.user
        now = utc_now()
        self.store.create(USERS_COLLECTION, {
            "fullName": display_name,
            "email": email,
            "college": college or "",
            "createdAt": now,
            "lastLogin": now,
        }, record_id=user.id)

        logger.info(f"User {user.id} signed up")
        return _session_payload(response, {
            "displayName": display_name,
            "college": college or "",
        })

    def google(self, credential: str, access_token: str | None = None) -> dict[str, Any]:
        """
        Sign in with a Google ID token.

        Raises:
            ValidationFailedError: No credential given
            InvalidCredentialsError: Google token rejected
        """
        if not credential:
            raise ValidationFailedError("No Google credential provided", field="credential")

        params = {"provider": "google", "token": credential}
        if access_token:
            params["access_token"] = access_token

        try:
            response = self.client_factory().auth.sign_in_with_id_token(params)
        except AuthApiError as e:
            if e.status == 429:
                raise AuthRateLimitedError()
            if 400 <= (e.status or 0) < 500:
                logger.info(f"Google sign-in rejected: {e.message}")
                raise InvalidCredentialsError()
            raise

        user = response.user
        metadata = user.user_metadata or {}
        self._touch_login(user.id, {
            "fullName": metadata.get("full_name") or metadata.get("name") or "",
            "email": user.email or "",
            "photoURL": metadata.get("avatar_url") or metadata.get("picture") or "",
        })

        logger.info(f"User {user.id} signed in with Google")
        return _session_payload(response)
