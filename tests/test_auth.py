# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# Token verification, admin gating and Supabase Auth error mapping.
#
# Run with: pytest tests/test_auth.py -v
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from supabase import AuthApiError

from app.auth.dependencies import decode_token
from app.exceptions import (
    AuthRateLimitedError,
    InvalidCredentialsError,
    SignupRejectedError,
    ValidationFailedError,
)
from core.services.auth_service import AuthService
from tests.conftest import ADMIN_ID, auth_header, make_token


def auth_response(user_id="user-9", email="ada@example.com", metadata=None, token="access-1"):
    """Shape of a supabase AuthResponse, just the attributes we read."""
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email, user_metadata=metadata or {}),
        session=SimpleNamespace(access_token=token, refresh_token="refresh-1", expires_in=3600),
    )


def factory_for(auth):
    client = MagicMock()
    client.auth = auth
    return lambda: client


class TestDecodeToken:
    """Local verification of Supabase-issued tokens."""

    def test_valid_token(self):
        user = decode_token(make_token(
            "user-9", email="ada@example.com",
            user_metadata={"full_name": "Ada", "avatar_url": "https://img.test/ada.png"},
        ))

        assert user.id == "user-9"
        assert user.email == "ada@example.com"
        assert user.display_name == "Ada"
        assert user.photo_url == "https://img.test/ada.png"
        assert user.is_admin is False

    def test_admin_flag_from_allowlist(self):
        assert decode_token(make_token(ADMIN_ID)).is_admin is True

    def test_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(make_token("user-9", expires_in=-60))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_audience(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(make_token("user-9", aud="anon"))
        assert exc_info.value.status_code == 401

    def test_garbage_token(self):
        with pytest.raises(HTTPException):
            decode_token("not-a-jwt")


class TestAuthEndpoints:
    def test_verify(self, client):
        response = client.get("/api/auth/verify", headers=auth_header("user-9"))

        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["user"]["id"] == "user-9"

    def test_missing_token(self, client):
        response = client.get("/api/auth/verify")

        assert response.status_code == 401
        assert response.json()["detail"] == "No token provided"

    def test_me_merges_profile(self, client, store):
        store.seed("users", "user-9", fullName="Ada Lovelace", photoURL="https://img.test/a.png")

        response = client.get("/api/auth/me", headers=auth_header("user-9"))

        data = response.json()
        assert response.status_code == 200
        assert data["fullName"] == "Ada Lovelace"
        assert data["photoURL"] == "https://img.test/a.png"
        assert data["isAdmin"] is False

    def test_logout(self, client):
        assert client.post("/api/auth/logout").json() == {"message": "Logged out successfully"}


class TestAdminGate:
    """Admin routes check ADMIN_USER_IDS."""

    def test_non_admin_forbidden(self, client):
        response = client.get("/api/admin/dashboard-stats", headers=auth_header("user-9"))

        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"

    def test_admin_allowed(self, client):
        response = client.get("/api/admin/dashboard-stats", headers=auth_header(ADMIN_ID))
        assert response.status_code == 200

    def test_anonymous_unauthorized(self, client):
        assert client.get("/api/admin/dashboard-stats").status_code == 401


class TestAuthServiceLogin:
    """Supabase Auth errors map to API errors."""

    def test_success_touches_profile(self, store):
        auth = MagicMock()
        auth.sign_in_with_password.return_value = auth_response(metadata={"full_name": "Ada"})

        payload = AuthService(store, client_factory=factory_for(auth)).login(
            "ada@example.com", "secret"
        )

        assert payload["token"] == "access-1"
        assert payload["refreshToken"] == "refresh-1"
        assert payload["user"]["uid"] == "user-9"
        assert payload["user"]["displayName"] == "Ada"
        assert store.all("users")["user-9"]["lastLogin"]

    def test_bad_credentials(self, store):
        auth = MagicMock()
        auth.sign_in_with_password.side_effect = AuthApiError(
            "Invalid login credentials", 400, "invalid_credentials"
        )

        with pytest.raises(InvalidCredentialsError) as exc_info:
            AuthService(store, client_factory=factory_for(auth)).login("a@b.c", "x")
        assert exc_info.value.status_code == 401

    def test_rate_limited(self, store):
        auth = MagicMock()
        auth.sign_in_with_password.side_effect = AuthApiError(
            "Too many requests", 429, "over_request_rate_limit"
        )

        with pytest.raises(AuthRateLimitedError) as exc_info:
            AuthService(store, client_factory=factory_for(auth)).login("a@b.c", "x")
        assert exc_info.value.status_code == 429


class TestAuthServiceSignup:
    def test_creates_profile(self, store):
        auth = MagicMock()
        auth.sign_up.return_value = auth_response(user_id="new-1")

        payload = AuthService(store, client_factory=factory_for(auth)).signup(
            "ada@example.com", "secret123", "Ada", college="Analytical U"
        )

        profile = store.all("users")["new-1"]
        assert profile["fullName"] == "Ada"
        assert profile["college"] == "Analytical U"
        assert payload["user"]["displayName"] == "Ada"

    def test_missing_fields(self, store):
        auth = MagicMock()
        with pytest.raises(ValidationFailedError):
            AuthService(store, client_factory=factory_for(auth)).signup("a@b.c", "", "Ada")
        auth.sign_up.assert_not_called()

    def test_rejected_by_provider(self, store):
        auth = MagicMock()
        auth.sign_up.side_effect = AuthApiError("User already registered", 422, "user_already_exists")

        with pytest.raises(SignupRejectedError) as exc_info:
            AuthService(store, client_factory=factory_for(auth)).signup("a@b.c", "pw", "Ada")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "User already registered"
        assert store.all("users") == {}


class TestAuthServiceGoogle:
    def test_first_login_creates_profile(self, store):
        auth = MagicMock()
        auth.sign_in_with_id_token.return_value = auth_response(
            user_id="g-1", metadata={"name": "Grace", "picture": "https://img.test/g.png"}
        )

        AuthService(store, client_factory=factory_for(auth)).google("id-token")

        auth.sign_in_with_id_token.assert_called_once_with(
            {"provider": "google", "token": "id-token"}
        )
        assert store.all("users")["g-1"]["photoURL"] == "https://img.test/g.png"

    def test_missing_credential(self, store):
        with pytest.raises(ValidationFailedError):
            AuthService(store, client_factory=factory_for(MagicMock())).google("")
