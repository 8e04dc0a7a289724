# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stores wired into the app via dependency_overrides
# - Signed HS256 tokens for regular users and an admin
# =============================================================================

import os
import time

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_USER_IDS", "admin-1")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from tests.fakes import InMemoryBlobStore, InMemoryRecordStore

JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]
ADMIN_ID = "admin-1"


def make_token(user_id: str, email: str | None = None, expires_in: int = 3600, **claims) -> str:
    """Sign a Supabase-shaped access token with the test secret."""
    now = int(time.time())
    payload = {
        "sub": user_id,
        "email": email or f"{user_id}@example.com",
        "aud": "authenticated",
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        **claims,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


def auth_header(user_id: str, **claims) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, **claims)}"}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """Empty in-memory Record Store."""
    return InMemoryRecordStore()


@pytest.fixture
def blobs():
    """Empty in-memory Blob Store."""
    return InMemoryBlobStore()


@pytest.fixture
def client(store, blobs):
    """TestClient with both stores replaced by the in-memory fakes."""
    from app.dependencies import get_blob_store, get_record_store
    from app.main import app

    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_blob_store] = lambda: blobs
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_users(store):
    """An owner with a public resume, a reviewer, and a third user."""
    store.seed(
        "users", "owner-1",
        fullName="Olivia Owner", email="owner-1@example.com",
        resumeURL="https://blobs.test/resumes/owner-1/cv.pdf",
        resumePath="resumes/owner-1/cv.pdf", resumeName="cv.pdf",
        resumePublic=True,
    )
    store.seed("users", "reviewer-1", fullName="Rae Reviewer", photoURL="https://img.test/rae.png")
    store.seed("users", "user-3", fullName="Third User")
    return store


@pytest.fixture
def sample_feedback_record():
    """A stored feedback document as the store returns it."""
    return {
        "id": "fb-1",
        "resumeOwnerId": "owner-1",
        "reviewerId": "reviewer-1",
        "reviewerName": "Rae Reviewer",
        "reviewerPhotoURL": None,
        "content": "Move education below experience",
        "parentId": None,
        "votes": 1,
        "upvotedBy": ["user-3"],
        "downvotedBy": [],
        "createdAt": "2024-03-01T10:00:00+00:00",
        "updatedAt": "2024-03-01T10:00:00+00:00",
    }
