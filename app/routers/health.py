# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Endpoints:
#   GET /health        - static status, no backend calls
#   GET /health/ready  - checks the programs table and the storage bucket
#   GET /health/live   - process is up
#
# Readiness never fails the request: a broken backend shows up as
# "degraded" with the first part of the error in its check.
# =============================================================================

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from app import __version__
from app.config import settings
from app.dependencies import RecordStoreDep
from core.services.moderation_service import PROGRAMS_COLLECTION
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str
    environment: str
    version: str
    admins_configured: bool


class ChecksResponse(BaseModel):
    """Outcome per backend: "healthy" or "unhealthy: <error>"."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _failure(backend: str, error: Exception) -> str:
    logger.warning(f"Readiness check failed for {backend}: {error}")
    return f"unhealthy: {str(error)[:50]}"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    ProgramHub status for load balancers.

    Without any ADMIN_USER_IDS nobody can moderate contributions, so that is
    reported here as well.
    """
    return HealthResponse(
        status="healthy",
        service="programhub-api",
        timestamp=utc_now(),
        environment=settings.ENVIRONMENT,
        version=__version__,
        admins_configured=bool(settings.admin_user_ids),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check(store: RecordStoreDep):
    """
    Check that the program directory can be read and the upload bucket
    (resumes, profile pictures, testimonial videos) exists.
    """
    checks = ChecksResponse(database="unknown", storage="unknown")

    try:
        store.query(PROGRAMS_COLLECTION, limit=1)
        checks.database = "healthy"
    except Exception as e:
        checks.database = _failure("database", e)

    try:
        SupabaseClient.get_client().storage.get_bucket(settings.STORAGE_BUCKET)
        checks.storage = "healthy"
    except Exception as e:
        checks.storage = _failure(f"bucket {settings.STORAGE_BUCKET}", e)

    all_healthy = checks.database == "healthy" and checks.storage == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=utc_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """The API process is serving requests."""
    return LivenessResponse(status="alive", timestamp=utc_now())
