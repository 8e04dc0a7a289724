# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ProgramHub API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 5001
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import (
    ProgramHubException,
    programhub_exception_handler,
    validation_exception_handler,
)
from app.routers import admin, contributions, health, programs, resume, testimonials, users
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs configuration on startup. Store clients are created lazily on
    first use, so there is nothing to open or close here.
    """
    logger.info(f"Starting ProgramHub API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.admin_user_ids:
        logger.warning("ADMIN_USER_IDS is empty; admin endpoints will reject everyone")

    yield

    logger.info("Shutting down ProgramHub API")


# Create FastAPI application
app = FastAPI(
    title="ProgramHub API",
    description="""
## Community Program Directory API

Browse programs and opportunities, contribute new ones for moderation,
and get peer feedback on your resume.

### Key Features

- **Programs**: Public catalog with search and month filters
- **Contributions**: Submit programs; admins approve (publishing them) or reject
- **Resume Review**: Upload a resume, make it public, collect threaded feedback with votes
- **Testimonials**: Video testimonials managed by admins

### Authentication

Send a Supabase access token as `Authorization: Bearer <token>`.
Tokens come from `POST /api/auth/login`, `/signup` or `/google`.
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign-in, sign-up and token verification",
        },
        {
            "name": "Programs",
            "description": "Published program catalog",
        },
        {
            "name": "Contributions",
            "description": "Submit programs for review",
        },
        {
            "name": "Admin",
            "description": "Moderation and catalog management (admins only)",
        },
        {
            "name": "Users",
            "description": "User profiles",
        },
        {
            "name": "Resume",
            "description": "Resumes and threaded peer feedback",
        },
        {
            "name": "Testimonials",
            "description": "Video testimonials",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ProgramHubException)
async def handle_programhub_exception(request: Request, exc: ProgramHubException):
    """Handle custom ProgramHub exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return await programhub_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Program catalog
app.include_router(
    programs.router,
    prefix="/api/programs",
    tags=["Programs"]
)

# Contributions
app.include_router(
    contributions.router,
    prefix="/api/contributions",
    tags=["Contributions"]
)

# Admin panel
app.include_router(
    admin.router,
    prefix="/api/admin",
    tags=["Admin"]
)

# User profiles
app.include_router(
    users.router,
    prefix="/api/users",
    tags=["Users"]
)

# Resumes and feedback
app.include_router(
    resume.router,
    prefix="/api/resume",
    tags=["Resume"]
)

# Testimonials
app.include_router(
    testimonials.router,
    prefix="/api/testimonials",
    tags=["Testimonials"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "ProgramHub API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health",
    }
