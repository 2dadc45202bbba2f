"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings
from shared.database import is_supabase_configured

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    identity_store: str
    sessions: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports which identity store backs sign-in and whether session
    signing is configured.
    """
    settings = get_settings()
    sessions = "configured" if settings.session_secret else "missing_secret"
    return ReadinessResponse(
        status="ready" if settings.session_secret else "not_ready",
        identity_store="supabase" if is_supabase_configured() else "in_memory",
        sessions=sessions,
    )
