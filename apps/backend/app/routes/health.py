"""
Health check endpoint.

Used by:
  - Container HEALTHCHECK / Cloud Run startup probe
  - Front-end to check API connectivity

Returns liveness plus which upstream integrations are configured, so a
deployment missing a key is visible without running an analysis.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from app.ai.gemini_client import gemini_client
from app.ai.search_adapter import search_adapter
from app.services.youtube_client import youtube_client

logger = logging.getLogger(__name__)
router = APIRouter()

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str  # Always "ok" if the API process is alive
    version: str
    environment: str
    ai_mode: str  # "mock" | "real"
    youtube: str  # "configured" | "missing"
    investigation: str  # "enabled" | "disabled"


@router.get("", response_model=HealthResponse, summary="API health check")
async def health_check() -> HealthResponse:
    """
    Returns the liveness status of the API and its integration config.

    Always HTTP 200 while the process is up; a missing key is reported in
    the body, not as a failure.
    """
    from app.core.config import settings

    return HealthResponse(
        status="ok",
        version=VERSION,
        environment=settings.environment,
        ai_mode="mock" if gemini_client.mock_mode else "real",
        youtube="configured" if youtube_client.enabled else "missing",
        investigation="enabled" if search_adapter.enabled else "disabled",
    )
