"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: tutor_backend.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel
from sqlalchemy import text

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(request: Request) -> HealthResponse:
    """Database health check."""
    try:
        async with request.app.state.session_factory() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"{__name__}:health_check_db - Database unreachable: {type(e).__name__}")
        return HealthResponse(status="unhealthy", message="Database connection failed")
    return HealthResponse(status="healthy", message="Database connection OK")
