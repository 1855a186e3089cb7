"""
API layer.

Assembles the versioned API router from the individual routers.
"""

from fastapi import APIRouter

from tutor_backend.api.routers import (
    assistant_router,
    health_router,
    indexing_router,
    public_assistant_router,
)

api_router = APIRouter()
api_router.include_router(assistant_router)
api_router.include_router(public_assistant_router)
api_router.include_router(indexing_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
