"""API routers."""

from .assistant import router as assistant_router
from .health import router as health_router
from .indexing import router as indexing_router
from .public_assistant import router as public_assistant_router

__all__ = [
    "assistant_router",
    "health_router",
    "indexing_router",
    "public_assistant_router",
]
