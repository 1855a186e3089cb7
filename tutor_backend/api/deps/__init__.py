"""
FastAPI dependencies.

Re-exports dependency providers for routers.
"""

from tutor_backend.api.deps.dependencies import (
    get_assistant_service,
    get_lesson_indexer,
    get_principal,
    get_public_assistant_service,
    get_tenant_id,
    require_tenant_id,
)

__all__ = [
    "get_assistant_service",
    "get_lesson_indexer",
    "get_principal",
    "get_public_assistant_service",
    "get_tenant_id",
    "require_tenant_id",
]
