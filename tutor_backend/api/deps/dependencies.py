"""
Dependency providers.

Factory functions for FastAPI dependencies. Long-lived services are built
once in the application lifespan and stored on app.state.

Dependencies: fastapi, tutor_backend.application
System role: DI container for service injection
"""

from uuid import UUID

from fastapi import HTTPException, Request, status

from tutor_backend.application.services import (
    AssistantOrchestrator,
    LessonIndexer,
    PublicAssistantService,
)

TENANT_HEADER = "X-Tenant-ID"


def _parse_uuid(value: object, what: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {what}",
        )


def get_assistant_service(request: Request) -> AssistantOrchestrator:
    """Get the assistant orchestrator built at startup."""
    return request.app.state.assistant_service


def get_public_assistant_service(request: Request) -> PublicAssistantService:
    """Get the public assistant service built at startup."""
    return request.app.state.public_assistant_service


def get_lesson_indexer(request: Request) -> LessonIndexer:
    """Get the lesson indexer built at startup."""
    return request.app.state.lesson_indexer


def get_principal(request: Request) -> UUID:
    """
    Get the authenticated user id.

    Authentication happens upstream and stores the user id on request.state.

    Raises:
        HTTPException(401): No authenticated user
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return _parse_uuid(user_id, "user id")


def get_tenant_id(request: Request) -> UUID | None:
    """
    Get the tenant of the request, if any.

    Reads request.state.tenant_id (set by tenant routing) and falls back to
    the X-Tenant-ID header.

    Raises:
        HTTPException(400): Tenant id is not a valid UUID
    """
    tenant_id = getattr(request.state, "tenant_id", None) or request.headers.get(TENANT_HEADER)
    if not tenant_id:
        return None
    return _parse_uuid(tenant_id, "tenant id")


def require_tenant_id(request: Request) -> UUID:
    """
    Get the tenant of the request.

    Raises:
        HTTPException(400): No tenant on the request
    """
    tenant_id = get_tenant_id(request)
    if tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid tenant required",
        )
    return tenant_id
