"""Public chatbot API endpoints.

Routes:
- GET /ai/public/status - Whether the public chatbot is enabled for the tenant
- POST /ai/public/chat - Anonymous chat for landing-page visitors

Dependencies: tutor_backend.application.services.public_assistant_service
System role: Public chatbot HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status

from tutor_backend.api.deps import get_public_assistant_service, require_tenant_id
from tutor_backend.application.services import PublicAssistantService
from tutor_backend.models.chat import (
    PublicChatData,
    PublicChatRequest,
    PublicChatResponse,
    PublicStatusResponse,
)

router = APIRouter(prefix="/ai/public", tags=["public-assistant"])


@router.get("/status", response_model=PublicStatusResponse)
async def public_status(
    tenant_id: UUID = Depends(require_tenant_id),
    service: PublicAssistantService = Depends(get_public_assistant_service),
) -> PublicStatusResponse:
    """Check if the public chatbot is enabled for the tenant."""
    return await service.status(tenant_id)


@router.post("/chat", response_model=PublicChatResponse)
async def public_chat(
    body: PublicChatRequest,
    request: Request,
    tenant_id: UUID = Depends(require_tenant_id),
    service: PublicAssistantService = Depends(get_public_assistant_service),
) -> PublicChatResponse:
    """Answer a landing-page visitor.

    Raises:
        HTTPException(400): Empty message
    """
    if not body.message.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message is required",
        )
    ip_address = request.client.host if request.client else "unknown"
    answer = await service.chat(tenant_id, ip_address, body.message)
    return PublicChatResponse(data=PublicChatData(response=answer))
