"""Assistant chat API endpoints.

Routes:
- POST /ai/assistant/chat - Course-scoped or general study chat for an enrolled learner

Dependencies: tutor_backend.application.services.assistant_service
System role: Learner assistant HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from tutor_backend.api.deps import get_assistant_service, get_principal, get_tenant_id
from tutor_backend.application.services import AssistantOrchestrator
from tutor_backend.models.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai/assistant", tags=["assistant"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    user_id: UUID = Depends(get_principal),
    tenant_id: UUID | None = Depends(get_tenant_id),
    assistant_service: AssistantOrchestrator = Depends(get_assistant_service),
) -> ChatResponse:
    """Answer a learner message with course grounding and conversation memory.

    Errors of the assistant taxonomy are mapped to HTTP responses by the
    application exception handler (429, 403/404, 422, 503).

    Args:
        request: ChatRequest with optional course id and message
        user_id: Authenticated learner
        tenant_id: Tenant whose Gemini key must be used
        assistant_service: Injected AssistantOrchestrator

    Returns:
        ChatResponse: Answer, conversation id and debug metadata
    """
    result = await assistant_service.chat(user_id, request, tenant_id=tenant_id)
    return ChatResponse(data=result)
