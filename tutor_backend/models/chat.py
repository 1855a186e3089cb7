"""
Chat domain models and schemas.

Request/response schemas for the assistant chat operations.

Dependencies: pydantic
System role: Chat API contracts
"""

from uuid import UUID

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request schema for course-scoped or general assistant chat."""

    course_id: UUID | None = Field(
        default=None,
        description="Course the student is asking about (omit for general study chat)",
    )
    message: str = Field(description="User question or message")


class PublicChatRequest(BaseModel):
    """Request schema for the anonymous landing-page chatbot."""

    message: str = Field(default="", description="Visitor question")


class UsageEstimate(BaseModel):
    """Rough token accounting for one chat turn."""

    input_tokens_estimate: int
    output_tokens_estimate: int
    latency_ms: int


class ChatDebug(BaseModel):
    """Diagnostic metadata returned alongside the answer."""

    course_title: str
    retrieved_chunks: list[str] = Field(default_factory=list)
    retrieved_chunk_count: int = 0
    usage: UsageEstimate


class ChatResult(BaseModel):
    """Outcome of a completed chat turn."""

    response: str
    conversation_id: UUID
    debug: ChatDebug


class ChatResponse(BaseModel):
    """Response envelope for assistant chat."""

    status: str = "success"
    data: ChatResult


class PublicChatData(BaseModel):
    """Public chatbot answer."""

    response: str


class PublicChatResponse(BaseModel):
    """Response envelope for the public chatbot."""

    status: str = "success"
    data: PublicChatData


class PublicStatusResponse(BaseModel):
    """Whether the public chatbot is available for a tenant."""

    enabled: bool
    reason: str | None = None
