"""
Conversation domain models.

Read-only view of stored conversation turns as consumed by prompt assembly.

Dependencies: pydantic
System role: Conversation memory data structures
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TurnRole(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """Single stored message in a conversation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    role: TurnRole = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")
    created_at: datetime | None = Field(default=None, description="Creation timestamp (UTC)")
