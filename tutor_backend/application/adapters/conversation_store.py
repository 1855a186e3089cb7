"""
Conversation store adapter.

High-level business logic for assistant conversation memory.
Provides a simple interface for finding a conversation, appending turns by
role, and reading the recent history window.

Dependencies: tutor_backend.boundary.db.CRUD.conversation_crud
System role: Conversation memory business logic adapter
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tutor_backend.boundary.db.CRUD.conversation_crud import conversation_crud, message_crud
from tutor_backend.boundary.db.models import ConversationModel, MessageModel
from tutor_backend.models.conversation import ConversationTurn, TurnRole

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    High-level adapter for conversation operations.

    Works inside the caller's session; the caller owns commit/rollback.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize conversation store.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def find_or_create(self, user_id: UUID, course_id: UUID | None) -> ConversationModel:
        """
        Return the user's most recently updated conversation for the scope.

        Args:
            user_id: Owning user
            course_id: Course scope, or None for general study chat

        Returns:
            ConversationModel: Existing or newly created conversation
        """
        return await conversation_crud.find_or_create(self.db, user_id, course_id)

    async def append_turn(
        self,
        conversation_id: UUID,
        role: TurnRole | str,
        content: str,
    ) -> MessageModel:
        """
        Append a turn and mark the conversation as recently used.

        Args:
            conversation_id: Conversation UUID
            role: 'user' or 'assistant'
            content: Message text

        Returns:
            MessageModel: Stored message

        Raises:
            ValueError: If role is not a known turn role
        """
        role = TurnRole(role)
        message = await message_crud.create(
            self.db,
            conversation_id=conversation_id,
            role=role.value,
            content=content,
        )
        await conversation_crud.touch(self.db, conversation_id)
        logger.debug(
            f"{__name__}:append_turn - Stored {role.value} turn for conversation {conversation_id}"
        )
        return message

    async def recent_turns(self, conversation_id: UUID, limit: int) -> list[ConversationTurn]:
        """
        Get the newest turns in chronological order.

        Args:
            conversation_id: Conversation UUID
            limit: Maximum number of turns

        Returns:
            list[ConversationTurn]: Oldest first
        """
        messages = await message_crud.get_recent(self.db, conversation_id, limit)
        return [ConversationTurn.model_validate(m) for m in messages]
