"""
Conversation and message CRUD operations.

Dependencies: sqlalchemy, tutor_backend.boundary.db.models
System role: Conversation memory persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_backend.boundary.db.base import utc_now
from tutor_backend.boundary.db.models import ConversationModel, MessageModel
from tutor_backend.boundary.db.CRUD.base_crud import BaseCRUD


class ConversationCRUD(BaseCRUD[ConversationModel]):
    """CRUD operations for ConversationModel."""

    def __init__(self) -> None:
        """Initialize ConversationCRUD with ConversationModel."""
        super().__init__(ConversationModel)

    async def get_latest(
        self,
        session: AsyncSession,
        user_id: UUID,
        course_id: UUID | None,
    ) -> ConversationModel | None:
        """
        Retrieve the user's most recently updated conversation for a scope.

        Args:
            session: Async database session
            user_id: Owning user
            course_id: Course scope, or None for general study chat

        Returns:
            ConversationModel if one exists, None otherwise
        """
        course_filter = (
            ConversationModel.course_id.is_(None)
            if course_id is None
            else ConversationModel.course_id == course_id
        )
        stmt = (
            select(ConversationModel)
            .where(ConversationModel.user_id == user_id, course_filter)
            .order_by(ConversationModel.updated_at.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_or_create(
        self,
        session: AsyncSession,
        user_id: UUID,
        course_id: UUID | None,
    ) -> ConversationModel:
        """Return the latest conversation for the scope, creating it if missing."""
        conversation = await self.get_latest(session, user_id, course_id)
        if conversation is None:
            conversation = await self.create(session, user_id=user_id, course_id=course_id)
        return conversation

    async def touch(self, session: AsyncSession, id: UUID) -> None:
        """Bump updated_at so the conversation sorts as most recent."""
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == id)
            .values(updated_at=utc_now())
        )
        await session.execute(stmt)


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def get_recent(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        limit: int,
    ) -> Sequence[MessageModel]:
        """
        Retrieve the newest messages of a conversation in chronological order.

        Args:
            session: Async database session
            conversation_id: Conversation UUID
            limit: Maximum number of messages

        Returns:
            Sequence of MessageModels, oldest first
        """
        if limit <= 0:
            return []
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(reversed(result.scalars().all()))


conversation_crud = ConversationCRUD()
message_crud = MessageCRUD()
