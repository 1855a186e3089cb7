"""
Assistant conversation ORM models.

One conversation per (user, course) pair, or per user for general study chat
(course_id NULL). Messages are ordered by creation time.

Dependencies: sqlalchemy, tutor_backend.boundary.db.base
System role: Per-user conversational memory
"""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutor_backend.boundary.db.base import Base, CreatedAtMixin, UUIDMixin, TimestampMixin


class ConversationModel(Base, UUIDMixin, TimestampMixin):
    """
    Assistant conversation thread.

    Attributes:
        user_id: Owning user
        course_id: Course scope (None for general study chat)
        messages: Turns of the conversation (cascade delete)
    """

    __tablename__ = "ai_conversations"

    user_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), nullable=False, index=True)
    course_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=True,
        default=None,
    )

    messages = relationship(
        "MessageModel",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="MessageModel.created_at",
    )


class MessageModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Single conversation turn.

    Attributes:
        conversation_id: Parent conversation
        role: 'user' or 'assistant'
        content: Message text
    """

    __tablename__ = "ai_messages"

    conversation_id: Mapped[UUID] = mapped_column(
        ForeignKey("ai_conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    conversation = relationship("ConversationModel", back_populates="messages")
