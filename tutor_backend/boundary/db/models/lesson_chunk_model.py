"""
Lesson chunk ORM model.

Stores one chunk of lesson text with its pgvector embedding. Rows are only
reachable through their lesson, so course scoping is a join on lessons.

Dependencies: sqlalchemy, pgvector, tutor_backend.boundary.db.base
System role: Persisted chunk vectors for retrieval
"""

from uuid import UUID

from pgvector.sqlalchemy import Vector
from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutor_backend.boundary.db.base import Base, CreatedAtMixin, UUIDMixin

EMBEDDING_DIMENSION = 768


class LessonChunkModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Embedded lesson chunk.

    Attributes:
        lesson_id: Source lesson
        chunk_index: Position of the chunk within the lesson
        content: Chunk text returned as retrieval context
        embedding: 768-dimensional vector
    """

    __tablename__ = "lesson_chunks"

    lesson_id: Mapped[UUID] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=False)

    lesson = relationship("LessonModel", back_populates="chunks")
