"""
Vector store schemas.

Pydantic models for scoped retrieval: the scope filter, stored chunk
records, and ranked results.

Dependencies: pydantic
System role: Type definitions for chunk vector operations
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RetrievalScope(BaseModel):
    """
    Set of chunks eligible for a query.

    Built by services from trusted data (a course loaded from the database),
    never from raw client input. Stores apply it before ranking.
    """

    model_config = ConfigDict(frozen=True)

    course_id: UUID = Field(description="Only chunks of lessons in this course")
    lesson_id: UUID | None = Field(
        default=None,
        description="Optionally narrow to a single lesson of the course",
    )

    def admits(self, course_id: UUID, lesson_id: UUID) -> bool:
        """Return True if a chunk owned by (course_id, lesson_id) is in scope."""
        if course_id != self.course_id:
            return False
        return self.lesson_id is None or lesson_id == self.lesson_id


class ScoredChunk(BaseModel):
    """Single ranked result from a chunk store."""

    chunk_id: UUID = Field(description="Stored chunk identifier")
    lesson_id: UUID = Field(description="Source lesson")
    content: str = Field(description="Chunk text content")
    distance: float = Field(description="Cosine distance to the query (smaller = more similar)")
