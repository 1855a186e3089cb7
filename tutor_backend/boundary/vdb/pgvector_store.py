"""
PostgreSQL + pgvector chunk store.

Similarity search over lesson_chunks ordered by cosine distance. The scope
filter is a join through lessons to the owning course, applied in the WHERE
clause before ORDER BY/LIMIT, so out-of-scope rows can never be ranked.

Dependencies: sqlalchemy, pgvector, tenacity
System role: Production chunk vector store
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from tutor_backend.boundary.db.models import LessonChunkModel, LessonModel
from tutor_backend.boundary.vdb.vector_schemas import RetrievalScope, ScoredChunk
from tutor_backend.models.chunk import TextChunk

logger = logging.getLogger(__name__)


def build_scoped_query(scope: RetrievalScope, query_vector: list[float], k: int) -> Select:
    """
    Build the nearest-neighbour statement for a scope.

    Args:
        scope: Retrieval scope
        query_vector: Query embedding
        k: Result limit

    Returns:
        Select: Statement yielding (id, lesson_id, content, distance)
    """
    distance = LessonChunkModel.embedding.cosine_distance(query_vector).label("distance")
    stmt = (
        select(
            LessonChunkModel.id,
            LessonChunkModel.lesson_id,
            LessonChunkModel.content,
            distance,
        )
        .join(LessonModel, LessonModel.id == LessonChunkModel.lesson_id)
        .where(LessonModel.course_id == scope.course_id)
    )
    if scope.lesson_id is not None:
        stmt = stmt.where(LessonChunkModel.lesson_id == scope.lesson_id)
    return stmt.order_by(distance).limit(k)


class PgVectorChunkStore:
    """Chunk store backed by the lesson_chunks table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """
        Initialize store.

        Args:
            session_factory: Factory for short-lived sessions (one per operation)
        """
        self._session_factory = session_factory

    @retry(
        retry=retry_if_exception_type(OperationalError),
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=0.5, max=5, jitter=1),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:replace_source_chunks - Retry {retry_state.attempt_number}/3 "
            f"after database error"
        ),
        reraise=True,
    )
    async def replace_source_chunks(
        self,
        lesson_id: UUID,
        course_id: UUID,
        chunks: Sequence[TextChunk],
        vectors: Sequence[list[float]],
    ) -> int:
        """
        Replace a lesson's chunks in one transaction.

        course_id is implied by the lesson row and not stored.

        Returns:
            int: Number of chunks written
        """
        if len(chunks) != len(vectors):
            raise ValueError("chunks and vectors must have the same length")

        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    delete(LessonChunkModel).where(LessonChunkModel.lesson_id == lesson_id)
                )
                session.add_all(
                    LessonChunkModel(
                        lesson_id=lesson_id,
                        chunk_index=chunk.index,
                        content=chunk.text,
                        embedding=vector,
                    )
                    for chunk, vector in zip(chunks, vectors)
                )
        return len(chunks)

    async def query(
        self,
        scope: RetrievalScope,
        query_vector: list[float],
        k: int,
    ) -> list[ScoredChunk]:
        """Return up to k in-scope chunks ordered by cosine distance."""
        stmt = build_scoped_query(scope, query_vector, k)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.all()

        return [
            ScoredChunk(
                chunk_id=row.id,
                lesson_id=row.lesson_id,
                content=row.content,
                distance=float(row.distance),
            )
            for row in rows
        ]
