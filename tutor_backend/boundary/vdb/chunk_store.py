"""
Chunk vector store interface.

Dependencies: tutor_backend.boundary.vdb.vector_schemas
System role: Contract shared by the pgvector and in-memory stores
"""

from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from tutor_backend.boundary.vdb.vector_schemas import RetrievalScope, ScoredChunk
from tutor_backend.models.chunk import TextChunk


class ChunkStore(Protocol):
    """Persistence for embedded lesson chunks."""

    async def replace_source_chunks(
        self,
        lesson_id: UUID,
        course_id: UUID,
        chunks: Sequence[TextChunk],
        vectors: Sequence[list[float]],
    ) -> int:
        """Replace every stored chunk of a lesson; returns rows written."""
        ...

    async def query(
        self,
        scope: RetrievalScope,
        query_vector: list[float],
        k: int,
    ) -> list[ScoredChunk]:
        """Return up to k in-scope chunks, most similar first."""
        ...
