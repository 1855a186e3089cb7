"""
In-memory chunk store for development and tests.

Keeps vectors in process memory and ranks with numpy cosine distance.
Scope filtering happens before any distance is computed.

Dependencies: numpy
System role: Development chunk vector store (local only)
"""

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

import numpy as np

from tutor_backend.boundary.vdb.vector_schemas import RetrievalScope, ScoredChunk
from tutor_backend.models.chunk import TextChunk


@dataclass(frozen=True)
class _StoredChunk:
    chunk_id: UUID
    lesson_id: UUID
    course_id: UUID
    index: int
    content: str
    vector: np.ndarray


def cosine_distances(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Cosine distance (1 - cosine similarity) of each row to query."""
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    norms = np.where(norms == 0, 1.0, norms)
    return 1.0 - (matrix @ query) / norms


class InMemoryChunkStore:
    """Process-local chunk store."""

    def __init__(self) -> None:
        self._chunks: list[_StoredChunk] = []

    def __len__(self) -> int:
        return len(self._chunks)

    async def replace_source_chunks(
        self,
        lesson_id: UUID,
        course_id: UUID,
        chunks: Sequence[TextChunk],
        vectors: Sequence[list[float]],
    ) -> int:
        if len(chunks) != len(vectors):
            raise ValueError("chunks and vectors must have the same length")

        kept = [c for c in self._chunks if c.lesson_id != lesson_id]
        kept.extend(
            _StoredChunk(
                chunk_id=uuid.uuid4(),
                lesson_id=lesson_id,
                course_id=course_id,
                index=chunk.index,
                content=chunk.text,
                vector=np.asarray(vector, dtype=np.float32),
            )
            for chunk, vector in zip(chunks, vectors)
        )
        self._chunks = kept
        return len(chunks)

    async def query(
        self,
        scope: RetrievalScope,
        query_vector: list[float],
        k: int,
    ) -> list[ScoredChunk]:
        candidates = [c for c in self._chunks if scope.admits(c.course_id, c.lesson_id)]
        if not candidates or k <= 0:
            return []

        matrix = np.stack([c.vector for c in candidates])
        distances = cosine_distances(matrix, np.asarray(query_vector, dtype=np.float32))
        order = np.argsort(distances, kind="stable")[:k]

        return [
            ScoredChunk(
                chunk_id=candidates[i].chunk_id,
                lesson_id=candidates[i].lesson_id,
                content=candidates[i].content,
                distance=float(distances[i]),
            )
            for i in order
        ]
