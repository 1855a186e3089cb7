"""
Scoped retrieval service.

Embeds a question and asks the chunk store for the nearest chunks inside a
retrieval scope. Every upstream failure degrades to "no context" so the
assistant can still answer from general knowledge.

Dependencies: tutor_backend.boundary.gemini, tutor_backend.boundary.vdb
System role: Retrieval stage of the assistant pipeline
"""

import logging

from tutor_backend.boundary.gemini import EmbeddingClient
from tutor_backend.boundary.vdb import ChunkStore, RetrievalScope, ScoredChunk
from tutor_backend.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class RetrievalIndex:
    """Top-k chunk lookup restricted to a scope."""

    def __init__(self, embedding_client: EmbeddingClient, chunk_store: ChunkStore) -> None:
        """
        Initialize retrieval index.

        Args:
            embedding_client: Client used to embed queries
            chunk_store: Store holding embedded lesson chunks
        """
        self.embedding_client = embedding_client
        self.chunk_store = chunk_store

    async def top_k(
        self,
        scope: RetrievalScope,
        query_text: str,
        k: int = 5,
        api_key: str | None = None,
    ) -> list[ScoredChunk]:
        """
        Retrieve the k chunks most similar to query_text within scope.

        Args:
            scope: Retrieval scope applied before ranking
            query_text: The learner's question
            k: Maximum number of chunks
            api_key: Tenant key for the embedding call

        Returns:
            list[ScoredChunk]: Most similar first; empty on any failure
        """
        if not query_text or not query_text.strip() or k <= 0:
            return []

        vector = await self.embedding_client.embed(query_text, api_key=api_key)
        if vector is None:
            logger.warning(f"{__name__}:top_k - Query embedding unavailable, skipping retrieval")
            return []

        try:
            chunks = await self.chunk_store.query(scope, vector, k)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:top_k - Vector search failed",
                e,
                course_id=scope.course_id,
            )
            return []

        logger.info(
            f"{__name__}:top_k - Retrieved {len(chunks)} chunks for course {scope.course_id}"
        )
        return chunks
