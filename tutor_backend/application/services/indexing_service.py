"""
Lesson indexing service.

Chunks lesson content, embeds each chunk, and replaces the lesson's stored
chunks. Runs in the background after a lesson is created or updated.

Dependencies: tutor_backend.core.chunking, tutor_backend.boundary.gemini, tutor_backend.boundary.vdb
System role: Keeps the retrieval index in sync with lesson content
"""

import asyncio
import logging
from uuid import UUID

from tutor_backend.boundary.gemini import EmbeddingClient
from tutor_backend.boundary.vdb import ChunkStore
from tutor_backend.core.background import BackgroundTaskRunner
from tutor_backend.core.chunking import ChunkingEngine

logger = logging.getLogger(__name__)


class LessonIndexer:
    """Chunk → embed → store pipeline for a single lesson."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        chunk_store: ChunkStore,
        chunking_engine: ChunkingEngine | None = None,
        runner: BackgroundTaskRunner | None = None,
    ) -> None:
        """
        Initialize lesson indexer.

        Args:
            embedding_client: Client used to embed chunks
            chunk_store: Destination store
            chunking_engine: Chunker (default sizes when None)
            runner: Background runner used by schedule_index
        """
        self.embedding_client = embedding_client
        self.chunk_store = chunk_store
        self.chunking_engine = chunking_engine or ChunkingEngine()
        self.runner = runner

    async def index_lesson(
        self,
        lesson_id: UUID,
        course_id: UUID,
        content: str | None,
        replace: bool = True,
        api_key: str | None = None,
    ) -> int:
        """
        Index one lesson.

        Chunks whose embedding fails are skipped. When replace is False and
        nothing could be embedded, existing chunks are left untouched.

        Args:
            lesson_id: Lesson UUID
            course_id: Owning course UUID
            content: Lesson text (no-op when empty)
            replace: Replace existing chunks even if none were embedded
            api_key: Tenant key for the embedding calls

        Returns:
            int: Number of chunks stored
        """
        if not content or not content.strip():
            logger.info(f"{__name__}:index_lesson - Lesson {lesson_id} has no content, skipping")
            return 0

        chunks = self.chunking_engine.chunk_document(str(lesson_id), content)
        vectors = await self.embedding_client.embed_many([c.text for c in chunks], api_key=api_key)

        embedded = [(chunk, vector) for chunk, vector in zip(chunks, vectors) if vector is not None]
        skipped = len(chunks) - len(embedded)
        if skipped:
            logger.warning(
                f"{__name__}:index_lesson - Skipped {skipped}/{len(chunks)} chunks "
                f"of lesson {lesson_id} (embedding failed)"
            )

        if not embedded:
            logger.warning(
                f"{__name__}:index_lesson - No chunk of lesson {lesson_id} could be embedded"
            )
            if not replace:
                return 0

        stored = await self.chunk_store.replace_source_chunks(
            lesson_id,
            course_id,
            [chunk for chunk, _ in embedded],
            [vector for _, vector in embedded],
        )
        logger.info(f"{__name__}:index_lesson - Indexed lesson {lesson_id}: {stored} chunks")
        return stored

    def schedule_index(
        self,
        lesson_id: UUID,
        course_id: UUID,
        content: str | None,
        api_key: str | None = None,
    ) -> asyncio.Task:
        """
        Index a lesson in the background.

        Returns:
            asyncio.Task: Handle of the scheduled job

        Raises:
            RuntimeError: If no background runner was configured
        """
        if self.runner is None:
            raise RuntimeError("LessonIndexer has no background runner")
        return self.runner.submit(
            self.index_lesson,
            lesson_id,
            course_id,
            content,
            api_key=api_key,
            description=f"index lesson {lesson_id}",
        )
