"""
Test suite for LessonIndexer.

System role: Verification of lesson chunk indexing
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from tutor_backend.application.services import LessonIndexer
from tutor_backend.boundary.gemini import EmbeddingClient
from tutor_backend.boundary.vdb import InMemoryChunkStore, RetrievalScope
from tutor_backend.core.background import BackgroundTaskRunner
from tutor_backend.core.chunking import ChunkingEngine

LESSON_TEXT = "\n\n".join(
    [
        "Fire needs heat, fuel and oxygen. " * 20,
        "Extinguishers remove one side of the triangle. " * 20,
        "Evacuate first when the fire is large. " * 20,
    ]
)


@pytest.fixture
def ids() -> tuple[uuid.UUID, uuid.UUID]:
    """Provide (lesson_id, course_id)."""
    return uuid.uuid4(), uuid.uuid4()


@pytest.fixture
def store() -> InMemoryChunkStore:
    """Provide empty store."""
    return InMemoryChunkStore()


class TestLessonIndexerIndexLesson:
    """Test suite for LessonIndexer.index_lesson()."""

    @pytest.mark.asyncio
    async def test_index_lesson_should_store_every_chunk(
        self, embedding_client: EmbeddingClient, store: InMemoryChunkStore, ids
    ) -> None:
        """Test all chunks of the lesson are embedded and stored."""
        # Arrange
        lesson_id, course_id = ids
        engine = ChunkingEngine(target_size=1000, min_size=500)
        indexer = LessonIndexer(embedding_client, store, engine)

        # Act
        stored = await indexer.index_lesson(lesson_id, course_id, LESSON_TEXT)

        # Assert
        assert stored == len(engine.chunk(LESSON_TEXT))
        assert stored > 1
        assert len(store) == stored

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_content_should_be_noop(
        self, embedding_client: EmbeddingClient, store: InMemoryChunkStore, ids, content
    ) -> None:
        """Test lessons without text are skipped."""
        # Arrange
        indexer = LessonIndexer(embedding_client, store)

        # Act / Assert
        assert await indexer.index_lesson(*ids, content) == 0
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_failed_chunk_embeddings_should_be_skipped(
        self, keyword_embeddings, store: InMemoryChunkStore, ids
    ) -> None:
        """Test one failing chunk does not block the others."""
        # Arrange
        def embed_query(text):
            if text.startswith("Extinguishers"):
                raise RuntimeError("rejected")
            return keyword_embeddings.embed_query(text)

        embeddings = MagicMock()
        embeddings.aembed_query = AsyncMock(side_effect=embed_query)
        client = EmbeddingClient(api_key="k", embeddings_factory=lambda key: embeddings)
        indexer = LessonIndexer(client, store, ChunkingEngine(target_size=1000, min_size=500))

        # Act
        stored = await indexer.index_lesson(*ids, LESSON_TEXT)
        results = await store.query(RetrievalScope(course_id=ids[1]), [1.0] * 768, k=10)

        # Assert
        assert stored == len(results)
        assert not any(r.content.startswith("Extinguishers") for r in results)

    @pytest.mark.asyncio
    async def test_no_embeddings_without_replace_should_keep_old_chunks(
        self, embedding_client: EmbeddingClient, store: InMemoryChunkStore, ids
    ) -> None:
        """Test replace=False leaves existing chunks when nothing could be embedded."""
        # Arrange
        await LessonIndexer(embedding_client, store).index_lesson(*ids, "Original lesson text.")
        broken = MagicMock()
        broken.aembed_query = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        failing = LessonIndexer(
            EmbeddingClient(api_key="k", embeddings_factory=lambda key: broken), store
        )

        # Act
        stored = await failing.index_lesson(*ids, "Rewritten lesson text.", replace=False)

        # Assert
        assert stored == 0
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_no_embeddings_with_replace_should_clear_old_chunks(
        self, embedding_client: EmbeddingClient, store: InMemoryChunkStore, ids
    ) -> None:
        """Test replace=True removes stale chunks even when nothing new was embedded."""
        # Arrange
        await LessonIndexer(embedding_client, store).index_lesson(*ids, "Original lesson text.")
        broken = MagicMock()
        broken.aembed_query = AsyncMock(side_effect=RuntimeError("quota exceeded"))
        failing = LessonIndexer(
            EmbeddingClient(api_key="k", embeddings_factory=lambda key: broken), store
        )

        # Act
        stored = await failing.index_lesson(*ids, "Rewritten lesson text.")

        # Assert
        assert stored == 0
        assert len(store) == 0


class TestLessonIndexerScheduleIndex:
    """Test suite for LessonIndexer.schedule_index()."""

    @pytest.mark.asyncio
    async def test_schedule_index_should_run_in_background(
        self, embedding_client: EmbeddingClient, store: InMemoryChunkStore, ids
    ) -> None:
        """Test the job runs on the background runner."""
        # Arrange
        runner = BackgroundTaskRunner()
        indexer = LessonIndexer(embedding_client, store, runner=runner)

        # Act
        indexer.schedule_index(*ids, "Some lesson text to index.")
        await runner.drain(timeout=2)

        # Assert
        assert len(store) == 1
        assert runner.failures == 0

    def test_schedule_without_runner_should_raise(
        self, embedding_client: EmbeddingClient, store: InMemoryChunkStore, ids
    ) -> None:
        """Test scheduling requires a runner."""
        with pytest.raises(RuntimeError):
            LessonIndexer(embedding_client, store).schedule_index(*ids, "text")
