"""
Test suite for AssistantOrchestrator connection usage.

Runs course chat against a file SQLite database whose pool holds a single
connection, with a chunk store that opens its own session the way
PgVectorChunkStore does.

System role: Verification that retrieval never waits on the request's connection
"""

import pytest
from langchain_core.embeddings import Embeddings
from sqlalchemy import text

from tutor_backend.application.services import AssistantOrchestrator, RetrievalIndex
from tutor_backend.boundary.gemini import EmbeddingClient, GenerationClient
from tutor_backend.boundary.vdb import InMemoryChunkStore
from tutor_backend.configs.assistant import AssistantSettings
from tutor_backend.core.background import BackgroundTaskRunner
from tutor_backend.core.rate_limiter import SlidingWindowRateLimiter
from tutor_backend.models.chat import ChatRequest


@pytest.fixture
async def pooled_engine(tmp_path):
    """Provide a file SQLite engine limited to one pooled connection."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from tutor_backend.boundary.db import Base, create_tables

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tutor.db'}",
        pool_size=1,
        max_overflow=0,
        pool_timeout=1,
    )
    await create_tables(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(pooled_engine):
    """Override the shared factory so seeded data lands in the pooled database."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(pooled_engine, class_=AsyncSession, expire_on_commit=False)


class SessionQueryingStore:
    """Chunk store that touches the database on every query."""

    def __init__(self, session_factory, inner: InMemoryChunkStore) -> None:
        self.session_factory = session_factory
        self.inner = inner

    async def replace_source_chunks(self, lesson_id, course_id, chunks, vectors) -> int:
        return await self.inner.replace_source_chunks(lesson_id, course_id, chunks, vectors)

    async def query(self, scope, query_vector, k):
        async with self.session_factory() as db:
            await db.execute(text("SELECT 1"))
        return await self.inner.query(scope, query_vector, k)


class PoolWatchingEmbeddings(Embeddings):
    """Embeddings that note how many pooled connections are checked out."""

    def __init__(self, inner: Embeddings, engine) -> None:
        self.inner = inner
        self.engine = engine
        self.checked_out: list[int] = []

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.checked_out.append(self.engine.sync_engine.pool.checkedout())
        return self.inner.embed_query(text)


class TestAssistantOrchestratorConnectionUse:
    """Test suite for pool usage during course chat."""

    @pytest.mark.asyncio
    async def test_course_chat_should_retrieve_with_single_connection_pool(
        self,
        pooled_engine,
        session_factory,
        seeded_courses: dict,
        index_chunks,
        keyword_embeddings,
        generation_client: GenerationClient,
    ) -> None:
        """Test no connection is held during embedding and the scoped chunk is found."""
        # Arrange
        store = SessionQueryingStore(session_factory, InMemoryChunkStore())
        await index_chunks(
            store,
            seeded_courses["safety_lesson_id"],
            seeded_courses["safety_course_id"],
            ["Class B fire extinguisher for flammable liquid fires."],
        )
        embeddings = PoolWatchingEmbeddings(keyword_embeddings, pooled_engine)
        runner = BackgroundTaskRunner()
        orchestrator = AssistantOrchestrator(
            session_factory=session_factory,
            rate_limiter=SlidingWindowRateLimiter(),
            retrieval_index=RetrievalIndex(
                EmbeddingClient(api_key="global-key", embeddings_factory=lambda key: embeddings),
                store,
            ),
            generation_client=generation_client,
            runner=runner,
            settings=AssistantSettings(),
        )
        request = ChatRequest(
            course_id=seeded_courses["safety_course_id"],
            message="Which extinguisher works on flammable liquid fires?",
        )

        # Act
        result = await orchestrator.chat(seeded_courses["student_id"], request)
        await runner.drain(timeout=2)

        # Assert
        assert embeddings.checked_out == [0]
        assert result.debug.retrieved_chunk_count == 1
        assert result.debug.retrieved_chunks == [
            "Class B fire extinguisher for flammable liquid fires."
        ]
