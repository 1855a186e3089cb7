"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database, seeded course data, fake Gemini backends
Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import uuid
import zlib
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.messages import AIMessage

from tutor_backend.boundary.gemini import EmbeddingClient, GenerationClient

DIMENSION = 768


def keyword_vector(text: str, dimension: int = DIMENSION) -> list[float]:
    """Deterministic bag-of-words vector: one slot per (hashed) lowercase word."""
    vector = [0.0] * dimension
    for word in text.lower().split():
        word = word.strip(".,?!:;")
        if word:
            vector[zlib.crc32(word.encode()) % dimension] += 1.0
    if not any(vector):
        vector[0] = 1.0
    return vector


class KeywordEmbeddings(Embeddings):
    """Offline stand-in for the Gemini embedding model."""

    def __init__(self, dimension: int = DIMENSION) -> None:
        self.dimension = dimension
        self.calls: list[str] = []

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.calls.append(text)
        return keyword_vector(text, self.dimension)


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from tutor_backend.boundary.db import Base, create_tables

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory):
    """Provide a session on the in-memory database, rolled back after the test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def seeded_courses(session_factory) -> dict:
    """
    Seed two courses with one lesson each, a tenant, and enrollments.

    Returns:
        dict: Ids of the seeded rows
    """
    from tutor_backend.boundary.db.models import (
        CourseModel,
        EnrollmentModel,
        EnrollmentStatus,
        LessonModel,
        TenantModel,
    )

    student_id = uuid.uuid4()
    async with session_factory() as db:
        tenant = TenantModel(name="Acme Training", gemini_api_key="tenant-key")
        keyless_tenant = TenantModel(name="No Key Academy", gemini_api_key=None)
        safety = CourseModel(title="Workplace Safety")
        chemistry = CourseModel(title="Intro Chemistry")
        db.add_all([tenant, keyless_tenant, safety, chemistry])
        await db.flush()

        safety_lesson = LessonModel(
            course_id=safety.id,
            title="Fire extinguishers",
            content="Use a class B fire extinguisher on flammable liquid fires.",
        )
        chemistry_lesson = LessonModel(
            course_id=chemistry.id,
            title="Acids",
            content="Acids donate protons and turn litmus paper red.",
        )
        db.add_all(
            [
                safety_lesson,
                chemistry_lesson,
                EnrollmentModel(
                    student_id=student_id,
                    course_id=safety.id,
                    status=EnrollmentStatus.ACTIVE,
                ),
                EnrollmentModel(
                    student_id=student_id,
                    course_id=chemistry.id,
                    status=EnrollmentStatus.PENDING,
                ),
            ]
        )
        await db.commit()

        return {
            "student_id": student_id,
            "tenant_id": tenant.id,
            "keyless_tenant_id": keyless_tenant.id,
            "safety_course_id": safety.id,
            "safety_lesson_id": safety_lesson.id,
            "chemistry_course_id": chemistry.id,
            "chemistry_lesson_id": chemistry_lesson.id,
        }


@pytest.fixture
def index_chunks():
    """
    Provide a helper storing texts with keyword vectors in a chunk store.

    Vectors are computed directly so the embeddings fixture records no calls.
    """
    from tutor_backend.models.chunk import TextChunk

    async def _index(store, lesson_id, course_id, texts):
        chunks = [
            TextChunk(source_id=str(lesson_id), index=i, text=text)
            for i, text in enumerate(texts)
        ]
        await store.replace_source_chunks(
            lesson_id, course_id, chunks, [keyword_vector(t) for t in texts]
        )

    return _index


@pytest.fixture
def keyword_embeddings() -> KeywordEmbeddings:
    """Provide deterministic offline embeddings."""
    return KeywordEmbeddings()


@pytest.fixture
def embedding_client(keyword_embeddings: KeywordEmbeddings) -> EmbeddingClient:
    """Provide EmbeddingClient backed by keyword embeddings."""
    return EmbeddingClient(
        api_key="global-key",
        embeddings_factory=lambda key: keyword_embeddings,
        timeout_seconds=1.0,
    )


@pytest.fixture
def mock_chat_model() -> MagicMock:
    """Provide mock chat model answering with a fixed message."""
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content="Use a class B extinguisher."))
    return model


@pytest.fixture
def generation_client(mock_chat_model: MagicMock) -> GenerationClient:
    """Provide GenerationClient backed by the mock chat model."""
    return GenerationClient(
        api_key="global-key",
        model_factory=lambda key: mock_chat_model,
        timeout_seconds=1.0,
    )
