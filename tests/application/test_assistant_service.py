"""
Test suite for AssistantOrchestrator.

End-to-end runs against in-memory SQLite, the in-memory chunk store,
keyword embeddings and a mocked chat model.

System role: Verification of the chat pipeline
"""

import math
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage
from sqlalchemy import func, select

from tutor_backend.application.services import AssistantOrchestrator, RetrievalIndex
from tutor_backend.boundary.db.models import ConversationModel, MessageModel
from tutor_backend.boundary.gemini import EmbeddingClient, GenerationClient
from tutor_backend.boundary.vdb import InMemoryChunkStore
from tutor_backend.configs.assistant import AssistantSettings
from tutor_backend.core.background import BackgroundTaskRunner
from tutor_backend.core.exceptions import (
    AccessDeniedError,
    CourseNotFoundError,
    EnrollmentRequiredError,
    RateLimitedError,
    TenantKeyMissingError,
    UpstreamUnavailableError,
    ValidationError,
)
from tutor_backend.core.prompt_builder import NO_CONTEXT_PLACEHOLDER
from tutor_backend.core.rate_limiter import SlidingWindowRateLimiter
from tutor_backend.models.chat import ChatRequest

SAFETY_QUESTION = "Which fire extinguisher should I use on a flammable liquid fire?"


async def count_rows(session_factory, model) -> int:
    """Count rows of a table."""
    async with session_factory() as db:
        return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.fixture
async def chunk_store(seeded_courses: dict, index_chunks) -> InMemoryChunkStore:
    """Provide store with three safety chunks and one chemistry chunk."""
    store = InMemoryChunkStore()
    await index_chunks(
        store,
        seeded_courses["safety_lesson_id"],
        seeded_courses["safety_course_id"],
        [
            "Class B fire extinguisher for flammable liquid fires.",
            "Class A extinguishers are for wood and paper.",
            "Never use water on an electrical fire.",
        ],
    )
    # Worded like the question on purpose: must still never be retrieved.
    await index_chunks(
        store,
        seeded_courses["chemistry_lesson_id"],
        seeded_courses["chemistry_course_id"],
        [SAFETY_QUESTION],
    )
    return store


@pytest.fixture
def runner() -> BackgroundTaskRunner:
    """Provide background runner."""
    return BackgroundTaskRunner()


@pytest.fixture
def rate_limiter() -> SlidingWindowRateLimiter:
    """Provide limiter with the default window."""
    return SlidingWindowRateLimiter(limit=20, window_seconds=300)


@pytest.fixture
def orchestrator(
    session_factory,
    rate_limiter: SlidingWindowRateLimiter,
    embedding_client: EmbeddingClient,
    chunk_store: InMemoryChunkStore,
    generation_client: GenerationClient,
    runner: BackgroundTaskRunner,
) -> AssistantOrchestrator:
    """Provide fully wired orchestrator."""
    return AssistantOrchestrator(
        session_factory=session_factory,
        rate_limiter=rate_limiter,
        retrieval_index=RetrievalIndex(embedding_client, chunk_store),
        generation_client=generation_client,
        runner=runner,
        settings=AssistantSettings(),
    )


class TestAssistantOrchestratorCourseChat:
    """Test suite for course-scoped chat."""

    @pytest.mark.asyncio
    async def test_enrolled_course_chat_should_answer_with_scoped_context(
        self,
        orchestrator: AssistantOrchestrator,
        seeded_courses: dict,
        mock_chat_model: MagicMock,
        runner: BackgroundTaskRunner,
        session_factory,
    ) -> None:
        """Test the full pipeline: retrieval, generation, persisted turn pair."""
        # Arrange
        request = ChatRequest(course_id=seeded_courses["safety_course_id"], message=SAFETY_QUESTION)

        # Act
        result = await orchestrator.chat(seeded_courses["student_id"], request)
        await runner.drain(timeout=2)

        # Assert
        assert result.response == "Use a class B extinguisher."
        assert result.debug.course_title == "Workplace Safety"
        assert result.debug.retrieved_chunk_count == 3
        assert result.debug.retrieved_chunks[0] == "Class B fire extinguisher for flammable liquid fires."
        assert SAFETY_QUESTION not in result.debug.retrieved_chunks

        prompt = mock_chat_model.ainvoke.await_args.args[0]
        assert "Class B fire extinguisher for flammable liquid fires." in prompt
        assert 'serving the course "Workplace Safety"' in prompt
        assert result.debug.usage.input_tokens_estimate == math.ceil(len(prompt) / 4)

        async with session_factory() as db:
            messages = (
                await db.execute(
                    select(MessageModel)
                    .where(MessageModel.conversation_id == result.conversation_id)
                    .order_by(MessageModel.created_at)
                )
            ).scalars().all()
        assert [(m.role, m.content) for m in messages] == [
            ("user", SAFETY_QUESTION),
            ("assistant", "Use a class B extinguisher."),
        ]

    @pytest.mark.asyncio
    async def test_missing_enrollment_should_deny_without_side_effects(
        self,
        orchestrator: AssistantOrchestrator,
        seeded_courses: dict,
        mock_chat_model: MagicMock,
        session_factory,
    ) -> None:
        """Test a pending enrollment is denied before any turn or generation."""
        # Arrange
        request = ChatRequest(
            course_id=seeded_courses["chemistry_course_id"],
            message="What turns litmus paper red?",
        )

        # Act / Assert
        with pytest.raises(EnrollmentRequiredError) as exc_info:
            await orchestrator.chat(seeded_courses["student_id"], request)
        assert isinstance(exc_info.value, AccessDeniedError)
        assert exc_info.value.message == (
            "You must have an active enrollment in this course to use the AI assistant."
        )
        mock_chat_model.ainvoke.assert_not_awaited()
        assert await count_rows(session_factory, MessageModel) == 0
        assert await count_rows(session_factory, ConversationModel) == 0

    @pytest.mark.asyncio
    async def test_unknown_course_should_raise_course_not_found(
        self, orchestrator: AssistantOrchestrator, seeded_courses: dict
    ) -> None:
        """Test a missing course is reported as not found."""
        request = ChatRequest(course_id=uuid.uuid4(), message="Is this on the exam?")
        with pytest.raises(CourseNotFoundError):
            await orchestrator.chat(seeded_courses["student_id"], request)

    @pytest.mark.asyncio
    async def test_rate_limited_principal_should_make_no_downstream_calls(
        self,
        orchestrator: AssistantOrchestrator,
        rate_limiter: SlidingWindowRateLimiter,
        seeded_courses: dict,
        keyword_embeddings,
        mock_chat_model: MagicMock,
        session_factory,
    ) -> None:
        """Test the 21st request in the window stops before any other work."""
        # Arrange
        student_id = seeded_courses["student_id"]
        for _ in range(20):
            assert rate_limiter.check(str(student_id))
        request = ChatRequest(course_id=seeded_courses["safety_course_id"], message=SAFETY_QUESTION)

        # Act / Assert
        with pytest.raises(RateLimitedError):
            await orchestrator.chat(student_id, request)
        assert keyword_embeddings.calls == []
        mock_chat_model.ainvoke.assert_not_awaited()
        assert await count_rows(session_factory, ConversationModel) == 0

    @pytest.mark.asyncio
    async def test_embedding_failure_should_answer_without_context(
        self,
        session_factory,
        seeded_courses: dict,
        chunk_store: InMemoryChunkStore,
        generation_client: GenerationClient,
        mock_chat_model: MagicMock,
        runner: BackgroundTaskRunner,
    ) -> None:
        """Test retrieval degrades to no context instead of failing the turn."""
        # Arrange
        broken = MagicMock()
        broken.aembed_query = AsyncMock(side_effect=RuntimeError("embedding quota exceeded"))
        orchestrator = AssistantOrchestrator(
            session_factory=session_factory,
            rate_limiter=SlidingWindowRateLimiter(),
            retrieval_index=RetrievalIndex(
                EmbeddingClient(api_key="k", embeddings_factory=lambda key: broken), chunk_store
            ),
            generation_client=generation_client,
            runner=runner,
        )
        request = ChatRequest(course_id=seeded_courses["safety_course_id"], message=SAFETY_QUESTION)

        # Act
        result = await orchestrator.chat(seeded_courses["student_id"], request)

        # Assert
        assert result.debug.retrieved_chunk_count == 0
        assert NO_CONTEXT_PLACEHOLDER in mock_chat_model.ainvoke.await_args.args[0]


class TestAssistantOrchestratorGeneralChat:
    """Test suite for general study chat."""

    @pytest.mark.asyncio
    async def test_general_chat_should_skip_retrieval(
        self,
        orchestrator: AssistantOrchestrator,
        keyword_embeddings,
        mock_chat_model: MagicMock,
    ) -> None:
        """Test no course means no embedding call and the general instruction."""
        # Act
        result = await orchestrator.chat(uuid.uuid4(), ChatRequest(message="How do I study better?"))

        # Assert
        assert keyword_embeddings.calls == []
        assert result.debug.course_title == "General Knowledge"
        assert result.debug.retrieved_chunks == []
        assert "General Study Chat" in mock_chat_model.ainvoke.await_args.args[0]

    @pytest.mark.asyncio
    async def test_second_turn_should_include_previous_exchange(
        self,
        orchestrator: AssistantOrchestrator,
        mock_chat_model: MagicMock,
        runner: BackgroundTaskRunner,
    ) -> None:
        """Test history carries the earlier question and answer into the next prompt."""
        # Arrange
        user_id = uuid.uuid4()
        first = await orchestrator.chat(user_id, ChatRequest(message="What is osmosis?"))
        await runner.drain(timeout=2)

        # Act
        second = await orchestrator.chat(user_id, ChatRequest(message="Give me an example."))

        # Assert
        prompt = mock_chat_model.ainvoke.await_args.args[0]
        assert second.conversation_id == first.conversation_id
        assert "Student: What is osmosis?\nAssistant: Use a class B extinguisher." in prompt
        assert prompt.count("Give me an example.") == 1

    @pytest.mark.asyncio
    async def test_history_window_should_count_prior_turns_only(
        self,
        session_factory,
        embedding_client: EmbeddingClient,
        chunk_store: InMemoryChunkStore,
        generation_client: GenerationClient,
        mock_chat_model: MagicMock,
        runner: BackgroundTaskRunner,
    ) -> None:
        """Test a two-turn window keeps the full previous exchange besides the new message."""
        # Arrange
        orchestrator = AssistantOrchestrator(
            session_factory=session_factory,
            rate_limiter=SlidingWindowRateLimiter(),
            retrieval_index=RetrievalIndex(embedding_client, chunk_store),
            generation_client=generation_client,
            runner=runner,
            settings=AssistantSettings(history_turns=2),
        )
        user_id = uuid.uuid4()
        await orchestrator.chat(user_id, ChatRequest(message="What is osmosis?"))
        await runner.drain(timeout=2)

        # Act
        await orchestrator.chat(user_id, ChatRequest(message="Give me an example."))

        # Assert
        prompt = mock_chat_model.ainvoke.await_args.args[0]
        assert "Student: What is osmosis?\nAssistant: Use a class B extinguisher." in prompt
        assert prompt.endswith("Student: Give me an example.\nAssistant:")
        assert prompt.count("Give me an example.") == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["hey", "    hi     ", "x" * 1001])
    async def test_message_length_out_of_range_should_raise_validation(
        self, orchestrator: AssistantOrchestrator, message: str
    ) -> None:
        """Test messages outside 5..1000 characters (after stripping) are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            await orchestrator.chat(uuid.uuid4(), ChatRequest(message=message))
        assert exc_info.value.message == "Message must be between 5 and 1000 characters."


class TestAssistantOrchestratorTenantKeys:
    """Test suite for per-tenant credential resolution."""

    @pytest.mark.asyncio
    async def test_tenant_request_should_use_tenant_key(
        self,
        session_factory,
        seeded_courses: dict,
        embedding_client: EmbeddingClient,
        chunk_store: InMemoryChunkStore,
        runner: BackgroundTaskRunner,
    ) -> None:
        """Test generation runs with the tenant's configured key."""
        # Arrange
        seen_keys = []
        model = MagicMock()
        model.ainvoke = AsyncMock(return_value=AIMessage(content="ok"))

        def factory(key):
            seen_keys.append(key)
            return model

        orchestrator = AssistantOrchestrator(
            session_factory=session_factory,
            rate_limiter=SlidingWindowRateLimiter(),
            retrieval_index=RetrievalIndex(embedding_client, chunk_store),
            generation_client=GenerationClient(api_key="global-key", model_factory=factory),
            runner=runner,
        )

        # Act
        await orchestrator.chat(
            uuid.uuid4(),
            ChatRequest(message="Explain compound interest."),
            tenant_id=seeded_courses["tenant_id"],
        )

        # Assert
        assert seen_keys == ["tenant-key"]

    @pytest.mark.asyncio
    async def test_tenant_without_key_should_be_denied(
        self, orchestrator: AssistantOrchestrator, seeded_courses: dict, mock_chat_model: MagicMock
    ) -> None:
        """Test a keyless tenant never falls back to the global key."""
        with pytest.raises(TenantKeyMissingError) as exc_info:
            await orchestrator.chat(
                uuid.uuid4(),
                ChatRequest(message="Explain compound interest."),
                tenant_id=seeded_courses["keyless_tenant_id"],
            )
        assert exc_info.value.message == "Ask the Admin to Configure Gemini Key"
        mock_chat_model.ainvoke.assert_not_awaited()


class TestAssistantOrchestratorFailures:
    """Test suite for upstream and unexpected failures."""

    @pytest.mark.asyncio
    async def test_generation_failure_should_keep_user_turn(
        self,
        orchestrator: AssistantOrchestrator,
        mock_chat_model: MagicMock,
        session_factory,
    ) -> None:
        """Test the user turn is committed before generation fails."""
        # Arrange
        mock_chat_model.ainvoke.side_effect = RuntimeError("503 from provider")

        # Act / Assert
        with pytest.raises(UpstreamUnavailableError):
            await orchestrator.chat(uuid.uuid4(), ChatRequest(message="What is entropy?"))
        assert await count_rows(session_factory, MessageModel) == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_should_be_masked(
        self,
        session_factory,
        seeded_courses: dict,
        generation_client: GenerationClient,
        runner: BackgroundTaskRunner,
    ) -> None:
        """Test an unexpected exception surfaces as UpstreamUnavailableError."""
        # Arrange
        retrieval = MagicMock()
        retrieval.top_k = AsyncMock(side_effect=KeyError("boom"))
        orchestrator = AssistantOrchestrator(
            session_factory=session_factory,
            rate_limiter=SlidingWindowRateLimiter(),
            retrieval_index=retrieval,
            generation_client=generation_client,
            runner=runner,
        )
        request = ChatRequest(course_id=seeded_courses["safety_course_id"], message=SAFETY_QUESTION)

        # Act / Assert
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await orchestrator.chat(seeded_courses["student_id"], request)
        assert exc_info.value.message == "The AI service is temporarily unavailable. Please try again."
        assert "boom" not in exc_info.value.message
