"""
Assistant orchestrator for course-scoped and general study chat.

Orchestrates the full chat flow: rate limiting, validation, access checks,
scoped retrieval, prompt assembly, generation, and conversation persistence.
The user turn is committed before generation; the assistant turn is written
by the background runner with its own session.

Dependencies: tutor_backend.core, tutor_backend.application, tutor_backend.boundary
System role: Chat service orchestration layer
"""

import logging
import math
import time
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tutor_backend.application.adapters.conversation_store import ConversationStore
from tutor_backend.application.services.retrieval_service import RetrievalIndex
from tutor_backend.boundary.db.CRUD import course_crud, enrollment_crud, tenant_crud
from tutor_backend.boundary.gemini import GenerationClient
from tutor_backend.boundary.vdb import RetrievalScope, ScoredChunk
from tutor_backend.configs.assistant import AssistantSettings
from tutor_backend.core.background import BackgroundTaskRunner
from tutor_backend.core.exceptions import (
    CourseNotFoundError,
    EnrollmentRequiredError,
    TenantKeyMissingError,
    TutorAssistantError,
    UpstreamUnavailableError,
    ValidationError,
)
from tutor_backend.core.prompt_builder import ChatMode, PromptBuilder
from tutor_backend.core.rate_limiter import SlidingWindowRateLimiter
from tutor_backend.models.chat import ChatDebug, ChatRequest, ChatResult, UsageEstimate
from tutor_backend.models.conversation import TurnRole
from tutor_backend.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

GENERAL_CHAT_TITLE = "General Knowledge"
CONTEXT_SEPARATOR = "\n\n---\n\n"


def estimate_tokens(text: str) -> int:
    """Rough token count (four characters per token)."""
    return math.ceil(len(text) / 4)


async def resolve_tenant_key(db: AsyncSession, tenant_id: UUID | None) -> str | None:
    """
    Resolve the Gemini key a request must use.

    Args:
        db: Async database session
        tenant_id: Tenant of the request, or None for the global key

    Returns:
        str | None: Tenant key, or None meaning "use the global key"

    Raises:
        TenantKeyMissingError: If the tenant is unknown or has no key configured
    """
    if tenant_id is None:
        return None
    tenant = await tenant_crud.get_by_id(db, tenant_id)
    if tenant is None or not tenant.gemini_api_key:
        raise TenantKeyMissingError(details={"tenant_id": str(tenant_id)})
    return tenant.gemini_api_key


class AssistantOrchestrator:
    """
    Chat pipeline for the tutoring assistant.

    Flow:
    1. Rate limit the principal
    2. Validate the message, the course and the enrollment
    3. Load history and commit the user turn
    4. Retrieve course chunks (course mode only) and build the prompt
    5. Generate the answer
    6. Persist the assistant turn in the background
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        rate_limiter: SlidingWindowRateLimiter,
        retrieval_index: RetrievalIndex,
        generation_client: GenerationClient,
        runner: BackgroundTaskRunner,
        settings: AssistantSettings | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        """
        Initialize assistant orchestrator.

        Args:
            session_factory: Factory for request and background sessions
            rate_limiter: Per-principal limiter
            retrieval_index: Scoped chunk retrieval
            generation_client: Gemini generation client
            runner: Background runner for assistant turn writes
            settings: Assistant settings (defaults when None)
            prompt_builder: Prompt assembler (sized from settings when None)
        """
        self.session_factory = session_factory
        self.rate_limiter = rate_limiter
        self.retrieval_index = retrieval_index
        self.generation_client = generation_client
        self.runner = runner
        self.settings = settings or AssistantSettings()
        self.prompt_builder = prompt_builder or PromptBuilder(self.settings.max_prompt_length)

    def validate_message(self, message: str) -> str:
        """
        Strip the message and check its length.

        Raises:
            ValidationError: If the stripped length is outside the allowed range
        """
        text = (message or "").strip()
        low, high = self.settings.message_min_length, self.settings.message_max_length
        if not low <= len(text) <= high:
            raise ValidationError(
                f"Message must be between {low} and {high} characters.",
                field="message",
                details={"length": len(text)},
            )
        return text

    async def chat(
        self,
        user_id: UUID,
        request: ChatRequest,
        tenant_id: UUID | None = None,
    ) -> ChatResult:
        """
        Answer one learner message.

        Args:
            user_id: Authenticated learner
            request: Course id (optional) and message
            tenant_id: Tenant whose Gemini key must be used (None = global key)

        Returns:
            ChatResult: Answer, conversation id and debug metadata

        Raises:
            RateLimitedError: Principal exhausted its window
            ValidationError: Message length out of range
            AccessDeniedError: Course missing, not enrolled, or tenant key missing
            UpstreamUnavailableError: Generation failed or any unexpected error
        """
        start = time.perf_counter()
        self.rate_limiter.enforce(str(user_id))

        try:
            return await self._chat(user_id, request, tenant_id, start)
        except TutorAssistantError:
            raise
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:chat - AI chat error",
                e,
                user_id=user_id,
                course_id=request.course_id,
            )
            raise UpstreamUnavailableError(
                operation="chat",
                details={"error_type": type(e).__name__},
            ) from e

    async def _chat(
        self,
        user_id: UUID,
        request: ChatRequest,
        tenant_id: UUID | None,
        start: float,
    ) -> ChatResult:
        message = self.validate_message(request.message)
        course_id = request.course_id
        mode = ChatMode.COURSE if course_id is not None else ChatMode.GENERAL

        async with self.session_factory() as db:
            course_title = GENERAL_CHAT_TITLE
            if course_id is not None:
                course = await course_crud.get_by_id(db, course_id)
                if course is None:
                    raise CourseNotFoundError(course_id)
                if not await enrollment_crud.is_actively_enrolled(db, user_id, course_id):
                    raise EnrollmentRequiredError(
                        details={"user_id": str(user_id), "course_id": str(course_id)}
                    )
                course_title = course.title

            api_key = await resolve_tenant_key(db, tenant_id)

            store = ConversationStore(db)
            conversation = await store.find_or_create(user_id, course_id)
            conversation_id = conversation.id

            # Prior turns only; the new message is rendered as the user section.
            history = await store.recent_turns(conversation_id, self.settings.history_turns)

            await store.append_turn(conversation_id, TurnRole.USER, message)
            await db.commit()

        # No session is held open across retrieval.
        chunks: list[ScoredChunk] = []
        if course_id is not None:
            chunks = await self.retrieval_index.top_k(
                RetrievalScope(course_id=course_id),
                message,
                k=self.settings.retrieval_top_k,
                api_key=api_key,
            )
        context_text = CONTEXT_SEPARATOR.join(c.content for c in chunks)
        context_text = context_text[: self.settings.context_char_limit]

        prompt = self.prompt_builder.build(
            mode,
            context_text,
            history,
            message,
            course_title=course_title if mode is ChatMode.COURSE else None,
        )

        response_text = await self.generation_client.generate(prompt, api_key=api_key)

        self.runner.submit(
            self._persist_assistant_turn,
            conversation_id,
            response_text,
            description=f"persist assistant turn for conversation {conversation_id}",
        )

        latency_ms = int((time.perf_counter() - start) * 1000)
        usage = UsageEstimate(
            input_tokens_estimate=estimate_tokens(prompt),
            output_tokens_estimate=estimate_tokens(response_text),
            latency_ms=latency_ms,
        )
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:chat - Answered {mode.value} chat",
            conversation_id=conversation_id,
            retrieved_chunks=len(chunks),
            input_tokens_estimate=usage.input_tokens_estimate,
            output_tokens_estimate=usage.output_tokens_estimate,
            latency_ms=latency_ms,
        )

        return ChatResult(
            response=response_text,
            conversation_id=conversation_id,
            debug=ChatDebug(
                course_title=course_title,
                retrieved_chunks=[c.content for c in chunks],
                retrieved_chunk_count=len(chunks),
                usage=usage,
            ),
        )

    async def _persist_assistant_turn(self, conversation_id: UUID, content: str) -> None:
        """Write the assistant turn in its own session."""
        async with self.session_factory() as db:
            await ConversationStore(db).append_turn(conversation_id, TurnRole.ASSISTANT, content)
            await db.commit()
