"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, tutor_backend.api, tutor_backend.observability, tutor_backend.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tutor_backend.api import api_router
from tutor_backend.api.exception_handlers import register_exception_handlers
from tutor_backend.application.services import (
    AssistantOrchestrator,
    LessonIndexer,
    PublicAssistantService,
    RetrievalIndex,
)
from tutor_backend.boundary.db import create_tables, get_async_engine, get_async_session_factory
from tutor_backend.boundary.gemini import EmbeddingClient, GenerationClient
from tutor_backend.boundary.vdb import ChunkStore
from tutor_backend.boundary.vdb.vector_store_factory import get_chunk_store
from tutor_backend.configs import Settings, get_settings
from tutor_backend.core.background import BackgroundTaskRunner
from tutor_backend.core.chunking import ChunkingEngine
from tutor_backend.core.prompt_builder import PromptBuilder
from tutor_backend.core.rate_limiter import SlidingWindowRateLimiter
from tutor_backend.observability.logger import configure_logging
from tutor_backend.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


def build_services(
    app: FastAPI,
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    embedding_client: EmbeddingClient,
    generation_client: GenerationClient,
    chunk_store: ChunkStore,
) -> BackgroundTaskRunner:
    """
    Wire the assistant services and store them on app.state.

    Args:
        app: Application to populate
        settings: Application settings
        session_factory: Database session factory
        embedding_client: Gemini embedding client
        generation_client: Gemini generation client
        chunk_store: Chunk vector store

    Returns:
        BackgroundTaskRunner: Runner to drain on shutdown
    """
    assistant = settings.assistant
    runner = BackgroundTaskRunner(max_concurrency=assistant.background_max_concurrency)
    rate_limiter = SlidingWindowRateLimiter(
        limit=assistant.rate_limit_requests,
        window_seconds=assistant.rate_limit_window_seconds,
    )
    retrieval_index = RetrievalIndex(embedding_client, chunk_store)

    app.state.session_factory = session_factory
    app.state.background_runner = runner
    app.state.assistant_service = AssistantOrchestrator(
        session_factory=session_factory,
        rate_limiter=rate_limiter,
        retrieval_index=retrieval_index,
        generation_client=generation_client,
        runner=runner,
        settings=assistant,
        prompt_builder=PromptBuilder(assistant.max_prompt_length),
    )
    app.state.public_assistant_service = PublicAssistantService(
        session_factory=session_factory,
        rate_limiter=rate_limiter,
        generation_client=generation_client,
    )
    app.state.lesson_indexer = LessonIndexer(
        embedding_client=embedding_client,
        chunk_store=chunk_store,
        chunking_engine=ChunkingEngine(assistant.chunk_target_size, assistant.chunk_min_size),
        runner=runner,
    )
    return runner


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    Initializes shared resources like the database engine and Gemini clients.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Application startup: logging configured, environment={settings.environment}")

    engine = get_async_engine()
    try:
        await create_tables(engine)
        session_factory = get_async_session_factory(engine)

        gemini = settings.gemini
        embedding_client = EmbeddingClient(
            api_key=gemini.api_key,
            model=gemini.embedding_model,
            dimension=gemini.embedding_dimension,
            timeout_seconds=gemini.request_timeout_seconds,
            max_concurrency=gemini.embedding_concurrency,
        )
        generation_client = GenerationClient(
            api_key=gemini.api_key,
            model=gemini.generation_model,
            temperature=gemini.temperature,
            max_output_tokens=gemini.max_output_tokens,
            timeout_seconds=gemini.request_timeout_seconds,
        )
        runner = build_services(
            app,
            settings,
            session_factory,
            embedding_client,
            generation_client,
            get_chunk_store(session_factory),
        )
        logger.info("Application startup complete: all resources initialized")
    except Exception as e:
        logger.exception(
            "Failed to initialize application resources",
            extra={"error_type": type(e).__name__},
        )
        await engine.dispose()
        raise

    yield

    # Shutdown
    logger.info("Application shutdown")
    await runner.shutdown()
    await engine.dispose()


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    app = FastAPI(
        title="Tutor Assistant API",
        description="Course-grounded AI tutoring assistant with conversational memory",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tutor_backend.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
