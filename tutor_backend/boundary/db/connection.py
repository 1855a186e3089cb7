"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and schema
bootstrap (including the pgvector extension).

Dependencies: sqlalchemy, asyncpg, tutor_backend.configs
System role: Database connection lifecycle management
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tutor_backend.boundary.db.base import Base
from tutor_backend.configs import get_settings

logger = logging.getLogger(__name__)


def get_async_engine() -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    db_config = get_settings().database

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    Args:
        engine: Engine to bind (a new pooled engine when None)

    Returns:
        async_sessionmaker: Factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables, enabling pgvector first on PostgreSQL.

    Args:
        engine: Target engine
    """
    # Register every model on Base.metadata before create_all
    import tutor_backend.boundary.db.models  # noqa: F401

    async with engine.begin() as conn:
        if engine.dialect.name == "postgresql":
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Schema ready on {engine.dialect.name}")
