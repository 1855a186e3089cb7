"""
Chunk store factory selecting between pgvector (prod) and in-memory (dev).

Depends on ASSISTANT_VECTOR_STORE_TYPE.

Dependencies: tutor_backend.boundary.vdb, tutor_backend.configs
System role: Chunk store instantiation and selection
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tutor_backend.boundary.vdb.chunk_store import ChunkStore
from tutor_backend.boundary.vdb.memory_store import InMemoryChunkStore
from tutor_backend.boundary.vdb.pgvector_store import PgVectorChunkStore
from tutor_backend.configs import get_settings

logger = logging.getLogger(__name__)


def get_chunk_store(session_factory: async_sessionmaker[AsyncSession]) -> ChunkStore:
    """
    Build the configured chunk store.

    Args:
        session_factory: Session factory used by the pgvector store

    Returns:
        PgVectorChunkStore or InMemoryChunkStore

    Raises:
        ValueError: If the configured store type is unknown
    """
    store_type = get_settings().assistant.vector_store_type.lower()

    if store_type == "pgvector":
        logger.info(f"{__name__}:get_chunk_store - Creating pgvector chunk store")
        return PgVectorChunkStore(session_factory)

    if store_type == "memory":
        logger.info(f"{__name__}:get_chunk_store - Creating in-memory chunk store (local dev mode)")
        return InMemoryChunkStore()

    raise ValueError(
        f"Invalid ASSISTANT_VECTOR_STORE_TYPE: {store_type}. "
        f"Must be 'pgvector' (production) or 'memory' (dev)."
    )
