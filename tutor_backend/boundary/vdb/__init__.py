"""
Vector store boundary layer.

Chunk stores for embedded lesson content:
- PgVectorChunkStore: PostgreSQL + pgvector (production)
- InMemoryChunkStore: numpy-backed (development, tests)

Dependencies: sqlalchemy, pgvector, numpy
System role: Vector store adapter for RAG retrieval
"""

from tutor_backend.boundary.vdb.chunk_store import ChunkStore
from tutor_backend.boundary.vdb.memory_store import InMemoryChunkStore
from tutor_backend.boundary.vdb.pgvector_store import PgVectorChunkStore, build_scoped_query
from tutor_backend.boundary.vdb.vector_schemas import RetrievalScope, ScoredChunk

__all__ = [
    "ChunkStore",
    "InMemoryChunkStore",
    "PgVectorChunkStore",
    "RetrievalScope",
    "ScoredChunk",
    "build_scoped_query",
]
