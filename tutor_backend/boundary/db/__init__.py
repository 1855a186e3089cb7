"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Dependencies: sqlalchemy, pgvector, tutor_backend.configs
System role: Persistent storage for courses, enrollments, tenants,
conversations, and embedded lesson chunks.
"""

from tutor_backend.boundary.db.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin
from tutor_backend.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
]
