"""
Database models package.

Exports:
  - TenantModel: Tenant AI settings
  - CourseModel, LessonModel: Course content
  - EnrollmentModel, EnrollmentStatus: Course access
  - ConversationModel, MessageModel: Assistant conversation memory
  - LessonChunkModel: Embedded lesson chunks

Dependencies: sqlalchemy, pgvector, tutor_backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from tutor_backend.boundary.db.models.tenant_model import TenantModel
from tutor_backend.boundary.db.models.course_model import CourseModel, LessonModel
from tutor_backend.boundary.db.models.enrollment_model import EnrollmentModel, EnrollmentStatus
from tutor_backend.boundary.db.models.conversation_model import ConversationModel, MessageModel
from tutor_backend.boundary.db.models.lesson_chunk_model import (
    EMBEDDING_DIMENSION,
    LessonChunkModel,
)

__all__ = [
    "TenantModel",
    "CourseModel",
    "LessonModel",
    "EnrollmentModel",
    "EnrollmentStatus",
    "ConversationModel",
    "MessageModel",
    "LessonChunkModel",
    "EMBEDDING_DIMENSION",
]
