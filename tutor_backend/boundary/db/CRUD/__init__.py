"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from tutor_backend.boundary.db.CRUD import enrollment_crud

    active = await enrollment_crud.is_actively_enrolled(db, user_id, course_id)
"""

from tutor_backend.boundary.db.CRUD.base_crud import BaseCRUD
from tutor_backend.boundary.db.CRUD.course_crud import (
    CourseCRUD,
    LessonCRUD,
    TenantCRUD,
    course_crud,
    lesson_crud,
    tenant_crud,
)
from tutor_backend.boundary.db.CRUD.enrollment_crud import EnrollmentCRUD, enrollment_crud
from tutor_backend.boundary.db.CRUD.conversation_crud import (
    ConversationCRUD,
    MessageCRUD,
    conversation_crud,
    message_crud,
)

__all__ = [
    "BaseCRUD",
    "CourseCRUD",
    "LessonCRUD",
    "TenantCRUD",
    "EnrollmentCRUD",
    "ConversationCRUD",
    "MessageCRUD",
    "course_crud",
    "lesson_crud",
    "tenant_crud",
    "enrollment_crud",
    "conversation_crud",
    "message_crud",
]
