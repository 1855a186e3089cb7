"""
Course, lesson, and tenant CRUD operations.

Read access to the course ownership chain and tenant AI settings.

Dependencies: sqlalchemy, tutor_backend.boundary.db.models
System role: Course content lookups for the assistant
"""

from tutor_backend.boundary.db.models import CourseModel, LessonModel, TenantModel
from tutor_backend.boundary.db.CRUD.base_crud import BaseCRUD


class CourseCRUD(BaseCRUD[CourseModel]):
    """CRUD operations for CourseModel."""

    def __init__(self) -> None:
        """Initialize CourseCRUD with CourseModel."""
        super().__init__(CourseModel)


class LessonCRUD(BaseCRUD[LessonModel]):
    """CRUD operations for LessonModel."""

    def __init__(self) -> None:
        """Initialize LessonCRUD with LessonModel."""
        super().__init__(LessonModel)


class TenantCRUD(BaseCRUD[TenantModel]):
    """CRUD operations for TenantModel."""

    def __init__(self) -> None:
        """Initialize TenantCRUD with TenantModel."""
        super().__init__(TenantModel)


course_crud = CourseCRUD()
lesson_crud = LessonCRUD()
tenant_crud = TenantCRUD()
