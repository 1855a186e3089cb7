"""
Enrollment CRUD operations.

Dependencies: sqlalchemy, tutor_backend.boundary.db.models
System role: Enrollment checks gating course-scoped assistant chat
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutor_backend.boundary.db.models import EnrollmentModel, EnrollmentStatus
from tutor_backend.boundary.db.CRUD.base_crud import BaseCRUD


class EnrollmentCRUD(BaseCRUD[EnrollmentModel]):
    """CRUD operations for EnrollmentModel."""

    def __init__(self) -> None:
        """Initialize EnrollmentCRUD with EnrollmentModel."""
        super().__init__(EnrollmentModel)

    async def get_for_student(
        self,
        session: AsyncSession,
        student_id: UUID,
        course_id: UUID,
    ) -> EnrollmentModel | None:
        """
        Retrieve a student's enrollment in a course.

        Args:
            session: Async database session
            student_id: Student UUID
            course_id: Course UUID

        Returns:
            EnrollmentModel if the student ever enrolled, None otherwise
        """
        stmt = select(EnrollmentModel).where(
            EnrollmentModel.student_id == student_id,
            EnrollmentModel.course_id == course_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_actively_enrolled(
        self,
        session: AsyncSession,
        student_id: UUID,
        course_id: UUID,
    ) -> bool:
        """Return True only for an enrollment in ACTIVE status."""
        enrollment = await self.get_for_student(session, student_id, course_id)
        return enrollment is not None and enrollment.status == EnrollmentStatus.ACTIVE


enrollment_crud = EnrollmentCRUD()
