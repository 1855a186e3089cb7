"""
Enrollment ORM model.

Dependencies: sqlalchemy, tutor_backend.boundary.db.base
System role: Course access control data
"""

import enum
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from tutor_backend.boundary.db.base import Base, UUIDMixin, TimestampMixin


class EnrollmentStatus(str, enum.Enum):
    """Lifecycle of a student's enrollment."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EnrollmentModel(Base, UUIDMixin, TimestampMixin):
    """
    Student enrollment in a course. Only ACTIVE enrollments grant assistant access.

    Attributes:
        student_id: Enrolled user (owned by the auth service, no FK)
        course_id: Course enrolled in
        status: Enrollment status
    """

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
    )

    student_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), nullable=False, index=True)
    course_id: Mapped[UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[EnrollmentStatus] = mapped_column(
        Enum(EnrollmentStatus, native_enum=False),
        nullable=False,
        default=EnrollmentStatus.PENDING,
    )
