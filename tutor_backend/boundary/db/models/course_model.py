"""
Course and lesson ORM models.

The course → lesson ownership chain is what retrieval scopes are built from.

Dependencies: sqlalchemy, tutor_backend.boundary.db.base
System role: Course content persistence
"""

from uuid import UUID

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutor_backend.boundary.db.base import Base, UUIDMixin, TimestampMixin


class CourseModel(Base, UUIDMixin, TimestampMixin):
    """
    Course ORM model.

    Attributes:
        title: Course title shown to the assistant in course mode
        tenant_id: Owning tenant (None for platform-wide courses)
        lessons: Lessons of the course (cascade delete)
    """

    __tablename__ = "courses"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    tenant_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("tenants.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    tenant = relationship("TenantModel", back_populates="courses")
    lessons = relationship(
        "LessonModel",
        back_populates="course",
        cascade="all, delete-orphan",
    )


class LessonModel(Base, UUIDMixin, TimestampMixin):
    """
    Lesson ORM model.

    Attributes:
        course_id: Parent course
        title: Lesson title
        content: Lesson body text, source of the indexed chunks
    """

    __tablename__ = "lessons"

    course_id: Mapped[UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    course = relationship("CourseModel", back_populates="lessons")
    chunks = relationship(
        "LessonChunkModel",
        back_populates="lesson",
        cascade="all, delete-orphan",
    )
