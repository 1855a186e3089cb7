"""
Tenant ORM model.

Holds per-tenant AI settings: the Gemini key used for that tenant's requests
and the switch for the public chatbot.

Dependencies: sqlalchemy, tutor_backend.boundary.db.base
System role: Multi-tenant credential isolation
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutor_backend.boundary.db.base import Base, UUIDMixin, TimestampMixin


class TenantModel(Base, UUIDMixin, TimestampMixin):
    """
    Tenant (franchise) owning courses and an optional Gemini credential.

    Attributes:
        name: Display name
        gemini_api_key: Tenant-specific Gemini key (None = not configured)
        global_ai_enabled: Whether AI features are switched on for the tenant
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    gemini_api_key: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
    )
    global_ai_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    courses = relationship("CourseModel", back_populates="tenant")
