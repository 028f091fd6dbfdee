# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin
from src.infrastructure.database.models.user import course_enrollments

if TYPE_CHECKING:
    from src.infrastructure.database.models.submittable import Activity, Assignment
    from src.infrastructure.database.models.user import Student, Teacher


class Course(UUIDMixin, TimestampMixin, Base):
    """A course owned by exactly one teacher.

    The assignments and activities collections are the course's reference
    lists: a submittable is attached by appending to them and detached
    (and deleted) by removing it.
    """

    __tablename__ = "courses"
    __table_args__ = (Index("ix_courses_teacher_active", "teacher_id", "is_active"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    about: Mapped[str] = mapped_column(Text, nullable=False, default="")
    teacher_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("teachers.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    teacher: Mapped[Teacher] = relationship("Teacher", lazy="selectin")
    students: Mapped[list[Student]] = relationship(
        "Student",
        secondary=course_enrollments,
        back_populates="courses",
        lazy="selectin",
    )
    assignments: Mapped[list[Assignment]] = relationship(
        "Assignment",
        cascade="all, delete-orphan",
        order_by="Assignment.due_date",
        lazy="selectin",
    )
    activities: Mapped[list[Activity]] = relationship(
        "Activity",
        cascade="all, delete-orphan",
        order_by="Activity.due_date",
        lazy="selectin",
    )
