# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Users and their role profiles.

A User is the authenticated identity (the JWT subject). Teachers and
students additionally own a role profile row, which is what courses,
submissions and announcements reference.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Column, ForeignKey, String, Table
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from src.infrastructure.database.models.course import Course

course_enrollments = Table(
    "course_enrollments",
    Base.metadata,
    Column(
        "course_id",
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "student_id",
        UUID(as_uuid=False),
        ForeignKey("students.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(UUIDMixin, TimestampMixin, Base):
    """Authenticated identity."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('teacher', 'student', 'admin')", name="valid_user_role"),
    )

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)


class Teacher(UUIDMixin, TimestampMixin, Base):
    """Teacher role profile. Owns courses."""

    __tablename__ = "teachers"

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    user: Mapped[User] = relationship(User, lazy="selectin")


class Student(UUIDMixin, TimestampMixin, Base):
    """Student role profile. Enrolled in courses."""

    __tablename__ = "students"

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    user: Mapped[User] = relationship(User, lazy="selectin")
    courses: Mapped[list[Course]] = relationship(
        "Course",
        secondary=course_enrollments,
        back_populates="students",
        lazy="selectin",
    )

    def is_enrolled_in(self, course_id: str) -> bool:
        return any(course.id == course_id for course in self.courses)
