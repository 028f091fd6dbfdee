# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submittable work (assignments and activities) and student submissions.

Assignments and activities share one table, told apart by the ``kind``
discriminator. Each student holds at most one submission per submittable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin
from src.utils.datetime import utc_now

SUBMISSION_SUBMITTED = "submitted"
SUBMISSION_GRADED = "graded"


class Submittable(UUIDMixin, TimestampMixin, Base):
    """Common columns for assignments and activities."""

    __tablename__ = "submittables"
    __table_args__ = (
        CheckConstraint("kind IN ('assignment', 'activity')", name="valid_submittable_kind"),
        CheckConstraint("total_points > 0", name="positive_total_points"),
    )

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_points: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    links: Mapped[list[str]] = mapped_column(JSONB, default=list, nullable=False)

    attachments: Mapped[list[SubmittableAttachment]] = relationship(
        "SubmittableAttachment",
        cascade="all, delete-orphan",
        order_by="SubmittableAttachment.position",
        lazy="selectin",
    )
    submissions: Mapped[list[Submission]] = relationship(
        "Submission",
        cascade="all, delete-orphan",
        order_by="Submission.submitted_at",
        lazy="selectin",
    )

    __mapper_args__ = {
        "polymorphic_on": "kind",
        "polymorphic_identity": "submittable",
    }

    def submission_for(self, student_id: str) -> Optional[Submission]:
        return next((s for s in self.submissions if s.student_id == student_id), None)

    def find_submission(self, submission_id: str) -> Optional[Submission]:
        return next((s for s in self.submissions if s.id == submission_id), None)


class Assignment(Submittable):
    """Graded coursework with a due date."""

    __mapper_args__ = {"polymorphic_identity": "assignment"}


class Activity(Submittable):
    """In-class or practice activity with the same lifecycle as an assignment."""

    __mapper_args__ = {"polymorphic_identity": "activity"}


class SubmittableAttachment(UUIDMixin, Base):
    """Teacher-provided file attached to a submittable."""

    __tablename__ = "submittable_attachments"

    submittable_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("submittables.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    key: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class Submission(UUIDMixin, TimestampMixin, Base):
    """A student's single submission to a submittable."""

    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("submittable_id", "student_id", name="uq_submission_student"),
        CheckConstraint("status IN ('submitted', 'graded')", name="valid_submission_status"),
    )

    submittable_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("submittables.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    student_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("students.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_key: Mapped[str] = mapped_column(Text, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    is_late: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=SUBMISSION_SUBMITTED, nullable=False)
    grade: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
