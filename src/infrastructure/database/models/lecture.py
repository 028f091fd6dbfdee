# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recorded lectures attached to a syllabus module.

Every lecture carries an uploaded video. A lecture that has not been
reviewed is marked reviewed once its review deadline has passed.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin
from src.utils.datetime import is_after

REVIEW_PERIOD = timedelta(days=7)


class Lecture(UUIDMixin, TimestampMixin, Base):
    """A video lecture inside a syllabus module, ordered by lecture_order."""

    __tablename__ = "lectures"

    module_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("syllabus_modules.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, default="", nullable=False)
    video_url: Mapped[str] = mapped_column(Text, nullable=False)
    video_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lecture_order: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    is_reviewed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    review_deadline: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def apply_review_deadline(self, now: datetime) -> bool:
        """Mark the lecture reviewed if its deadline has passed.

        Returns:
            True if is_reviewed changed.
        """
        if self.is_reviewed or self.review_deadline is None:
            return False
        if is_after(self.review_deadline, now):
            return False
        self.is_reviewed = True
        return True
