# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course syllabus: ordered modules holding ordered content items.

A content item is a tagged union on ``type``:

- file:  file_type, file_name, file_url, file_key
- link:  url
- video: video_url, optional video_key (uploaded video), video_provider
- text:  content

Only the columns of the item's own type are populated.

Modules also own their video lectures (see models/lecture.py).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin
from src.infrastructure.database.models.lecture import Lecture

CONTENT_FILE = "file"
CONTENT_LINK = "link"
CONTENT_VIDEO = "video"
CONTENT_TEXT = "text"
CONTENT_TYPES = (CONTENT_FILE, CONTENT_LINK, CONTENT_VIDEO, CONTENT_TEXT)

VIDEO_PROVIDERS = ("youtube", "vimeo", "other")


class Syllabus(UUIDMixin, TimestampMixin, Base):
    """One syllabus per course."""

    __tablename__ = "syllabi"

    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    modules: Mapped[list[SyllabusModule]] = relationship(
        "SyllabusModule",
        cascade="all, delete-orphan",
        order_by="SyllabusModule.position",
        lazy="selectin",
    )

    def find_module(self, module_id: str) -> Optional[SyllabusModule]:
        return next((m for m in self.modules if m.id == module_id), None)


class SyllabusModule(UUIDMixin, TimestampMixin, Base):
    """A numbered module in a syllabus."""

    __tablename__ = "syllabus_modules"

    syllabus_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("syllabi.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    module_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    topics: Mapped[list[str]] = mapped_column(JSONB, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    content_items: Mapped[list[ContentItem]] = relationship(
        "ContentItem",
        cascade="all, delete-orphan",
        order_by="ContentItem.position",
        lazy="selectin",
    )
    lectures: Mapped[list[Lecture]] = relationship(
        "Lecture",
        cascade="all, delete-orphan",
        order_by="Lecture.lecture_order",
        lazy="selectin",
    )

    def find_item(self, item_id: str) -> Optional[ContentItem]:
        return next((i for i in self.content_items if i.id == item_id), None)

    def find_lecture(self, lecture_id: str) -> Optional[Lecture]:
        return next((lec for lec in self.lectures if lec.id == lecture_id), None)

    def blob_keys(self) -> list[str]:
        """Storage keys of every uploaded file or video in this module, lectures included."""
        keys = [key for item in self.content_items for key in item.blob_keys()]
        keys += [lecture.video_key for lecture in self.lectures if lecture.video_key]
        return keys


class ContentItem(UUIDMixin, TimestampMixin, Base):
    """File, link, video or text entry inside a module."""

    __tablename__ = "syllabus_content_items"
    __table_args__ = (
        CheckConstraint(
            "type IN ('file', 'link', 'video', 'text')", name="valid_content_type"
        ),
    )

    module_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("syllabus_modules.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # file
    file_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    file_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # link
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # video
    video_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    video_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    video_provider: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    # text
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def blob_keys(self) -> list[str]:
        return [key for key in (self.file_key, self.video_key) if key]
