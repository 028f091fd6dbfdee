# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discussion threads with a fixed two-level comment structure.

Top-level comments have no parent. A reply always points at a top-level
comment, never at another reply, so the tree is at most two levels deep.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
    and_,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, foreign, mapped_column, relationship

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin

DISCUSSION_TEACHER = "teacher"
DISCUSSION_COURSE = "course"
DELETED_COMMENT_CONTENT = "This comment has been deleted"


class Discussion(UUIDMixin, TimestampMixin, Base):
    """Discussion thread, either teacher-only or scoped to a course."""

    __tablename__ = "discussions"
    __table_args__ = (
        CheckConstraint("type IN ('teacher', 'course')", name="valid_discussion_type"),
        CheckConstraint(
            "type = 'teacher' OR course_id IS NOT NULL",
            name="course_discussion_has_course",
        ),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    course_id: Mapped[Optional[str]] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        index=True,
        nullable=True,
    )
    author_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    attachments: Mapped[list[DiscussionAttachment]] = relationship(
        "DiscussionAttachment",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        primaryjoin=lambda: and_(
            Discussion.id == foreign(Comment.discussion_id),
            Comment.parent_id.is_(None),
        ),
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
        lazy="selectin",
    )

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        """Find a top-level comment or a reply by id."""
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
            for reply in comment.replies:
                if reply.id == comment_id:
                    return reply
        return None

    def all_comments(self) -> list[Comment]:
        """Top-level comments followed by their replies, flattened."""
        flat: list[Comment] = []
        for comment in self.comments:
            flat.append(comment)
            flat.extend(comment.replies)
        return flat


class Comment(UUIDMixin, TimestampMixin, Base):
    """Comment on a discussion, or a reply to a top-level comment."""

    __tablename__ = "discussion_comments"

    discussion_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("discussions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    parent_id: Mapped[Optional[str]] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("discussion_comments.id", ondelete="CASCADE"),
        index=True,
        nullable=True,
    )
    author_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    attachments: Mapped[list[CommentAttachment]] = relationship(
        "CommentAttachment",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    replies: Mapped[list[Comment]] = relationship(
        "Comment",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
        lazy="selectin",
        join_depth=2,
    )

    def soft_delete(self) -> None:
        self.content = DELETED_COMMENT_CONTENT
        self.is_deleted = True


class DiscussionAttachment(UUIDMixin, Base):
    """File attached to a discussion."""

    __tablename__ = "discussion_attachments"

    discussion_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("discussions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    key: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)


class CommentAttachment(UUIDMixin, Base):
    """File attached to a comment or reply."""

    __tablename__ = "comment_attachments"

    comment_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("discussion_comments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    key: Mapped[str] = mapped_column(Text, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
