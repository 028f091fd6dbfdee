# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial CourseHub schema.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-03-10

Creates every table of src/infrastructure/database/models/.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _fk(column: str, target: str, nullable: bool = False, **kwargs) -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=False),
        sa.ForeignKey(target, ondelete="CASCADE"),
        nullable=nullable,
        **kwargs,
    )


def _file_columns() -> list[sa.Column]:
    return [
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("key", sa.Text, nullable=False),
        sa.Column("mime_type", sa.String(255), nullable=False),
    ]


def upgrade() -> None:
    """Create CourseHub tables."""
    # ==========================================================================
    # 1. Users and role profiles
    # ==========================================================================
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint(
            "role IN ('teacher', 'student', 'admin')", name="ck_users_valid_user_role"
        ),
    )

    for table in ("teachers", "students"):
        op.create_table(
            table,
            _id(),
            _fk("user_id", "users.id"),
            *_timestamps(),
            sa.UniqueConstraint("user_id", name=f"uq_{table}_user_id"),
        )

    # ==========================================================================
    # 2. Courses and enrollments
    # ==========================================================================
    op.create_table(
        "courses",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("about", sa.Text, nullable=False, server_default=""),
        _fk("teacher_id", "teachers.id"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_courses_teacher_active", "courses", ["teacher_id", "is_active"])

    op.create_table(
        "course_enrollments",
        _fk("course_id", "courses.id", primary_key=True),
        _fk("student_id", "students.id", primary_key=True),
    )

    # ==========================================================================
    # 3. Assignments and activities
    # ==========================================================================
    op.create_table(
        "submittables",
        _id(),
        sa.Column("kind", sa.String(20), nullable=False),
        _fk("course_id", "courses.id"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_points", sa.Float, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("links", postgresql.JSONB, nullable=False, server_default="[]"),
        *_timestamps(),
        sa.CheckConstraint(
            "kind IN ('assignment', 'activity')",
            name="ck_submittables_valid_submittable_kind",
        ),
        sa.CheckConstraint("total_points > 0", name="ck_submittables_positive_total_points"),
    )
    op.create_index("ix_submittables_course_id", "submittables", ["course_id"])

    op.create_table(
        "submittable_attachments",
        _id(),
        _fk("submittable_id", "submittables.id"),
        *_file_columns(),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index(
        "ix_submittable_attachments_submittable_id",
        "submittable_attachments",
        ["submittable_id"],
    )

    op.create_table(
        "submissions",
        _id(),
        _fk("submittable_id", "submittables.id"),
        _fk("student_id", "students.id"),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_url", sa.Text, nullable=False),
        sa.Column("file_key", sa.Text, nullable=False),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("is_late", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="submitted"),
        sa.Column("grade", sa.Float, nullable=True),
        sa.Column("feedback", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("submittable_id", "student_id", name="uq_submission_student"),
        sa.CheckConstraint(
            "status IN ('submitted', 'graded')",
            name="ck_submissions_valid_submission_status",
        ),
    )
    op.create_index("ix_submissions_submittable_id", "submissions", ["submittable_id"])
    op.create_index("ix_submissions_student_id", "submissions", ["student_id"])

    # ==========================================================================
    # 4. Announcements
    # ==========================================================================
    op.create_table(
        "announcements",
        _id(),
        _fk("course_id", "courses.id"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column(
            "publish_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("image_key", sa.Text, nullable=True),
        _fk("published_by", "teachers.id"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(
        "ix_announcements_course_publish", "announcements", ["course_id", "publish_date"]
    )

    # ==========================================================================
    # 5. Discussions
    # ==========================================================================
    op.create_table(
        "discussions",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        _fk("course_id", "courses.id", nullable=True),
        _fk("author_id", "users.id"),
        sa.Column("view_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint(
            "type IN ('teacher', 'course')", name="ck_discussions_valid_discussion_type"
        ),
        sa.CheckConstraint(
            "type = 'teacher' OR course_id IS NOT NULL",
            name="ck_discussions_course_discussion_has_course",
        ),
    )
    op.create_index("ix_discussions_course_id", "discussions", ["course_id"])
    op.create_index("ix_discussions_author_id", "discussions", ["author_id"])

    op.create_table(
        "discussion_comments",
        _id(),
        _fk("discussion_id", "discussions.id"),
        _fk("parent_id", "discussion_comments.id", nullable=True),
        _fk("author_id", "users.id"),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index(
        "ix_discussion_comments_discussion_id", "discussion_comments", ["discussion_id"]
    )
    op.create_index("ix_discussion_comments_parent_id", "discussion_comments", ["parent_id"])

    op.create_table(
        "discussion_attachments",
        _id(),
        _fk("discussion_id", "discussions.id"),
        *_file_columns(),
    )
    op.create_index(
        "ix_discussion_attachments_discussion_id", "discussion_attachments", ["discussion_id"]
    )

    op.create_table(
        "comment_attachments",
        _id(),
        _fk("comment_id", "discussion_comments.id"),
        *_file_columns(),
    )
    op.create_index("ix_comment_attachments_comment_id", "comment_attachments", ["comment_id"])

    # ==========================================================================
    # 6. Syllabus
    # ==========================================================================
    op.create_table(
        "syllabi",
        _id(),
        _fk("course_id", "courses.id"),
        *_timestamps(),
        sa.UniqueConstraint("course_id", name="uq_syllabi_course_id"),
    )

    op.create_table(
        "syllabus_modules",
        _id(),
        _fk("syllabus_id", "syllabi.id"),
        sa.Column("module_number", sa.Integer, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("topics", postgresql.JSONB, nullable=False, server_default="[]"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_syllabus_modules_syllabus_id", "syllabus_modules", ["syllabus_id"])

    op.create_table(
        "syllabus_content_items",
        _id(),
        _fk("module_id", "syllabus_modules.id"),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        sa.Column("file_type", sa.String(20), nullable=True),
        sa.Column("file_name", sa.String(255), nullable=True),
        sa.Column("file_url", sa.Text, nullable=True),
        sa.Column("file_key", sa.Text, nullable=True),
        sa.Column("url", sa.Text, nullable=True),
        sa.Column("video_url", sa.Text, nullable=True),
        sa.Column("video_key", sa.Text, nullable=True),
        sa.Column("video_provider", sa.String(20), nullable=True),
        sa.Column("content", sa.Text, nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "type IN ('file', 'link', 'video', 'text')",
            name="ck_syllabus_content_items_valid_content_type",
        ),
    )
    op.create_index(
        "ix_syllabus_content_items_module_id", "syllabus_content_items", ["module_id"]
    )


def downgrade() -> None:
    """Drop CourseHub tables."""
    for table in (
        "syllabus_content_items",
        "syllabus_modules",
        "syllabi",
        "comment_attachments",
        "discussion_attachments",
        "discussion_comments",
        "discussions",
        "announcements",
        "submissions",
        "submittable_attachments",
        "submittables",
        "course_enrollments",
        "courses",
        "students",
        "teachers",
        "users",
    ):
        op.drop_table(table)
