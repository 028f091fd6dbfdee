# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Add video lectures to syllabus modules.

Revision ID: 002_add_lectures
Revises: 001_initial_schema
Create Date: 2025-04-02
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "002_add_lectures"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the lectures table."""
    op.create_table(
        "lectures",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=False),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column(
            "module_id",
            postgresql.UUID(as_uuid=False),
            sa.ForeignKey("syllabus_modules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text, nullable=False, server_default=""),
        sa.Column("video_url", sa.Text, nullable=False),
        sa.Column("video_key", sa.Text, nullable=True),
        sa.Column("lecture_order", sa.Integer, nullable=False, server_default="1"),
        sa.Column("is_reviewed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("review_deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
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
    )
    op.create_index("ix_lectures_module_id", "lectures", ["module_id"])
    op.create_index("ix_lectures_module_order", "lectures", ["module_id", "lecture_order"])


def downgrade() -> None:
    """Drop the lectures table."""
    op.drop_index("ix_lectures_module_order", table_name="lectures")
    op.drop_index("ix_lectures_module_id", table_name="lectures")
    op.drop_table("lectures")
