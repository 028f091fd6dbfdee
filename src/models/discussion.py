# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discussion API models."""

from datetime import datetime

from pydantic import Field

from src.models.common import APIModel, Envelope, FileResponse


class CommentUpdateRequest(APIModel):
    """Request to edit a comment or reply."""

    content: str = Field(..., min_length=1, description="New comment text")


class ReplyResponse(APIModel):
    """A reply to a top-level comment."""

    id: str
    author_id: str
    content: str
    is_deleted: bool
    attachments: list[FileResponse] = Field(default_factory=list)
    created_at: datetime | None = None


class CommentResponse(ReplyResponse):
    """A top-level comment with its replies."""

    replies: list[ReplyResponse] = Field(default_factory=list)


class DiscussionResponse(APIModel):
    """Discussion details including the comment tree."""

    id: str
    title: str
    content: str
    type: str
    course_id: str | None = None
    author_id: str
    view_count: int
    attachments: list[FileResponse] = Field(default_factory=list)
    comments: list[CommentResponse] = Field(default_factory=list)
    created_at: datetime | None = None


class DiscussionEnvelope(Envelope):
    discussion: DiscussionResponse


class DiscussionListEnvelope(Envelope):
    discussions: list[DiscussionResponse]
    count: int


class CommentEnvelope(Envelope):
    comment: CommentResponse


class ReplyEnvelope(Envelope):
    reply: ReplyResponse
