# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment and activity API models.

Assignments and activities share these models; ``kind`` tells them apart.
"""

from datetime import datetime

from pydantic import Field

from src.models.common import APIModel, Envelope, FileResponse


class GradeRequest(APIModel):
    """Request to grade a submission."""

    grade: float = Field(..., description="Grade between 0 and the total points")
    feedback: str | None = Field(None, description="Feedback for the student")


class SubmissionResponse(APIModel):
    """A student's submission."""

    id: str
    student_id: str
    file_name: str
    file_url: str
    submitted_at: datetime
    is_late: bool
    status: str
    grade: float | None = None
    feedback: str | None = None


class SubmittableResponse(APIModel):
    """Assignment or activity details."""

    id: str
    kind: str
    course_id: str
    title: str
    description: str
    due_date: datetime
    total_points: float
    is_active: bool
    links: list[str] = Field(default_factory=list)
    attachments: list[FileResponse] = Field(default_factory=list)
    submissions: list[SubmissionResponse] = Field(default_factory=list)
    created_at: datetime | None = None


class SubmittableEnvelope(Envelope):
    item: SubmittableResponse


class SubmittableListEnvelope(Envelope):
    items: list[SubmittableResponse]
    count: int


class SubmitEnvelope(Envelope):
    """Result of a submission, including whether it was late."""

    is_late: bool
    submission: SubmissionResponse


class SubmissionEnvelope(Envelope):
    submission: SubmissionResponse
