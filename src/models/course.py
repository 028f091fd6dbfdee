# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API models."""

from datetime import datetime

from pydantic import Field

from src.models.common import APIModel, Envelope


class CourseCreateRequest(APIModel):
    """Request to create a course."""

    title: str = Field(..., min_length=1, max_length=255, description="Course title")
    about: str = Field(default="", description="Course description")


class CourseUpdateRequest(APIModel):
    """Request to update a course. Omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=255, description="Course title")
    about: str | None = Field(None, description="Course description")
    is_active: bool | None = Field(None, description="Whether the course is active")


class EnrollRequest(APIModel):
    """Request to enroll a student in a course."""

    student_id: str = Field(..., description="Student profile ID")


class CourseResponse(APIModel):
    """Course details."""

    id: str
    title: str
    about: str
    teacher_id: str
    is_active: bool
    student_ids: list[str] = Field(default_factory=list)
    assignment_ids: list[str] = Field(default_factory=list)
    activity_ids: list[str] = Field(default_factory=list)
    created_at: datetime | None = None


class CourseEnvelope(Envelope):
    course: CourseResponse


class CourseListEnvelope(Envelope):
    courses: list[CourseResponse]
    count: int
