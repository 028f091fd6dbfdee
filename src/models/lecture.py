# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lecture API models."""

from datetime import datetime

from pydantic import Field

from src.models.common import APIModel, Envelope


class LectureResponse(APIModel):
    """A video lecture of a syllabus module."""

    id: str
    module_id: str
    title: str
    content: str
    video_url: str
    lecture_order: int
    is_reviewed: bool
    review_deadline: datetime | None = None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ModuleLecturesResponse(APIModel):
    """A syllabus module with its active lectures."""

    id: str
    module_number: int
    title: str
    description: str
    is_active: bool
    lectures: list[LectureResponse] = Field(default_factory=list)
    lecture_count: int = 0


class LectureOrder(APIModel):
    """New position of one lecture."""

    lecture_id: str
    order: int = Field(..., ge=1)


class LectureReorderRequest(APIModel):
    """Request to reorder the lectures of a module."""

    lecture_orders: list[LectureOrder] = Field(..., min_length=1)


class LectureEnvelope(Envelope):
    lecture: LectureResponse


class LectureListEnvelope(Envelope):
    course_id: str
    module_id: str
    lectures: list[LectureResponse]


class CourseLecturesEnvelope(Envelope):
    course_id: str
    modules: list[ModuleLecturesResponse]
