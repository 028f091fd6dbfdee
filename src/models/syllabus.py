# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Syllabus API models.

Content items are a discriminated union on ``type``; each variant exposes
only the fields that belong to it.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field

from src.models.common import APIModel, Envelope


class ModuleCreateRequest(APIModel):
    """Request to add a module to a course syllabus."""

    module_number: int = Field(..., ge=1, description="Module number shown to students")
    title: str = Field(..., min_length=1, max_length=255, description="Module title")
    description: str = Field(default="", description="Module description")
    topics: list[str] = Field(default_factory=list, description="Topics covered")


class ModuleUpdateRequest(APIModel):
    """Request to update a module. Omitted fields are left unchanged."""

    module_number: int | None = Field(None, ge=1)
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    topics: list[str] | None = None
    is_active: bool | None = None
    position: int | None = Field(None, ge=0)


class _ContentBase(APIModel):
    id: str
    title: str
    description: str
    position: int
    created_at: datetime | None = None


class FileContent(_ContentBase):
    type: Literal["file"]
    file_type: str
    file_name: str
    file_url: str


class LinkContent(_ContentBase):
    type: Literal["link"]
    url: str


class VideoContent(_ContentBase):
    type: Literal["video"]
    video_url: str
    video_provider: str
    uploaded: bool = False


class TextContent(_ContentBase):
    type: Literal["text"]
    content: str


ContentItemResponse = Annotated[
    Union[FileContent, LinkContent, VideoContent, TextContent],
    Field(discriminator="type"),
]


class ModuleResponse(APIModel):
    """Syllabus module with its content items."""

    id: str
    module_number: int
    title: str
    description: str
    topics: list[str] = Field(default_factory=list)
    is_active: bool
    position: int
    content_items: list[ContentItemResponse] = Field(default_factory=list)


class SyllabusResponse(APIModel):
    """A course syllabus. Courses without one return an empty module list."""

    id: str | None = None
    course_id: str
    modules: list[ModuleResponse] = Field(default_factory=list)


class SyllabusEnvelope(Envelope):
    course_id: str
    syllabus: SyllabusResponse


class ModuleEnvelope(Envelope):
    course_id: str
    module: ModuleResponse


class ContentItemEnvelope(Envelope):
    content_item: ContentItemResponse
