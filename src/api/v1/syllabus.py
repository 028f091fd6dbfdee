# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Syllabus API endpoints.

All routes live under /courses/{course_id}/syllabus:
- GET / - Get the syllabus (empty module list when none exists)
- POST /modules - Add a module (owner)
- GET /modules/{module_id} - Get a module
- PATCH /modules/{module_id} - Update a module (owner)
- DELETE /modules/{module_id} - Delete a module and its files (owner)
- POST /modules/{module_id}/content - Add a content item (owner, multipart)
- PATCH /modules/{module_id}/content/{item_id} - Update a content item (owner, multipart)
- DELETE /modules/{module_id}/content/{item_id} - Delete a content item (owner)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from src.api.dependencies import AuthenticatedUser, Syllabi, TeacherUser, read_upload
from src.models.common import MessageResponse
from src.models.syllabus import (
    ContentItemEnvelope,
    ModuleCreateRequest,
    ModuleEnvelope,
    ModuleUpdateRequest,
    SyllabusEnvelope,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses/{course_id}/syllabus")

OptionalText = Annotated[str | None, Form()]


@router.get("", response_model=SyllabusEnvelope, summary="Get syllabus")
async def get_syllabus(
    course_id: str, current_user: AuthenticatedUser, service: Syllabi
) -> SyllabusEnvelope:
    syllabus = await service.get_syllabus(current_user, course_id)
    return SyllabusEnvelope(course_id=course_id, syllabus=syllabus)


@router.post(
    "/modules",
    response_model=ModuleEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create module",
)
async def create_module(
    course_id: str,
    data: ModuleCreateRequest,
    current_user: TeacherUser,
    service: Syllabi,
) -> ModuleEnvelope:
    module = await service.create_module(current_user, course_id, data)
    return ModuleEnvelope(message="Module created successfully", course_id=course_id, module=module)


@router.get("/modules/{module_id}", response_model=ModuleEnvelope, summary="Get module")
async def get_module(
    course_id: str, module_id: str, current_user: AuthenticatedUser, service: Syllabi
) -> ModuleEnvelope:
    module = await service.get_module(current_user, course_id, module_id)
    return ModuleEnvelope(course_id=course_id, module=module)


@router.patch("/modules/{module_id}", response_model=ModuleEnvelope, summary="Update module")
async def update_module(
    course_id: str,
    module_id: str,
    data: ModuleUpdateRequest,
    current_user: TeacherUser,
    service: Syllabi,
) -> ModuleEnvelope:
    module = await service.update_module(current_user, course_id, module_id, data)
    return ModuleEnvelope(message="Module updated successfully", course_id=course_id, module=module)


@router.delete("/modules/{module_id}", response_model=MessageResponse, summary="Delete module")
async def delete_module(
    course_id: str, module_id: str, current_user: TeacherUser, service: Syllabi
) -> MessageResponse:
    await service.delete_module(current_user, course_id, module_id)
    return MessageResponse(message="Module deleted successfully")


@router.post(
    "/modules/{module_id}/content",
    response_model=ContentItemEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Add content item",
)
async def add_content(
    course_id: str,
    module_id: str,
    current_user: TeacherUser,
    service: Syllabi,
    content_type: Annotated[str, Form(alias="type")],
    title: OptionalText = None,
    description: OptionalText = None,
    url: OptionalText = None,
    video_url: Annotated[str | None, Form(alias="videoUrl")] = None,
    video_provider: Annotated[str | None, Form(alias="videoProvider")] = None,
    content: OptionalText = None,
    file: Annotated[UploadFile | None, File()] = None,
    video_file: Annotated[UploadFile | None, File(alias="videoFile")] = None,
) -> ContentItemEnvelope:
    item = await service.add_content(
        current_user,
        course_id,
        module_id,
        content_type=content_type,
        title=title,
        description=description,
        url=url,
        video_url=video_url,
        video_provider=video_provider,
        content=content,
        file=await read_upload(file),
        video_file=await read_upload(video_file),
    )
    return ContentItemEnvelope(message="Content added to module successfully", content_item=item)


@router.patch(
    "/modules/{module_id}/content/{item_id}",
    response_model=ContentItemEnvelope,
    summary="Update content item",
)
async def update_content(
    course_id: str,
    module_id: str,
    item_id: str,
    current_user: TeacherUser,
    service: Syllabi,
    title: OptionalText = None,
    description: OptionalText = None,
    url: OptionalText = None,
    video_url: Annotated[str | None, Form(alias="videoUrl")] = None,
    video_provider: Annotated[str | None, Form(alias="videoProvider")] = None,
    content: OptionalText = None,
    file: Annotated[UploadFile | None, File()] = None,
    video_file: Annotated[UploadFile | None, File(alias="videoFile")] = None,
) -> ContentItemEnvelope:
    item = await service.update_content(
        current_user,
        course_id,
        module_id,
        item_id,
        title=title,
        description=description,
        url=url,
        video_url=video_url,
        video_provider=video_provider,
        content=content,
        file=await read_upload(file),
        video_file=await read_upload(video_file),
    )
    return ContentItemEnvelope(message="Content item updated successfully", content_item=item)


@router.delete(
    "/modules/{module_id}/content/{item_id}",
    response_model=MessageResponse,
    summary="Delete content item",
)
async def delete_content(
    course_id: str,
    module_id: str,
    item_id: str,
    current_user: TeacherUser,
    service: Syllabi,
) -> MessageResponse:
    await service.delete_content(current_user, course_id, module_id, item_id)
    return MessageResponse(message="Content item deleted successfully")
