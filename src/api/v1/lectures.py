# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lecture API endpoints.

All routes live under /courses/{course_id}/syllabus:
- GET /lectures - Every module with its active lectures
- GET /modules/{module_id}/lectures - Active lectures of a module
- POST /modules/{module_id}/lectures - Create a lecture (owner, multipart)
- PUT /modules/{module_id}/lectures/reorder - Reorder lectures (owner)
- GET /modules/{module_id}/lectures/{lecture_id} - Get a lecture
- PATCH /modules/{module_id}/lectures/{lecture_id} - Update a lecture (owner, multipart)
- DELETE /modules/{module_id}/lectures/{lecture_id} - Delete a lecture and its video (owner)
"""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from src.api.dependencies import AuthenticatedUser, Lectures, TeacherUser, read_upload
from src.models.common import MessageResponse
from src.models.lecture import (
    CourseLecturesEnvelope,
    LectureEnvelope,
    LectureListEnvelope,
    LectureReorderRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/courses/{course_id}/syllabus")

OptionalText = Annotated[str | None, Form()]
ReviewDeadline = Annotated[datetime | None, Form(alias="reviewDeadline")]
IsReviewed = Annotated[bool | None, Form(alias="isReviewed")]
VideoUpload = Annotated[UploadFile | None, File()]


@router.get(
    "/lectures",
    response_model=CourseLecturesEnvelope,
    summary="List modules with lectures",
)
async def list_course_lectures(
    course_id: str, current_user: AuthenticatedUser, service: Lectures
) -> CourseLecturesEnvelope:
    modules = await service.list_course_lectures(current_user, course_id)
    return CourseLecturesEnvelope(course_id=course_id, modules=modules)


@router.get(
    "/modules/{module_id}/lectures",
    response_model=LectureListEnvelope,
    summary="List module lectures",
)
async def list_module_lectures(
    course_id: str, module_id: str, current_user: AuthenticatedUser, service: Lectures
) -> LectureListEnvelope:
    lectures = await service.list_module_lectures(current_user, course_id, module_id)
    return LectureListEnvelope(course_id=course_id, module_id=module_id, lectures=lectures)


@router.post(
    "/modules/{module_id}/lectures",
    response_model=LectureEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create lecture",
)
async def create_lecture(
    course_id: str,
    module_id: str,
    current_user: TeacherUser,
    service: Lectures,
    title: OptionalText = None,
    content: OptionalText = None,
    is_reviewed: IsReviewed = None,
    review_deadline: ReviewDeadline = None,
    video: VideoUpload = None,
) -> LectureEnvelope:
    lecture = await service.create_lecture(
        current_user,
        course_id,
        module_id,
        title=title,
        content=content,
        is_reviewed=is_reviewed,
        review_deadline=review_deadline,
        video=await read_upload(video),
    )
    return LectureEnvelope(message="Lecture created successfully", lecture=lecture)


@router.put(
    "/modules/{module_id}/lectures/reorder",
    response_model=LectureListEnvelope,
    summary="Reorder lectures",
)
async def reorder_lectures(
    course_id: str,
    module_id: str,
    data: LectureReorderRequest,
    current_user: TeacherUser,
    service: Lectures,
) -> LectureListEnvelope:
    lectures = await service.reorder_lectures(
        current_user, course_id, module_id, data.lecture_orders
    )
    return LectureListEnvelope(
        message="Lecture order updated successfully",
        course_id=course_id,
        module_id=module_id,
        lectures=lectures,
    )


@router.get(
    "/modules/{module_id}/lectures/{lecture_id}",
    response_model=LectureEnvelope,
    summary="Get lecture",
)
async def get_lecture(
    course_id: str,
    module_id: str,
    lecture_id: str,
    current_user: AuthenticatedUser,
    service: Lectures,
) -> LectureEnvelope:
    lecture = await service.get_lecture(current_user, course_id, module_id, lecture_id)
    return LectureEnvelope(lecture=lecture)


@router.patch(
    "/modules/{module_id}/lectures/{lecture_id}",
    response_model=LectureEnvelope,
    summary="Update lecture",
)
async def update_lecture(
    course_id: str,
    module_id: str,
    lecture_id: str,
    current_user: TeacherUser,
    service: Lectures,
    title: OptionalText = None,
    content: OptionalText = None,
    lecture_order: Annotated[int | None, Form(alias="lectureOrder")] = None,
    is_reviewed: IsReviewed = None,
    review_deadline: ReviewDeadline = None,
    is_active: Annotated[bool | None, Form(alias="isActive")] = None,
    video: VideoUpload = None,
) -> LectureEnvelope:
    lecture = await service.update_lecture(
        current_user,
        course_id,
        module_id,
        lecture_id,
        title=title,
        content=content,
        lecture_order=lecture_order,
        is_reviewed=is_reviewed,
        review_deadline=review_deadline,
        is_active=is_active,
        video=await read_upload(video),
    )
    return LectureEnvelope(message="Lecture updated successfully", lecture=lecture)


@router.delete(
    "/modules/{module_id}/lectures/{lecture_id}",
    response_model=MessageResponse,
    summary="Delete lecture",
)
async def delete_lecture(
    course_id: str,
    module_id: str,
    lecture_id: str,
    current_user: TeacherUser,
    service: Lectures,
) -> MessageResponse:
    await service.delete_lecture(current_user, course_id, module_id, lecture_id)
    return MessageResponse(message="Lecture deleted successfully")
