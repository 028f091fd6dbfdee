# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Announcement API endpoints.

- POST /courses/{course_id}/announcements - Publish (owner, multipart with image)
- GET /courses/{course_id}/announcements - List active announcements
- GET /announcements/{announcement_id} - Get one announcement
- PATCH /announcements/{announcement_id} - Update (owner, multipart)
- DELETE /announcements/{announcement_id} - Delete (owner)
"""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status

from src.api.dependencies import Announcements, AuthenticatedUser, TeacherUser, read_upload
from src.models.announcement import AnnouncementEnvelope, AnnouncementListEnvelope
from src.models.common import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/courses/{course_id}/announcements",
    response_model=AnnouncementEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create announcement",
)
async def create_announcement(
    course_id: str,
    current_user: TeacherUser,
    service: Announcements,
    title: Annotated[str | None, Form()] = None,
    content: Annotated[str | None, Form()] = None,
    publish_date: Annotated[datetime | None, Form(alias="publishDate")] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> AnnouncementEnvelope:
    """Publish an announcement in a course owned by the caller."""
    announcement = await service.create(
        current_user,
        course_id,
        title=title,
        content=content,
        publish_date=publish_date,
        image=await read_upload(image),
    )
    return AnnouncementEnvelope(
        message="Announcement created successfully", announcement=announcement
    )


@router.get(
    "/courses/{course_id}/announcements",
    response_model=AnnouncementListEnvelope,
    summary="List announcements",
)
async def list_announcements(
    course_id: str, current_user: AuthenticatedUser, service: Announcements
) -> AnnouncementListEnvelope:
    """List a course's active announcements, newest first."""
    announcements = await service.list_for_course(current_user, course_id)
    return AnnouncementListEnvelope(announcements=announcements, count=len(announcements))


@router.get(
    "/announcements/{announcement_id}",
    response_model=AnnouncementEnvelope,
    summary="Get announcement",
)
async def get_announcement(
    announcement_id: str, current_user: AuthenticatedUser, service: Announcements
) -> AnnouncementEnvelope:
    return AnnouncementEnvelope(announcement=await service.get(current_user, announcement_id))


@router.patch(
    "/announcements/{announcement_id}",
    response_model=AnnouncementEnvelope,
    summary="Update announcement",
)
async def update_announcement(
    announcement_id: str,
    current_user: TeacherUser,
    service: Announcements,
    title: Annotated[str | None, Form()] = None,
    content: Annotated[str | None, Form()] = None,
    publish_date: Annotated[datetime | None, Form(alias="publishDate")] = None,
    is_active: Annotated[bool | None, Form(alias="isActive")] = None,
    remove_image: Annotated[bool, Form(alias="removeImage")] = False,
    image: Annotated[UploadFile | None, File()] = None,
) -> AnnouncementEnvelope:
    """Update an announcement; a new image replaces the current one."""
    announcement = await service.update(
        current_user,
        announcement_id,
        title=title,
        content=content,
        publish_date=publish_date,
        is_active=is_active,
        image=await read_upload(image),
        remove_image=remove_image,
    )
    return AnnouncementEnvelope(
        message="Announcement updated successfully", announcement=announcement
    )


@router.delete(
    "/announcements/{announcement_id}",
    response_model=MessageResponse,
    summary="Delete announcement",
)
async def delete_announcement(
    announcement_id: str, current_user: TeacherUser, service: Announcements
) -> MessageResponse:
    await service.delete(current_user, announcement_id)
    return MessageResponse(message="Announcement deleted successfully")
