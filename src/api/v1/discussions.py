# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discussion API endpoints.

Discussions:
- GET /discussions/search - Search visible discussions
- POST /discussions/teacher - Start a teacher discussion (teacher)
- GET /discussions/teacher - List teacher discussions
- POST /courses/{course_id}/discussions - Start a course discussion
- GET /courses/{course_id}/discussions - List course discussions
- GET /discussions/{discussion_id} - Get a discussion (counts a view)
- PATCH /discussions/{discussion_id} - Edit (author)
- DELETE /discussions/{discussion_id} - Delete (author or admin)

Comments:
- POST /discussions/{discussion_id}/comments - Comment
- POST /discussions/{discussion_id}/comments/{comment_id}/replies - Reply
- PATCH /discussions/{discussion_id}/comments/{comment_id} - Edit (author)
- DELETE /discussions/{discussion_id}/comments/{comment_id} - Soft delete
"""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from src.api.dependencies import (
    AuthenticatedUser,
    Discussions,
    TeacherUser,
    read_uploads,
)
from src.infrastructure.database.models import DISCUSSION_COURSE, DISCUSSION_TEACHER
from src.models.common import MessageResponse
from src.models.discussion import (
    CommentEnvelope,
    CommentUpdateRequest,
    DiscussionEnvelope,
    DiscussionListEnvelope,
    ReplyEnvelope,
)

logger = logging.getLogger(__name__)

router = APIRouter()

Title = Annotated[str | None, Form()]
Content = Annotated[str | None, Form()]
Attachments = Annotated[list[UploadFile] | None, File()]


@router.get(
    "/discussions/search",
    response_model=DiscussionListEnvelope,
    summary="Search discussions",
)
async def search_discussions(
    current_user: AuthenticatedUser,
    service: Discussions,
    q: Annotated[str | None, Query(description="Text to match in title or content")] = None,
    discussion_type: Annotated[
        str | None, Query(alias="type", description="teacher or course")
    ] = None,
    course_id: Annotated[str | None, Query(alias="courseId")] = None,
) -> DiscussionListEnvelope:
    """Search the discussions visible to the caller (at most 20, newest first)."""
    discussions = await service.search(
        current_user, query=q, discussion_type=discussion_type, course_id=course_id
    )
    return DiscussionListEnvelope(discussions=discussions, count=len(discussions))


@router.post(
    "/discussions/teacher",
    response_model=DiscussionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create teacher discussion",
)
async def create_teacher_discussion(
    current_user: TeacherUser,
    service: Discussions,
    title: Title = None,
    content: Content = None,
    attachments: Attachments = None,
) -> DiscussionEnvelope:
    discussion = await service.create(
        current_user,
        title=title,
        content=content,
        discussion_type=DISCUSSION_TEACHER,
        attachments=await read_uploads(attachments),
    )
    return DiscussionEnvelope(message="Discussion created successfully", discussion=discussion)


@router.get(
    "/discussions/teacher",
    response_model=DiscussionListEnvelope,
    summary="List teacher discussions",
)
async def list_teacher_discussions(
    current_user: AuthenticatedUser, service: Discussions
) -> DiscussionListEnvelope:
    discussions = await service.list_teacher(current_user)
    return DiscussionListEnvelope(discussions=discussions, count=len(discussions))


@router.post(
    "/courses/{course_id}/discussions",
    response_model=DiscussionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create course discussion",
)
async def create_course_discussion(
    course_id: str,
    current_user: AuthenticatedUser,
    service: Discussions,
    title: Title = None,
    content: Content = None,
    attachments: Attachments = None,
) -> DiscussionEnvelope:
    discussion = await service.create(
        current_user,
        title=title,
        content=content,
        discussion_type=DISCUSSION_COURSE,
        course_id=course_id,
        attachments=await read_uploads(attachments),
    )
    return DiscussionEnvelope(message="Discussion created successfully", discussion=discussion)


@router.get(
    "/courses/{course_id}/discussions",
    response_model=DiscussionListEnvelope,
    summary="List course discussions",
)
async def list_course_discussions(
    course_id: str, current_user: AuthenticatedUser, service: Discussions
) -> DiscussionListEnvelope:
    discussions = await service.list_for_course(current_user, course_id)
    return DiscussionListEnvelope(discussions=discussions, count=len(discussions))


@router.get(
    "/discussions/{discussion_id}",
    response_model=DiscussionEnvelope,
    summary="Get discussion",
)
async def get_discussion(
    discussion_id: str, current_user: AuthenticatedUser, service: Discussions
) -> DiscussionEnvelope:
    return DiscussionEnvelope(discussion=await service.get(current_user, discussion_id))


@router.patch(
    "/discussions/{discussion_id}",
    response_model=DiscussionEnvelope,
    summary="Update discussion",
)
async def update_discussion(
    discussion_id: str,
    current_user: AuthenticatedUser,
    service: Discussions,
    title: Title = None,
    content: Content = None,
    remove_attachment_ids: Annotated[
        list[str] | None, Form(alias="removeAttachmentIds")
    ] = None,
    attachments: Attachments = None,
) -> DiscussionEnvelope:
    discussion = await service.update(
        current_user,
        discussion_id,
        title=title,
        content=content,
        attachments=await read_uploads(attachments),
        remove_attachment_ids=remove_attachment_ids or [],
    )
    return DiscussionEnvelope(message="Discussion updated successfully", discussion=discussion)


@router.delete(
    "/discussions/{discussion_id}",
    response_model=MessageResponse,
    summary="Delete discussion",
)
async def delete_discussion(
    discussion_id: str, current_user: AuthenticatedUser, service: Discussions
) -> MessageResponse:
    await service.delete(current_user, discussion_id)
    return MessageResponse(message="Discussion deleted successfully")


@router.post(
    "/discussions/{discussion_id}/comments",
    response_model=CommentEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
)
async def add_comment(
    discussion_id: str,
    current_user: AuthenticatedUser,
    service: Discussions,
    content: Content = None,
    attachments: Attachments = None,
) -> CommentEnvelope:
    comment = await service.add_comment(
        current_user, discussion_id, content, await read_uploads(attachments)
    )
    return CommentEnvelope(message="Comment added successfully", comment=comment)


@router.post(
    "/discussions/{discussion_id}/comments/{comment_id}/replies",
    response_model=ReplyEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to comment",
)
async def add_reply(
    discussion_id: str,
    comment_id: str,
    current_user: AuthenticatedUser,
    service: Discussions,
    content: Content = None,
    attachments: Attachments = None,
) -> ReplyEnvelope:
    reply = await service.add_reply(
        current_user, discussion_id, comment_id, content, await read_uploads(attachments)
    )
    return ReplyEnvelope(message="Reply added successfully", reply=reply)


@router.patch(
    "/discussions/{discussion_id}/comments/{comment_id}",
    response_model=ReplyEnvelope,
    summary="Update comment",
)
async def update_comment(
    discussion_id: str,
    comment_id: str,
    data: CommentUpdateRequest,
    current_user: AuthenticatedUser,
    service: Discussions,
) -> ReplyEnvelope:
    comment = await service.update_comment(current_user, discussion_id, comment_id, data.content)
    return ReplyEnvelope(message="Comment updated successfully", reply=comment)


@router.delete(
    "/discussions/{discussion_id}/comments/{comment_id}",
    response_model=ReplyEnvelope,
    summary="Delete comment",
)
async def delete_comment(
    discussion_id: str,
    comment_id: str,
    current_user: AuthenticatedUser,
    service: Discussions,
) -> ReplyEnvelope:
    comment = await service.delete_comment(current_user, discussion_id, comment_id)
    return ReplyEnvelope(message="Comment deleted successfully", reply=comment)
