# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment and activity API endpoints.

Both families expose the same routes, built by build_router():
- POST /courses/{course_id}/{plural} - Create (owner, multipart with attachments)
- GET /courses/{course_id}/{plural} - List a course's items
- GET /{plural}/{item_id} - Get one item
- PATCH /{plural}/{item_id} - Update (owner, multipart)
- DELETE /{plural}/{item_id} - Delete with every attached file (owner)
- POST /{plural}/{item_id}/submit - Submit a file (enrolled student)
- POST /{plural}/{item_id}/submissions/{submission_id}/grade - Grade (owner)
"""

import logging
from datetime import datetime
from typing import Annotated, Callable

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from src.api.dependencies import (
    AuthenticatedUser,
    StudentUser,
    TeacherUser,
    get_activity_service,
    get_assignment_service,
    read_upload,
    read_uploads,
)
from src.domains.submittable import ACTIVITY, ASSIGNMENT, SubmittableKind, SubmittableService
from src.models.common import MessageResponse
from src.models.submittable import (
    GradeRequest,
    SubmissionEnvelope,
    SubmitEnvelope,
    SubmittableEnvelope,
    SubmittableListEnvelope,
)

logger = logging.getLogger(__name__)


def build_router(
    kind: SubmittableKind,
    get_service: Callable[..., SubmittableService],
) -> APIRouter:
    """Build the router for one submittable family.

    Args:
        kind: ASSIGNMENT or ACTIVITY.
        get_service: Dependency providing the family's service.

    Returns:
        Router with the seven routes of the family.
    """
    router = APIRouter()
    Service = Annotated[SubmittableService, Depends(get_service)]
    plural = kind.course_collection
    label = kind.label

    @router.post(
        f"/courses/{{course_id}}/{plural}",
        response_model=SubmittableEnvelope,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{kind.name}",
        summary=f"Create {kind.name}",
    )
    async def create_item(
        course_id: str,
        current_user: TeacherUser,
        service: Service,
        title: Annotated[str | None, Form()] = None,
        description: Annotated[str | None, Form()] = None,
        due_date: Annotated[datetime | None, Form(alias="dueDate")] = None,
        total_points: Annotated[float | None, Form(alias="totalPoints")] = None,
        links: Annotated[list[str] | None, Form()] = None,
        attachments: Annotated[list[UploadFile] | None, File()] = None,
    ) -> SubmittableEnvelope:
        item = await service.create(
            current_user,
            course_id,
            title=title,
            description=description,
            due_date=due_date,
            total_points=total_points,
            links=links,
            attachments=await read_uploads(attachments),
        )
        return SubmittableEnvelope(message=f"{label} created successfully", item=item)

    @router.get(
        f"/courses/{{course_id}}/{plural}",
        response_model=SubmittableListEnvelope,
        name=f"list_{plural}",
        summary=f"List course {plural}",
        description="Students only see their own submission on each item.",
    )
    async def list_items(
        course_id: str, current_user: AuthenticatedUser, service: Service
    ) -> SubmittableListEnvelope:
        items = await service.list_for_course(current_user, course_id)
        return SubmittableListEnvelope(items=items, count=len(items))

    @router.get(
        f"/{plural}/{{item_id}}",
        response_model=SubmittableEnvelope,
        name=f"get_{kind.name}",
        summary=f"Get {kind.name}",
    )
    async def get_item(
        item_id: str, current_user: AuthenticatedUser, service: Service
    ) -> SubmittableEnvelope:
        return SubmittableEnvelope(item=await service.get(current_user, item_id))

    @router.patch(
        f"/{plural}/{{item_id}}",
        response_model=SubmittableEnvelope,
        name=f"update_{kind.name}",
        summary=f"Update {kind.name}",
    )
    async def update_item(
        item_id: str,
        current_user: TeacherUser,
        service: Service,
        title: Annotated[str | None, Form()] = None,
        description: Annotated[str | None, Form()] = None,
        due_date: Annotated[datetime | None, Form(alias="dueDate")] = None,
        total_points: Annotated[float | None, Form(alias="totalPoints")] = None,
        is_active: Annotated[bool | None, Form(alias="isActive")] = None,
        links: Annotated[list[str] | None, Form()] = None,
        replace_attachments: Annotated[bool, Form(alias="replaceAttachments")] = False,
        remove_attachment_ids: Annotated[
            list[str] | None, Form(alias="removeAttachmentIds")
        ] = None,
        attachments: Annotated[list[UploadFile] | None, File()] = None,
    ) -> SubmittableEnvelope:
        item = await service.update(
            current_user,
            item_id,
            title=title,
            description=description,
            due_date=due_date,
            total_points=total_points,
            is_active=is_active,
            links=links,
            attachments=await read_uploads(attachments),
            replace_attachments=replace_attachments,
            remove_attachment_ids=remove_attachment_ids or [],
        )
        return SubmittableEnvelope(message=f"{label} updated successfully", item=item)

    @router.delete(
        f"/{plural}/{{item_id}}",
        response_model=MessageResponse,
        name=f"delete_{kind.name}",
        summary=f"Delete {kind.name}",
    )
    async def delete_item(
        item_id: str, current_user: TeacherUser, service: Service
    ) -> MessageResponse:
        await service.delete(current_user, item_id)
        return MessageResponse(message=f"{label} deleted successfully")

    @router.post(
        f"/{plural}/{{item_id}}/submit",
        response_model=SubmitEnvelope,
        name=f"submit_{kind.name}",
        summary=f"Submit {kind.name}",
    )
    async def submit_item(
        item_id: str,
        current_user: StudentUser,
        service: Service,
        submission_file: Annotated[UploadFile | None, File(alias="submissionFile")] = None,
    ) -> SubmitEnvelope:
        submission, is_late = await service.submit(
            current_user, item_id, await read_upload(submission_file)
        )
        message = f"{label} submitted successfully"
        if is_late:
            message += " (late)"
        return SubmitEnvelope(message=message, is_late=is_late, submission=submission)

    @router.post(
        f"/{plural}/{{item_id}}/submissions/{{submission_id}}/grade",
        response_model=SubmissionEnvelope,
        name=f"grade_{kind.name}",
        summary=f"Grade {kind.name} submission",
    )
    async def grade_submission(
        item_id: str,
        submission_id: str,
        data: GradeRequest,
        current_user: TeacherUser,
        service: Service,
    ) -> SubmissionEnvelope:
        submission = await service.grade(
            current_user, item_id, submission_id, data.grade, data.feedback
        )
        return SubmissionEnvelope(message="Submission graded successfully", submission=submission)

    return router


assignments_router = build_router(ASSIGNMENT, get_assignment_service)
activities_router = build_router(ACTIVITY, get_activity_service)
