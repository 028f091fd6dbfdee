# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submittable service for assignments and activities.

Assignments and activities have the same lifecycle, so one service handles
both, parameterized by a SubmittableKind:

- Teachers create, update and delete them in courses they own, with
  optional file attachments.
- Enrolled students submit one file each; resubmitting replaces the
  previous file and resets the status to "submitted".
- Teachers grade submissions within [0, total points].

Example:
    service = SubmittableService(db, blob_store, ASSIGNMENT)
    submission, is_late = await service.submit(user, assignment_id, file)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.core.errors import NotFoundError, ValidationError
from src.domains.auth.current_user import CurrentUser
from src.domains.base import EntityService
from src.infrastructure.database.models import (
    SUBMISSION_GRADED,
    SUBMISSION_SUBMITTED,
    Activity,
    Assignment,
    Course,
    Submission,
    Submittable,
    SubmittableAttachment,
    new_id,
)
from src.infrastructure.database.repositories import Repository
from src.infrastructure.database.unit_of_work import UnitOfWork
from src.infrastructure.storage.blob_store import UploadedFile
from src.models.submittable import SubmissionResponse, SubmittableResponse
from src.utils.datetime import ensure_utc, is_after

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmittableKind:
    """Describes one family of submittable work.

    Attributes:
        name: Singular name, also the discriminator value.
        model: Mapped class for the family.
        course_collection: Name of the Course relationship listing them.
        label: Capitalized name used in messages.
    """

    name: str
    model: type[Submittable]
    course_collection: str
    label: str

    def attachment_prefix(self, course_id: str) -> str:
        return f"{self.course_collection}/course-{course_id}"

    def submission_prefix(self, item_id: str, student_id: str) -> str:
        return f"{self.name}-submissions/{self.name}-{item_id}/student-{student_id}"


ASSIGNMENT = SubmittableKind("assignment", Assignment, "assignments", "Assignment")
ACTIVITY = SubmittableKind("activity", Activity, "activities", "Activity")


class SubmittableService(EntityService):
    """Service for one kind of submittable work."""

    def __init__(self, db, blob_store, kind: SubmittableKind, **kwargs) -> None:
        """Initialize the service.

        Args:
            db: Request-scoped database session.
            blob_store: Attachment storage.
            kind: ASSIGNMENT or ACTIVITY.
            **kwargs: Passed through to EntityService.
        """
        super().__init__(db, blob_store, **kwargs)
        self.kind = kind

    @property
    def _items(self) -> Repository:
        return getattr(self.repos, self.kind.course_collection)

    async def create(
        self,
        user: CurrentUser,
        course_id: str,
        *,
        title: Optional[str],
        description: Optional[str],
        due_date: Optional[datetime],
        total_points: Optional[float],
        links: Optional[Sequence[str]] = None,
        attachments: Sequence[UploadedFile] = (),
    ) -> SubmittableResponse:
        """Create an assignment or activity in a course owned by the caller.

        Args:
            user: The caller.
            course_id: Target course.
            title: Title.
            description: Description.
            due_date: Due timestamp.
            total_points: Maximum grade, greater than zero.
            links: Reference URLs.
            attachments: Files to attach.

        Returns:
            The created item.

        Raises:
            ValidationError: If a required field is missing or a file is rejected.
            NotFoundError: If the course does not exist.
            ForbiddenError: If the caller does not own the course.
            UploadFailure: If an attachment cannot be stored.
        """
        self._require_text(title=title, description=description)
        if due_date is None or total_points is None:
            raise ValidationError("Please provide all required fields: dueDate, totalPoints")
        if total_points <= 0:
            raise ValidationError("Total points must be greater than 0")
        self._validate_files(attachments, self.policies.attachment)

        async with self._unit_of_work() as uow:
            course, teacher = await self.gate.owned_course(user, course_id)
            blobs = await uow.upload_many(attachments, self.kind.attachment_prefix(course.id))

            item = self.kind.model(
                id=new_id(),
                course_id=course.id,
                title=title.strip(),
                description=description,
                due_date=ensure_utc(due_date),
                total_points=total_points,
                is_active=True,
                links=[link for link in (links or []) if link],
                attachments=[
                    SubmittableAttachment(id=new_id(), position=i, **self._attachment_fields(b))
                    for i, b in enumerate(blobs)
                ],
                submissions=[],
            )
            self._course_items(course).append(item)
            await self._items.add(item)

        logger.info(
            "Created %s: id=%s, course=%s, teacher=%s, attachments=%d",
            self.kind.name,
            item.id,
            course.id,
            teacher.id,
            len(blobs),
        )
        return self._to_response(item)

    async def list_for_course(
        self, user: CurrentUser, course_id: str
    ) -> list[SubmittableResponse]:
        """List a course's items, earliest due date first.

        Students only see their own submission on each item.

        Raises:
            NotFoundError: If the course does not exist.
            ForbiddenError: If the caller neither owns nor is enrolled in it.
        """
        access = await self.gate.accessible_course(user, course_id)
        items = await self._items.find_all(
            self.kind.model.course_id == course_id,
            order_by=self.kind.model.due_date,
        )
        visible_to = access.student.id if access.student else None
        return [self._to_response(item, visible_to) for item in items]

    async def get(self, user: CurrentUser, item_id: str) -> SubmittableResponse:
        """Get one item with the same visibility rules as list_for_course."""
        item = await self._get_item(item_id)
        access = await self.gate.accessible_course(user, item.course_id)
        visible_to = access.student.id if access.student else None
        return self._to_response(item, visible_to)

    async def update(
        self,
        user: CurrentUser,
        item_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
        total_points: Optional[float] = None,
        is_active: Optional[bool] = None,
        links: Optional[Sequence[str]] = None,
        attachments: Sequence[UploadedFile] = (),
        replace_attachments: bool = False,
        remove_attachment_ids: Sequence[str] = (),
    ) -> SubmittableResponse:
        """Update an item in a course owned by the caller.

        New attachments are appended, or replace every existing attachment
        when replace_attachments is set. Attachments listed in
        remove_attachment_ids are detached. Blobs of detached attachments
        are deleted once the update is committed.

        Raises:
            ValidationError: If a field or file is rejected.
            NotFoundError: If the item does not exist.
            ForbiddenError: If the caller does not own the course.
            UploadFailure: If a new attachment cannot be stored.
        """
        if title is not None:
            self._require_text(title=title)
        if total_points is not None and total_points <= 0:
            raise ValidationError("Total points must be greater than 0")
        self._validate_files(attachments, self.policies.attachment)

        async with self._unit_of_work() as uow:
            item, _ = await self._owned_item(user, item_id)

            changed = self._apply_changes(
                item,
                title=title.strip() if title else None,
                description=description,
                due_date=ensure_utc(due_date),
                total_points=total_points,
                is_active=is_active,
                links=list(links) if links is not None else None,
            )

            removed = self._detach_attachments(item, uow, set(remove_attachment_ids))

            if attachments:
                blobs = await uow.upload_many(
                    attachments, self.kind.attachment_prefix(item.course_id)
                )
                if replace_attachments:
                    removed += self._detach_attachments(
                        item, uow, {a.id for a in item.attachments}
                    )
                start = max((a.position for a in item.attachments), default=-1) + 1
                item.attachments.extend(
                    SubmittableAttachment(
                        id=new_id(), position=start + i, **self._attachment_fields(b)
                    )
                    for i, b in enumerate(blobs)
                )

        logger.info(
            "Updated %s: id=%s, fields=%s, added=%d, removed=%d",
            self.kind.name,
            item_id,
            changed,
            len(attachments),
            removed,
        )
        return self._to_response(item)

    async def delete(self, user: CurrentUser, item_id: str) -> None:
        """Delete an item and every file it owns.

        One best-effort blob delete is attempted per attachment and per
        submission file. Failed deletes are logged and never prevent the
        item from being removed.

        Raises:
            NotFoundError: If the item does not exist.
            ForbiddenError: If the caller does not own the course.
        """
        async with self._unit_of_work() as uow:
            item, course = await self._owned_item(user, item_id)

            keys = [a.key for a in item.attachments] + [s.file_key for s in item.submissions]
            deleted = 0
            for key in keys:
                if await uow.discard_blob(key):
                    deleted += 1

            course_items = self._course_items(course)
            if item in course_items:
                course_items.remove(item)
            await self._items.delete(item)

        logger.info(
            "Deleted %s: id=%s, course=%s, blobs=%d/%d",
            self.kind.name,
            item_id,
            course.id,
            deleted,
            len(keys),
        )

    async def submit(
        self,
        user: CurrentUser,
        item_id: str,
        file: Optional[UploadedFile],
    ) -> tuple[SubmissionResponse, bool]:
        """Submit (or resubmit) the caller's file.

        Checks run in order: student profile, item exists, enrollment,
        item still active, file present and acceptable. Nothing is uploaded
        or written before all checks pass.

        Args:
            user: The calling student.
            item_id: Target assignment or activity.
            file: The submission file.

        Returns:
            Tuple of (submission, is_late). is_late is True when the
            submission time is strictly after the due date.

        Raises:
            UnauthorizedError: If the caller has no student profile.
            NotFoundError: If the item does not exist.
            ForbiddenError: If the student is not enrolled.
            ValidationError: If the item is closed or the file is missing or rejected.
            UploadFailure: If the file cannot be stored.
        """
        async with self._unit_of_work() as uow:
            student = await self.gate.student_profile(user)
            item = await self._get_item(item_id)
            course = await self.gate.require_course(item.course_id)
            self.gate.require_enrollment(course, student)

            if not item.is_active:
                raise ValidationError(
                    f"This {self.kind.name} is no longer accepting submissions"
                )
            if file is None:
                raise ValidationError("Please upload a submission file")
            self._validate_files([file], self.policies.submission)

            submitted_at = self._now()
            is_late = is_after(submitted_at, item.due_date)
            blob = await uow.upload(file, self.kind.submission_prefix(item.id, student.id))

            submission = item.submission_for(student.id)
            if submission is None:
                submission = Submission(
                    id=new_id(),
                    submittable_id=item.id,
                    student_id=student.id,
                    grade=None,
                    feedback=None,
                )
                item.submissions.append(submission)
                resubmitted = False
            else:
                uow.discard_blob_on_commit(submission.file_key)
                resubmitted = True

            submission.file_name = blob.name
            submission.file_url = blob.url
            submission.file_key = blob.key
            submission.submitted_at = submitted_at
            submission.is_late = is_late
            submission.status = SUBMISSION_SUBMITTED

        logger.info(
            "%s %s: id=%s, student=%s, late=%s",
            "Resubmitted" if resubmitted else "Submitted",
            self.kind.name,
            item_id,
            student.id,
            is_late,
        )
        return SubmissionResponse.model_validate(submission), is_late

    async def grade(
        self,
        user: CurrentUser,
        item_id: str,
        submission_id: str,
        grade: float,
        feedback: Optional[str] = None,
    ) -> SubmissionResponse:
        """Grade a submission.

        The grade range is checked before anything is modified.

        Raises:
            NotFoundError: If the item or submission does not exist.
            ForbiddenError: If the caller does not own the course.
            ValidationError: If grade is outside [0, total points].
        """
        async with self._unit_of_work():
            item, _ = await self._owned_item(user, item_id)

            if not 0 <= grade <= item.total_points:
                raise ValidationError(f"Grade must be between 0 and {item.total_points:g}")

            submission = item.find_submission(submission_id)
            if submission is None:
                raise NotFoundError("Submission not found")

            submission.grade = grade
            submission.feedback = feedback
            submission.status = SUBMISSION_GRADED

        logger.info(
            "Graded %s submission: id=%s, submission=%s, grade=%s",
            self.kind.name,
            item_id,
            submission_id,
            grade,
        )
        return SubmissionResponse.model_validate(submission)

    async def _get_item(self, item_id: str) -> Submittable:
        item = await self._items.get(item_id)
        if item is None:
            raise NotFoundError(f"{self.kind.label} not found")
        return item

    async def _owned_item(self, user: CurrentUser, item_id: str) -> tuple[Submittable, Course]:
        teacher = await self.gate.teacher_profile(user)
        item = await self._get_item(item_id)
        course = await self.gate.require_course(item.course_id)
        self.gate.require_course_owner(course, teacher)
        return item, course

    def _course_items(self, course: Course) -> list[Submittable]:
        return getattr(course, self.kind.course_collection)

    @staticmethod
    def _detach_attachments(item: Submittable, uow: UnitOfWork, ids: set[str]) -> int:
        detached = [a for a in item.attachments if a.id in ids]
        for attachment in detached:
            item.attachments.remove(attachment)
            uow.discard_blob_on_commit(attachment.key)
        return len(detached)

    def _to_response(
        self, item: Submittable, student_id: Optional[str] = None
    ) -> SubmittableResponse:
        submissions = item.submissions
        if student_id is not None:
            submissions = [s for s in submissions if s.student_id == student_id]

        return SubmittableResponse(
            id=item.id,
            kind=self.kind.name,
            course_id=item.course_id,
            title=item.title,
            description=item.description,
            due_date=item.due_date,
            total_points=item.total_points,
            is_active=item.is_active,
            links=list(item.links or []),
            attachments=[self._file_response(a) for a in item.attachments],
            submissions=[SubmissionResponse.model_validate(s) for s in submissions],
            created_at=item.created_at,
        )
