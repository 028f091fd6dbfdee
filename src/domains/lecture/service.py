# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lecture service.

This module provides the LectureService class for:
- Creating video lectures inside a syllabus module
- Listing a module's lectures, or every module of a course with its lectures
- Updating, deleting and reordering lectures

Every lecture needs an uploaded video, stored under
"lectures/course-{course_id}/module-{module_id}". A lecture that is not yet
reviewed becomes reviewed once its review deadline (seven days after
creation unless given) has passed; the rule is applied whenever a lecture
is read, created or updated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional

from src.core.errors import NotFoundError, ValidationError
from src.domains.auth.current_user import CurrentUser
from src.domains.base import EntityService
from src.infrastructure.database.models import (
    REVIEW_PERIOD,
    Lecture,
    Syllabus,
    SyllabusModule,
    new_id,
)
from src.infrastructure.database.unit_of_work import UnitOfWork
from src.infrastructure.storage.blob_store import UploadedFile
from src.models.lecture import LectureOrder, LectureResponse, ModuleLecturesResponse
from src.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def lecture_prefix(course_id: str, module_id: str) -> str:
    """Blob prefix for the videos of one module."""
    return f"lectures/course-{course_id}/module-{module_id}"


class LectureService(EntityService):
    """Service for syllabus module lectures."""

    async def create_lecture(
        self,
        user: CurrentUser,
        course_id: str,
        module_id: str,
        *,
        title: Optional[str],
        video: Optional[UploadedFile],
        content: Optional[str] = None,
        is_reviewed: Optional[bool] = None,
        review_deadline: Optional[datetime] = None,
    ) -> LectureResponse:
        """Add a lecture at the end of a module.

        Raises:
            ValidationError: If the title or video is missing or the video is rejected.
            NotFoundError: If the course, syllabus or module does not exist.
            ForbiddenError: If the caller does not own the course.
            UploadFailure: If the video cannot be stored.
        """
        if not title or not title.strip():
            raise ValidationError("Lecture title is required")
        if video is None:
            raise ValidationError("Video file is required")
        self._check_video(video)

        async with self._unit_of_work() as uow:
            module = await self._owned_module(user, course_id, module_id)
            now = self._now()
            lecture = Lecture(
                id=new_id(),
                module_id=module.id,
                title=title.strip(),
                content=content or "",
                lecture_order=len(module.lectures) + 1,
                is_reviewed=bool(is_reviewed),
                review_deadline=ensure_utc(review_deadline) or now + REVIEW_PERIOD,
                is_active=True,
            )
            lecture.apply_review_deadline(now)
            await self._attach_video(uow, lecture, video, course_id)
            module.lectures.append(lecture)

        logger.info(
            "Created lecture: module=%s, lecture=%s, order=%d",
            module_id,
            lecture.id,
            lecture.lecture_order,
        )
        return self._lecture_response(lecture)

    async def list_module_lectures(
        self, user: CurrentUser, course_id: str, module_id: str
    ) -> list[LectureResponse]:
        """Active lectures of a module, in lecture order."""
        async with self._unit_of_work():
            access = await self.gate.accessible_course(user, course_id)
            module = await self._require_module(access.course.id, module_id)
            lectures = self._active_lectures(module)
        return [self._lecture_response(lecture) for lecture in lectures]

    async def list_course_lectures(
        self, user: CurrentUser, course_id: str
    ) -> list[ModuleLecturesResponse]:
        """Every module of the course syllabus with its active lectures."""
        async with self._unit_of_work():
            access = await self.gate.accessible_course(user, course_id)
            syllabus = await self._require_syllabus(access.course.id)
            modules = [(module, self._active_lectures(module)) for module in syllabus.modules]

        return [
            ModuleLecturesResponse(
                id=module.id,
                module_number=module.module_number,
                title=module.title,
                description=module.description or "",
                is_active=module.is_active,
                lectures=[self._lecture_response(lecture) for lecture in lectures],
                lecture_count=len(lectures),
            )
            for module, lectures in modules
        ]

    async def get_lecture(
        self, user: CurrentUser, course_id: str, module_id: str, lecture_id: str
    ) -> LectureResponse:
        """Get one lecture. Students never see inactive lectures."""
        async with self._unit_of_work():
            access = await self.gate.accessible_course(user, course_id)
            module = await self._require_module(access.course.id, module_id)
            lecture = self._require_lecture(module, lecture_id)
            if not lecture.is_active and access.student is not None:
                raise NotFoundError("Lecture not found")
            self._review([lecture])
        return self._lecture_response(lecture)

    async def update_lecture(
        self,
        user: CurrentUser,
        course_id: str,
        module_id: str,
        lecture_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        lecture_order: Optional[int] = None,
        is_reviewed: Optional[bool] = None,
        review_deadline: Optional[datetime] = None,
        is_active: Optional[bool] = None,
        video: Optional[UploadedFile] = None,
    ) -> LectureResponse:
        """Update a lecture. Omitted fields are left unchanged.

        A new video replaces the stored one; the old blob is deleted after
        the commit.
        """
        if lecture_order is not None and lecture_order < 1:
            raise ValidationError("Lecture order must be at least 1")
        if video is not None:
            self._check_video(video)

        async with self._unit_of_work() as uow:
            module = await self._owned_module(user, course_id, module_id)
            lecture = self._require_lecture(module, lecture_id)

            changed = self._apply_changes(
                lecture,
                title=title.strip() if title and title.strip() else None,
                content=content,
                lecture_order=lecture_order,
                is_reviewed=is_reviewed,
                review_deadline=ensure_utc(review_deadline),
                is_active=is_active,
            )
            if video is not None:
                uow.discard_blob_on_commit(lecture.video_key)
                await self._attach_video(uow, lecture, video, course_id)
                changed.append("video")
            if lecture.apply_review_deadline(self._now()):
                changed.append("is_reviewed")

        logger.info("Updated lecture: lecture=%s, fields=%s", lecture_id, changed)
        return self._lecture_response(lecture)

    async def delete_lecture(
        self, user: CurrentUser, course_id: str, module_id: str, lecture_id: str
    ) -> None:
        """Delete a lecture; its video blob is removed best-effort."""
        async with self._unit_of_work() as uow:
            module = await self._owned_module(user, course_id, module_id)
            lecture = self._require_lecture(module, lecture_id)

            await uow.discard_blob(lecture.video_key)
            module.lectures.remove(lecture)

        logger.info("Deleted lecture: module=%s, lecture=%s", module_id, lecture_id)

    async def reorder_lectures(
        self,
        user: CurrentUser,
        course_id: str,
        module_id: str,
        orders: Sequence[LectureOrder],
    ) -> list[LectureResponse]:
        """Set the lecture_order of several lectures at once.

        Every referenced lecture must belong to the module; nothing changes
        otherwise.

        Returns:
            The module's active lectures in their new order.
        """
        if not orders:
            raise ValidationError("Invalid lecture orders data")

        async with self._unit_of_work():
            module = await self._owned_module(user, course_id, module_id)
            targets = [(self._require_lecture(module, o.lecture_id), o.order) for o in orders]
            for lecture, order in targets:
                lecture.lecture_order = order
            lectures = self._active_lectures(module)

        logger.info("Reordered lectures: module=%s, count=%d", module_id, len(targets))
        return [self._lecture_response(lecture) for lecture in lectures]

    async def _require_syllabus(self, course_id: str) -> Syllabus:
        syllabus = await self.repos.syllabi.find_one(Syllabus.course_id == course_id)
        if syllabus is None:
            raise NotFoundError("No syllabus found for this course")
        return syllabus

    async def _require_module(self, course_id: str, module_id: str) -> SyllabusModule:
        syllabus = await self._require_syllabus(course_id)
        module = syllabus.find_module(module_id)
        if module is None:
            raise NotFoundError("Module not found")
        return module

    async def _owned_module(
        self, user: CurrentUser, course_id: str, module_id: str
    ) -> SyllabusModule:
        course, _ = await self.gate.owned_course(user, course_id)
        return await self._require_module(course.id, module_id)

    @staticmethod
    def _require_lecture(module: SyllabusModule, lecture_id: str) -> Lecture:
        lecture = module.find_lecture(lecture_id)
        if lecture is None:
            raise NotFoundError("Lecture not found")
        return lecture

    def _check_video(self, video: UploadedFile) -> None:
        if video.size == 0:
            raise ValidationError("Video file appears to be empty")
        self._validate_files([video], self.policies.lecture_video)

    def _active_lectures(self, module: SyllabusModule) -> list[Lecture]:
        lectures = sorted(
            (lecture for lecture in module.lectures if lecture.is_active),
            key=lambda lecture: lecture.lecture_order,
        )
        self._review(lectures)
        return lectures

    def _review(self, lectures: Iterable[Lecture]) -> None:
        now = self._now()
        reviewed = [lecture.id for lecture in lectures if lecture.apply_review_deadline(now)]
        if reviewed:
            logger.info("Review deadline passed: lectures=%s", reviewed)

    @staticmethod
    async def _attach_video(
        uow: UnitOfWork, lecture: Lecture, video: UploadedFile, course_id: str
    ) -> None:
        blob = await uow.upload(video, lecture_prefix(course_id, lecture.module_id))
        lecture.video_url = blob.url
        lecture.video_key = blob.key

    @staticmethod
    def _lecture_response(lecture: Lecture) -> LectureResponse:
        return LectureResponse.model_validate(lecture)
