# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Announcement service.

This module provides the AnnouncementService class for:
- Publishing announcements in a course, with an optional image
- Listing a course's active announcements, newest first
- Updating, replacing or removing the image, and deleting announcements
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from src.core.errors import NotFoundError
from src.domains.auth.current_user import CurrentUser
from src.domains.base import EntityService
from src.infrastructure.database.models import Announcement, Course, new_id
from src.infrastructure.storage.blob_store import UploadedFile
from src.models.announcement import AnnouncementResponse
from src.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

IMAGE_PREFIX = "announcement-images"


class AnnouncementService(EntityService):
    """Service for course announcements."""

    async def create(
        self,
        user: CurrentUser,
        course_id: str,
        *,
        title: Optional[str],
        content: Optional[str],
        publish_date: Optional[datetime] = None,
        image: Optional[UploadedFile] = None,
    ) -> AnnouncementResponse:
        """Publish an announcement in a course owned by the caller.

        Args:
            user: The caller.
            course_id: Target course.
            title: Announcement title.
            content: Announcement body.
            publish_date: When the announcement is published (defaults to now).
            image: Optional image.

        Returns:
            The created announcement.

        Raises:
            ValidationError: If title or content is blank or the image is rejected.
            NotFoundError: If the course does not exist.
            ForbiddenError: If the caller does not own the course.
            UploadFailure: If the image cannot be stored.
        """
        self._require_text(title=title, content=content)
        if image is not None:
            self._validate_files([image], self.policies.announcement_image)

        async with self._unit_of_work() as uow:
            course, teacher = await self.gate.owned_course(user, course_id)
            blob = await uow.upload(image, IMAGE_PREFIX) if image is not None else None

            announcement = Announcement(
                id=new_id(),
                course_id=course.id,
                title=title.strip(),
                content=content,
                publish_date=ensure_utc(publish_date) or self._now(),
                image_url=blob.url if blob else None,
                image_key=blob.key if blob else None,
                published_by=teacher.id,
                is_active=True,
            )
            await self.repos.announcements.add(announcement)

        logger.info(
            "Published announcement: id=%s, course=%s, image=%s",
            announcement.id,
            course.id,
            blob is not None,
        )
        return AnnouncementResponse.model_validate(announcement)

    async def list_for_course(
        self, user: CurrentUser, course_id: str
    ) -> list[AnnouncementResponse]:
        """List a course's active announcements, newest publish date first."""
        await self.gate.accessible_course(user, course_id)
        announcements = await self.repos.announcements.find_all(
            Announcement.course_id == course_id,
            Announcement.is_active.is_(True),
            order_by=Announcement.publish_date.desc(),
        )
        return [AnnouncementResponse.model_validate(a) for a in announcements]

    async def get(self, user: CurrentUser, announcement_id: str) -> AnnouncementResponse:
        """Get an announcement from a course the caller can access."""
        announcement = await self._get_announcement(announcement_id)
        await self.gate.accessible_course(user, announcement.course_id)
        return AnnouncementResponse.model_validate(announcement)

    async def update(
        self,
        user: CurrentUser,
        announcement_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        publish_date: Optional[datetime] = None,
        is_active: Optional[bool] = None,
        image: Optional[UploadedFile] = None,
        remove_image: bool = False,
    ) -> AnnouncementResponse:
        """Update an announcement.

        A new image replaces the current one; remove_image drops it. The
        previous image blob is deleted after the update is committed.

        Raises:
            ValidationError: If a field or the image is rejected.
            NotFoundError: If the announcement does not exist.
            ForbiddenError: If the caller does not own the course.
            UploadFailure: If the new image cannot be stored.
        """
        if title is not None:
            self._require_text(title=title)
        if content is not None:
            self._require_text(content=content)
        if image is not None:
            self._validate_files([image], self.policies.announcement_image)

        async with self._unit_of_work() as uow:
            announcement, _ = await self._owned_announcement(user, announcement_id)

            changed = self._apply_changes(
                announcement,
                title=title.strip() if title else None,
                content=content,
                publish_date=ensure_utc(publish_date),
                is_active=is_active,
            )

            if image is not None or remove_image:
                uow.discard_blob_on_commit(announcement.image_key)
                blob = await uow.upload(image, IMAGE_PREFIX) if image is not None else None
                announcement.image_url = blob.url if blob else None
                announcement.image_key = blob.key if blob else None
                changed.append("image")

        logger.info("Updated announcement: id=%s, fields=%s", announcement_id, changed)
        return AnnouncementResponse.model_validate(announcement)

    async def delete(self, user: CurrentUser, announcement_id: str) -> None:
        """Delete an announcement; its image is removed best-effort.

        Raises:
            NotFoundError: If the announcement does not exist.
            ForbiddenError: If the caller does not own the course.
        """
        async with self._unit_of_work() as uow:
            announcement, course = await self._owned_announcement(user, announcement_id)
            await uow.discard_blob(announcement.image_key)
            await self.repos.announcements.delete(announcement)

        logger.info("Deleted announcement: id=%s, course=%s", announcement_id, course.id)

    async def _get_announcement(self, announcement_id: str) -> Announcement:
        announcement = await self.repos.announcements.get(announcement_id)
        if announcement is None:
            raise NotFoundError("Announcement not found")
        return announcement

    async def _owned_announcement(
        self, user: CurrentUser, announcement_id: str
    ) -> tuple[Announcement, Course]:
        teacher = await self.gate.teacher_profile(user)
        announcement = await self._get_announcement(announcement_id)
        course = await self.gate.require_course(announcement.course_id)
        self.gate.require_course_owner(course, teacher)
        return announcement, course
