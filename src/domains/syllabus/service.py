# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Syllabus service.

This module provides the SyllabusService class for:
- Reading a course syllabus (modules with their content items)
- Managing modules (create, update, delete)
- Managing content items of type file, link, video or text

A course has at most one syllabus; it is created with the first module.
Files go to "syllabus-files" and uploaded videos to "syllabus-videos".
Replacing or removing a file or video deletes the old blob once the change
is committed.
"""

from __future__ import annotations

import logging
from typing import Optional

from src.core.errors import NotFoundError, ValidationError
from src.domains.auth.current_user import CurrentUser
from src.domains.base import EntityService
from src.infrastructure.database.models import (
    CONTENT_FILE,
    CONTENT_LINK,
    CONTENT_TEXT,
    CONTENT_TYPES,
    CONTENT_VIDEO,
    VIDEO_PROVIDERS,
    ContentItem,
    Syllabus,
    SyllabusModule,
    new_id,
)
from src.infrastructure.database.unit_of_work import UnitOfWork
from src.infrastructure.storage import policies as mime
from src.infrastructure.storage.blob_store import UploadedFile
from src.models.syllabus import (
    ContentItemResponse,
    FileContent,
    LinkContent,
    ModuleCreateRequest,
    ModuleResponse,
    ModuleUpdateRequest,
    SyllabusResponse,
    TextContent,
    VideoContent,
)

logger = logging.getLogger(__name__)

FILE_PREFIX = "syllabus-files"
VIDEO_PREFIX = "syllabus-videos"
UNTITLED_CONTENT = "Untitled Content"

_FILE_KINDS = {
    mime.PDF: "pdf",
    mime.PPT: "presentation",
    mime.PPTX: "presentation",
    mime.MSWORD: "document",
    mime.DOCX: "document",
}


def file_kind(content_type: str) -> str:
    """Classify a MIME type as pdf, presentation, document, image or other."""
    if content_type in _FILE_KINDS:
        return _FILE_KINDS[content_type]
    if content_type.startswith("image/"):
        return "image"
    return "other"


class SyllabusService(EntityService):
    """Service for course syllabi."""

    async def get_syllabus(self, user: CurrentUser, course_id: str) -> SyllabusResponse:
        """Get a course's syllabus.

        Courses without a syllabus return an empty module list.
        """
        await self.gate.accessible_course(user, course_id)
        syllabus = await self._find_syllabus(course_id)
        if syllabus is None:
            return SyllabusResponse(course_id=course_id, modules=[])
        return self._syllabus_response(syllabus)

    async def get_module(
        self, user: CurrentUser, course_id: str, module_id: str
    ) -> ModuleResponse:
        """Get one module of a course's syllabus."""
        await self.gate.accessible_course(user, course_id)
        syllabus = await self._require_syllabus(course_id)
        return self._module_response(self._require_module(syllabus, module_id))

    async def create_module(
        self, user: CurrentUser, course_id: str, request: ModuleCreateRequest
    ) -> ModuleResponse:
        """Add a module, creating the syllabus if the course has none.

        Raises:
            ValidationError: If the title is blank or the module number is taken.
            NotFoundError: If the course does not exist.
            ForbiddenError: If the caller does not own the course.
        """
        self._require_text(title=request.title)

        async with self._unit_of_work():
            course, _ = await self.gate.owned_course(user, course_id)
            syllabus = await self._find_syllabus(course.id)
            if syllabus is None:
                syllabus = Syllabus(id=new_id(), course_id=course.id, modules=[])
                await self.repos.syllabi.add(syllabus)
                logger.info("Created syllabus: course=%s", course.id)

            self._check_module_number(syllabus, request.module_number)
            module = SyllabusModule(
                id=new_id(),
                syllabus_id=syllabus.id,
                module_number=request.module_number,
                title=request.title.strip(),
                description=request.description,
                topics=[t for t in request.topics if t],
                is_active=True,
                position=len(syllabus.modules),
                content_items=[],
                lectures=[],
            )
            syllabus.modules.append(module)

        logger.info(
            "Created syllabus module: course=%s, module=%s, number=%d",
            course_id,
            module.id,
            module.module_number,
        )
        return self._module_response(module)

    async def update_module(
        self,
        user: CurrentUser,
        course_id: str,
        module_id: str,
        request: ModuleUpdateRequest,
    ) -> ModuleResponse:
        """Update a module's details. Omitted fields are left unchanged."""
        async with self._unit_of_work():
            syllabus = await self._owned_syllabus(user, course_id)
            module = self._require_module(syllabus, module_id)
            if request.module_number is not None and request.module_number != module.module_number:
                self._check_module_number(syllabus, request.module_number)

            changed = self._apply_changes(
                module,
                module_number=request.module_number,
                title=request.title.strip() if request.title else None,
                description=request.description,
                topics=request.topics,
                is_active=request.is_active,
                position=request.position,
            )

        logger.info("Updated syllabus module: module=%s, fields=%s", module_id, changed)
        return self._module_response(module)

    async def delete_module(self, user: CurrentUser, course_id: str, module_id: str) -> None:
        """Delete a module; every file and video blob in it is removed best-effort."""
        async with self._unit_of_work() as uow:
            syllabus = await self._owned_syllabus(user, course_id)
            module = self._require_module(syllabus, module_id)

            keys = module.blob_keys()
            for key in keys:
                await uow.discard_blob(key)
            syllabus.modules.remove(module)

        logger.info("Deleted syllabus module: module=%s, blobs=%d", module_id, len(keys))

    async def add_content(
        self,
        user: CurrentUser,
        course_id: str,
        module_id: str,
        *,
        content_type: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        url: Optional[str] = None,
        video_url: Optional[str] = None,
        video_provider: Optional[str] = None,
        content: Optional[str] = None,
        file: Optional[UploadedFile] = None,
        video_file: Optional[UploadedFile] = None,
    ) -> ContentItemResponse:
        """Add a content item to a module.

        Requirements per type:
            file: an uploaded file.
            link: url.
            video: video_url or an uploaded video_file.
            text: content.

        Raises:
            ValidationError: If the type is unknown, a required value is
                missing or a file is rejected.
            NotFoundError: If the course, syllabus or module does not exist.
            ForbiddenError: If the caller does not own the course.
            UploadFailure: If a file cannot be stored.
        """
        if content_type not in CONTENT_TYPES:
            raise ValidationError(
                f"Invalid content type. Allowed types: {', '.join(CONTENT_TYPES)}"
            )
        if content_type == CONTENT_FILE:
            if file is None:
                raise ValidationError("No file uploaded")
            self._validate_files([file], self.policies.syllabus_file)
        elif content_type == CONTENT_LINK and not url:
            raise ValidationError("URL is required for link content type")
        elif content_type == CONTENT_VIDEO:
            if not video_url and video_file is None:
                raise ValidationError("Video URL or video file is required for video content type")
            self._check_video_provider(video_provider)
            if video_file is not None:
                self._validate_files([video_file], self.policies.syllabus_video)
        elif content_type == CONTENT_TEXT and not content:
            raise ValidationError("Content is required for text content type")

        async with self._unit_of_work() as uow:
            syllabus = await self._owned_syllabus(user, course_id)
            module = self._require_module(syllabus, module_id)

            item = ContentItem(
                id=new_id(),
                module_id=module.id,
                type=content_type,
                title=(title or "").strip() or UNTITLED_CONTENT,
                description=description or "",
                position=len(module.content_items),
            )

            if content_type == CONTENT_FILE:
                await self._attach_file(uow, item, file)
            elif content_type == CONTENT_LINK:
                item.url = url
            elif content_type == CONTENT_VIDEO:
                item.video_url = video_url
                item.video_provider = video_provider or "other"
                if video_file is not None:
                    await self._attach_video(uow, item, video_file)
            else:
                item.content = content

            module.content_items.append(item)

        logger.info(
            "Added syllabus content: module=%s, item=%s, type=%s",
            module_id,
            item.id,
            content_type,
        )
        return self._content_response(item)

    async def update_content(
        self,
        user: CurrentUser,
        course_id: str,
        module_id: str,
        item_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        url: Optional[str] = None,
        video_url: Optional[str] = None,
        video_provider: Optional[str] = None,
        content: Optional[str] = None,
        file: Optional[UploadedFile] = None,
        video_file: Optional[UploadedFile] = None,
    ) -> ContentItemResponse:
        """Update a content item. Values that do not apply to its type are ignored.

        A new file or video replaces the stored one; the old blob is deleted
        after the commit. Setting video_url on an uploaded video drops the
        uploaded file the same way.
        """
        if file is not None:
            self._validate_files([file], self.policies.syllabus_file)
        if video_file is not None:
            self._validate_files([video_file], self.policies.syllabus_video)
        self._check_video_provider(video_provider)

        async with self._unit_of_work() as uow:
            syllabus = await self._owned_syllabus(user, course_id)
            module = self._require_module(syllabus, module_id)
            item = module.find_item(item_id)
            if item is None:
                raise NotFoundError("Content item not found")

            changed = self._apply_changes(
                item,
                title=title.strip() if title and title.strip() else None,
                description=description,
            )

            if item.type == CONTENT_FILE and file is not None:
                uow.discard_blob_on_commit(item.file_key)
                await self._attach_file(uow, item, file)
                changed.append("file")
            elif item.type == CONTENT_LINK:
                changed += self._apply_changes(item, url=url or None)
            elif item.type == CONTENT_VIDEO:
                changed += self._apply_changes(item, video_provider=video_provider)
                if video_file is not None:
                    uow.discard_blob_on_commit(item.video_key)
                    await self._attach_video(uow, item, video_file)
                    changed.append("video_file")
                elif video_url:
                    uow.discard_blob_on_commit(item.video_key)
                    item.video_url = video_url
                    item.video_key = None
                    changed.append("video_url")
            elif item.type == CONTENT_TEXT:
                changed += self._apply_changes(item, content=content or None)

        logger.info("Updated syllabus content: item=%s, fields=%s", item_id, changed)
        return self._content_response(item)

    async def delete_content(
        self, user: CurrentUser, course_id: str, module_id: str, item_id: str
    ) -> None:
        """Delete a content item; its file or video blob is removed best-effort."""
        async with self._unit_of_work() as uow:
            syllabus = await self._owned_syllabus(user, course_id)
            module = self._require_module(syllabus, module_id)
            item = module.find_item(item_id)
            if item is None:
                raise NotFoundError("Content item not found")

            for key in item.blob_keys():
                await uow.discard_blob(key)
            module.content_items.remove(item)

        logger.info("Deleted syllabus content: module=%s, item=%s", module_id, item_id)

    async def _find_syllabus(self, course_id: str) -> Optional[Syllabus]:
        return await self.repos.syllabi.find_one(Syllabus.course_id == course_id)

    async def _require_syllabus(self, course_id: str) -> Syllabus:
        syllabus = await self._find_syllabus(course_id)
        if syllabus is None:
            raise NotFoundError("No syllabus found for this course")
        return syllabus

    async def _owned_syllabus(self, user: CurrentUser, course_id: str) -> Syllabus:
        course, _ = await self.gate.owned_course(user, course_id)
        return await self._require_syllabus(course.id)

    @staticmethod
    def _require_module(syllabus: Syllabus, module_id: str) -> SyllabusModule:
        module = syllabus.find_module(module_id)
        if module is None:
            raise NotFoundError("Module not found")
        return module

    @staticmethod
    def _check_module_number(syllabus: Syllabus, module_number: int) -> None:
        if any(m.module_number == module_number for m in syllabus.modules):
            raise ValidationError(f"Module number {module_number} already exists")

    @staticmethod
    def _check_video_provider(provider: Optional[str]) -> None:
        if provider and provider not in VIDEO_PROVIDERS:
            raise ValidationError(
                f"Invalid video provider. Allowed providers: {', '.join(VIDEO_PROVIDERS)}"
            )

    @staticmethod
    async def _attach_file(uow: UnitOfWork, item: ContentItem, file: UploadedFile) -> None:
        blob = await uow.upload(file, FILE_PREFIX)
        item.file_type = file_kind(file.content_type)
        item.file_name = blob.name
        item.file_url = blob.url
        item.file_key = blob.key

    @staticmethod
    async def _attach_video(uow: UnitOfWork, item: ContentItem, video: UploadedFile) -> None:
        blob = await uow.upload(video, VIDEO_PREFIX)
        item.video_url = blob.url
        item.video_key = blob.key

    @staticmethod
    def _content_response(item: ContentItem) -> ContentItemResponse:
        common = {
            "id": item.id,
            "title": item.title,
            "description": item.description or "",
            "position": item.position,
            "created_at": item.created_at,
        }
        if item.type == CONTENT_FILE:
            return FileContent(
                type=CONTENT_FILE,
                file_type=item.file_type or "other",
                file_name=item.file_name or "",
                file_url=item.file_url or "",
                **common,
            )
        if item.type == CONTENT_LINK:
            return LinkContent(type=CONTENT_LINK, url=item.url or "", **common)
        if item.type == CONTENT_VIDEO:
            return VideoContent(
                type=CONTENT_VIDEO,
                video_url=item.video_url or "",
                video_provider=item.video_provider or "other",
                uploaded=item.video_key is not None,
                **common,
            )
        return TextContent(type=CONTENT_TEXT, content=item.content or "", **common)

    def _module_response(self, module: SyllabusModule) -> ModuleResponse:
        return ModuleResponse(
            id=module.id,
            module_number=module.module_number,
            title=module.title,
            description=module.description or "",
            topics=list(module.topics or []),
            is_active=module.is_active,
            position=module.position,
            content_items=[self._content_response(i) for i in module.content_items],
        )

    def _syllabus_response(self, syllabus: Syllabus) -> SyllabusResponse:
        return SyllabusResponse(
            id=syllabus.id,
            course_id=syllabus.course_id,
            modules=[self._module_response(m) for m in syllabus.modules],
        )
