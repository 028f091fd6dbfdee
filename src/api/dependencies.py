# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions and the blob store from app.state
- Get authenticated users and enforce roles
- Get service instances
- Read multipart uploads into UploadedFile values

Example:
    @router.get("/courses")
    async def list_courses(
        current_user: AuthenticatedUser,
        service: CourseService = Depends(get_course_service),
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.auth import get_current_user
from src.core.config import get_settings
from src.domains.announcement import AnnouncementService
from src.domains.auth.current_user import ROLE_STUDENT, ROLE_TEACHER, CurrentUser
from src.domains.course import CourseService
from src.domains.discussion import DiscussionService
from src.domains.lecture import LectureService
from src.domains.submittable import ACTIVITY, ASSIGNMENT, SubmittableService
from src.domains.syllabus import SyllabusService
from src.infrastructure.database.connection import DatabaseManager
from src.infrastructure.storage import BlobStore, UploadedFile, UploadPolicies

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


# =========================================================================
# Infrastructure Dependencies
# =========================================================================


def get_database(request: Request) -> DatabaseManager:
    """Get the database manager created by the application lifespan.

    Raises:
        HTTPException: If the database is not initialized.
    """
    database: DatabaseManager | None = getattr(request.app.state, "db", None)
    if database is None or not database.is_initialized:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not initialized",
        )
    return database


async def get_db(
    database: DatabaseManager = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """Get a request-scoped database session.

    Yields:
        AsyncSession, closed when the request finishes.
    """
    async with database.session() as session:
        yield session


def get_blob_store(request: Request) -> BlobStore:
    """Get the blob store created by the application lifespan.

    Raises:
        HTTPException: If the blob store is not initialized.
    """
    blob_store: BlobStore | None = getattr(request.app.state, "blob_store", None)
    if blob_store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="File storage not initialized",
        )
    return blob_store


def get_upload_policies() -> UploadPolicies:
    """Get upload policies using the configured size limits."""
    return UploadPolicies.from_settings(get_settings().uploads)


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user.

    Raises:
        HTTPException: If not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


class RequireRole:
    """Dependency for requiring specific roles.

    Example:
        @router.get("/admin")
        async def admin_only(
            user: CurrentUser = Depends(RequireRole("admin")),
        ):
            ...
    """

    def __init__(self, *roles: str) -> None:
        """Initialize role requirement.

        Args:
            roles: Required role codes (any of these).
        """
        self.roles = roles

    def __call__(self, request: Request) -> CurrentUser:
        """Check roles and return user.

        Raises:
            HTTPException: If not authenticated or missing required roles.
        """
        user = require_auth(request)

        if not user.has_any_role(*self.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(self.roles)}",
            )

        return user


require_teacher = RequireRole(ROLE_TEACHER)
require_student = RequireRole(ROLE_STUDENT)


# =========================================================================
# Upload Helpers
# =========================================================================


async def read_upload(upload: UploadFile | None) -> UploadedFile | None:
    """Read a multipart upload into memory.

    Browsers send an empty part for an untouched file input; that is
    treated as no file.
    """
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    await upload.close()
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or DEFAULT_CONTENT_TYPE,
        data=data,
    )


async def read_uploads(uploads: list[UploadFile] | None) -> list[UploadedFile]:
    """Read every non-empty multipart upload into memory."""
    files = []
    for upload in uploads or []:
        file = await read_upload(upload)
        if file is not None:
            files.append(file)
    return files


# =========================================================================
# Service Dependencies
# =========================================================================


def get_course_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    policies: UploadPolicies = Depends(get_upload_policies),
) -> CourseService:
    return CourseService(db, blob_store, policies=policies)


def get_assignment_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    policies: UploadPolicies = Depends(get_upload_policies),
) -> SubmittableService:
    return SubmittableService(db, blob_store, ASSIGNMENT, policies=policies)


def get_activity_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    policies: UploadPolicies = Depends(get_upload_policies),
) -> SubmittableService:
    return SubmittableService(db, blob_store, ACTIVITY, policies=policies)


def get_announcement_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    policies: UploadPolicies = Depends(get_upload_policies),
) -> AnnouncementService:
    return AnnouncementService(db, blob_store, policies=policies)


def get_discussion_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    policies: UploadPolicies = Depends(get_upload_policies),
) -> DiscussionService:
    return DiscussionService(db, blob_store, policies=policies)


def get_syllabus_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    policies: UploadPolicies = Depends(get_upload_policies),
) -> SyllabusService:
    return SyllabusService(db, blob_store, policies=policies)


def get_lecture_service(
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    policies: UploadPolicies = Depends(get_upload_policies),
) -> LectureService:
    return LectureService(db, blob_store, policies=policies)


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

AuthenticatedUser = Annotated[CurrentUser, Depends(require_auth)]
TeacherUser = Annotated[CurrentUser, Depends(require_teacher)]
StudentUser = Annotated[CurrentUser, Depends(require_student)]
Courses = Annotated[CourseService, Depends(get_course_service)]
Announcements = Annotated[AnnouncementService, Depends(get_announcement_service)]
Discussions = Annotated[DiscussionService, Depends(get_discussion_service)]
Syllabi = Annotated[SyllabusService, Depends(get_syllabus_service)]
Lectures = Annotated[LectureService, Depends(get_lecture_service)]
