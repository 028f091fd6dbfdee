# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (services with mocked repositories and blob store)
- Integration tests (API routes with overridden dependencies)

Domain objects are real, transient SQLAlchemy models so collection
mutations behave as they do against the database. Repositories and the
blob store are mocks.
"""

from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.core.config.settings import UploadSettings
from src.domains.auth.current_user import CurrentUser
from src.infrastructure.database.models import Course, Student, Teacher, new_id
from src.infrastructure.storage import BlobDeleteResult, StoredBlob, UploadPolicies, UploadedFile
from tests.helpers import FIXED_NOW, make_repository, make_user

_REPOSITORY_NAMES = (
    "teachers",
    "students",
    "courses",
    "assignments",
    "activities",
    "announcements",
    "discussions",
    "syllabi",
)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DB_HOST": "localhost",
        "DB_DATABASE": "coursehub_test",
        "AZURE_STORAGE_CONNECTION_STRING": "UseDevelopmentStorage=true",
        "AZURE_STORAGE_CONTAINER_NAME": "coursehub-test",
        "JWT_SECRET_KEY": "test-secret-key-for-testing-only",
        "JWT_ALGORITHM": "HS256",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
    }


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (app with mocked services)"
    )


# =============================================================================
# Infrastructure Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    return db


@pytest.fixture
def repos(mock_db: AsyncMock) -> MagicMock:
    """Create mock repositories bound to the mock session."""
    repositories = MagicMock()
    repositories.session = mock_db
    for name in _REPOSITORY_NAMES:
        setattr(repositories, name, make_repository())
    return repositories


@pytest.fixture
def blob_store() -> MagicMock:
    """Create a blob store mock whose uploads and deletes succeed."""
    store = MagicMock()

    async def upload(file: UploadedFile, prefix: str) -> StoredBlob:
        key = f"{prefix}/{uuid4().hex[:8]}-{file.filename}"
        return StoredBlob(
            url=f"https://blobs.example.com/{key}",
            key=key,
            name=file.filename,
            content_type=file.content_type,
        )

    async def delete(key: str | None) -> BlobDeleteResult:
        return BlobDeleteResult(key=key or "", deleted=bool(key), message="File deleted successfully")

    store.upload = AsyncMock(side_effect=upload)
    store.delete = AsyncMock(side_effect=delete)
    return store


@pytest.fixture
def policies() -> UploadPolicies:
    """Upload policies with the default limits."""
    return UploadPolicies.from_settings(UploadSettings())


@pytest.fixture
def service_kwargs(repos: MagicMock, policies: UploadPolicies) -> dict[str, Any]:
    """Keyword arguments wiring a service to the mocks and a fixed clock."""
    return {"repositories": repos, "policies": policies, "clock": lambda: FIXED_NOW}


# =============================================================================
# Caller Fixtures
# =============================================================================


@pytest.fixture
def teacher_user() -> CurrentUser:
    return make_user("teacher")


@pytest.fixture
def student_user() -> CurrentUser:
    return make_user("student")


@pytest.fixture
def admin_user() -> CurrentUser:
    return make_user("admin")


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def teacher(teacher_user: CurrentUser) -> Teacher:
    """Teacher profile of teacher_user."""
    return Teacher(id=new_id(), user_id=teacher_user.id)


@pytest.fixture
def student(student_user: CurrentUser) -> Student:
    """Student profile of student_user."""
    return Student(id=new_id(), user_id=student_user.id, courses=[])


@pytest.fixture
def course(teacher: Teacher, student: Student) -> Course:
    """A course owned by teacher with student enrolled."""
    course = Course(
        id=new_id(),
        title="Algebra I",
        about="Linear equations and functions",
        teacher_id=teacher.id,
        is_active=True,
        students=[],
        assignments=[],
        activities=[],
    )
    course.students.append(student)
    return course


@pytest.fixture
def wired_repos(
    repos: MagicMock, teacher: Teacher, student: Student, course: Course
) -> MagicMock:
    """Repositories resolving the teacher, the student and the course."""
    repos.teachers.find_one.return_value = teacher
    repos.students.find_one.return_value = student
    repos.courses.get.return_value = course
    return repos


@pytest.fixture
def due_date() -> datetime:
    """A due date one day after FIXED_NOW."""
    return FIXED_NOW + timedelta(days=1)
