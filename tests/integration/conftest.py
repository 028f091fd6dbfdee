# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API integration tests.

The app under test has the real routers, auth middleware and exception
handlers. Service dependencies are overridden with mocks, so no database
or blob store is needed.
"""

from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from src.api import dependencies
from src.api.errors import register_exception_handlers
from src.api.middleware.auth import AuthMiddleware
from src.api.v1 import router as v1_router
from src.domains.announcement import AnnouncementService
from src.domains.auth.jwt import JWTManager
from src.domains.course import CourseService
from src.domains.discussion import DiscussionService
from src.domains.lecture import LectureService
from src.domains.submittable import SubmittableService
from src.domains.syllabus import SyllabusService


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


@pytest.fixture
def auth_headers(jwt_manager: JWTManager) -> Callable[..., dict[str, str]]:
    """Build Authorization headers for a caller with the given roles."""

    def build(*roles: str, user_id: str = "user-1") -> dict[str, str]:
        token = jwt_manager.create_access_token(user_id, user_type=roles[0], roles=list(roles))
        return {"Authorization": f"Bearer {token}"}

    return build


@pytest.fixture
def course_service() -> AsyncMock:
    return AsyncMock(spec=CourseService)


@pytest.fixture
def assignment_service() -> AsyncMock:
    return AsyncMock(spec=SubmittableService)


@pytest.fixture
def activity_service() -> AsyncMock:
    return AsyncMock(spec=SubmittableService)


@pytest.fixture
def announcement_service() -> AsyncMock:
    return AsyncMock(spec=AnnouncementService)


@pytest.fixture
def discussion_service() -> AsyncMock:
    return AsyncMock(spec=DiscussionService)


@pytest.fixture
def syllabus_service() -> AsyncMock:
    return AsyncMock(spec=SyllabusService)


@pytest.fixture
def lecture_service() -> AsyncMock:
    return AsyncMock(spec=LectureService)


def _provide(service: AsyncMock) -> Callable[[], AsyncMock]:
    return lambda: service


@pytest.fixture
def app(
    jwt_manager: JWTManager,
    course_service: AsyncMock,
    assignment_service: AsyncMock,
    activity_service: AsyncMock,
    announcement_service: AsyncMock,
    discussion_service: AsyncMock,
    syllabus_service: AsyncMock,
    lecture_service: AsyncMock,
) -> FastAPI:
    """Create test FastAPI app with mocked services."""
    app = FastAPI()
    register_exception_handlers(app)
    app.add_middleware(AuthMiddleware, jwt_manager=jwt_manager)
    app.include_router(v1_router)

    overrides = {
        dependencies.get_course_service: course_service,
        dependencies.get_assignment_service: assignment_service,
        dependencies.get_activity_service: activity_service,
        dependencies.get_announcement_service: announcement_service,
        dependencies.get_discussion_service: discussion_service,
        dependencies.get_syllabus_service: syllabus_service,
        dependencies.get_lecture_service: lecture_service,
    }
    for dependency, service in overrides.items():
        app.dependency_overrides[dependency] = _provide(service)
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client that renders unexpected errors as responses."""
    return TestClient(app, raise_server_exceptions=False)
