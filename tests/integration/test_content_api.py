# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for Announcements, Discussions and Syllabus API endpoints."""

from datetime import datetime, timezone
from typing import Callable
from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.errors import ForbiddenError, NotFoundError
from src.models.announcement import AnnouncementResponse
from src.models.discussion import CommentResponse, DiscussionResponse, ReplyResponse
from src.models.syllabus import (
    LinkContent,
    ModuleResponse,
    SyllabusResponse,
    VideoContent,
)

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def discussion_response(**overrides) -> DiscussionResponse:
    fields = {
        "id": "disc-1",
        "title": "Homework help",
        "content": "Stuck on question 3",
        "type": "course",
        "course_id": "course-1",
        "author_id": "user-1",
        "view_count": 3,
    }
    fields.update(overrides)
    return DiscussionResponse(**fields)


def module_response(**overrides) -> ModuleResponse:
    fields = {
        "id": "mod-1",
        "module_number": 1,
        "title": "Foundations",
        "description": "",
        "topics": ["variables"],
        "is_active": True,
        "position": 0,
    }
    fields.update(overrides)
    return ModuleResponse(**fields)


class TestRouting:
    def test_routes_registered(self, app: FastAPI) -> None:
        routes = app.openapi()["paths"]

        assert "/api/v1/courses/{course_id}/announcements" in routes
        assert "/api/v1/announcements/{announcement_id}" in routes
        assert "/api/v1/discussions/search" in routes
        assert "/api/v1/discussions/teacher" in routes
        assert "/api/v1/discussions/{discussion_id}/comments/{comment_id}/replies" in routes
        assert "/api/v1/courses/{course_id}/syllabus" in routes
        assert (
            "/api/v1/courses/{course_id}/syllabus/modules/{module_id}/content/{item_id}" in routes
        )


class TestAnnouncementsAPI:
    def test_create_with_image(
        self,
        client: TestClient,
        announcement_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        announcement_service.create.return_value = AnnouncementResponse(
            id="ann-1",
            course_id="course-1",
            title="Field trip",
            content="Bring a jacket",
            publish_date=NOW,
            image_url="https://blobs.example.com/announcement-images/bus.png",
            published_by="teacher-1",
            is_active=True,
        )

        response = client.post(
            "/api/v1/courses/course-1/announcements",
            data={"title": "Field trip", "content": "Bring a jacket"},
            files={"image": ("bus.png", b"\x89PNG", "image/png")},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["announcement"]["imageUrl"].endswith("bus.png")
        assert body["announcement"]["publishedBy"] == "teacher-1"
        kwargs = announcement_service.create.await_args.kwargs
        assert kwargs["image"].filename == "bus.png"
        assert kwargs["publish_date"] is None

    def test_remove_image(
        self,
        client: TestClient,
        announcement_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        announcement_service.update.return_value = AnnouncementResponse(
            id="ann-1",
            course_id="course-1",
            title="Field trip",
            content="Bring a jacket",
            publish_date=NOW,
            published_by="teacher-1",
            is_active=True,
        )

        response = client.patch(
            "/api/v1/announcements/ann-1",
            data={"removeImage": "true"},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 200
        kwargs = announcement_service.update.await_args.kwargs
        assert kwargs["image"] is None
        assert kwargs["remove_image"] is True

    def test_missing_announcement(
        self,
        client: TestClient,
        announcement_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        announcement_service.get.side_effect = NotFoundError("Announcement not found")

        response = client.get("/api/v1/announcements/nope", headers=auth_headers("student"))

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Announcement not found"}


class TestDiscussionsAPI:
    def test_search_with_filters(
        self,
        client: TestClient,
        discussion_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        discussion_service.search.return_value = [discussion_response()]

        response = client.get(
            "/api/v1/discussions/search",
            params={"q": "question", "type": "course", "courseId": "course-1"},
            headers=auth_headers("student"),
        )

        assert response.status_code == 200
        assert response.json()["discussions"][0]["viewCount"] == 3
        assert discussion_service.search.await_args.kwargs == {
            "query": "question",
            "discussion_type": "course",
            "course_id": "course-1",
        }

    def test_search_is_not_captured_by_id_route(
        self,
        client: TestClient,
        discussion_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        discussion_service.search.return_value = []

        client.get("/api/v1/discussions/search", headers=auth_headers("teacher"))

        discussion_service.get.assert_not_awaited()

    def test_student_cannot_start_teacher_discussion(
        self,
        client: TestClient,
        discussion_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = client.post(
            "/api/v1/discussions/teacher",
            data={"title": "Hi", "content": "Text"},
            headers=auth_headers("student"),
        )

        assert response.status_code == 403
        discussion_service.create.assert_not_awaited()

    def test_create_course_discussion(
        self,
        client: TestClient,
        discussion_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        discussion_service.create.return_value = discussion_response(view_count=0)

        response = client.post(
            "/api/v1/courses/course-1/discussions",
            data={"title": "Homework help", "content": "Stuck on question 3"},
            headers=auth_headers("student"),
        )

        assert response.status_code == 201
        kwargs = discussion_service.create.await_args.kwargs
        assert kwargs["discussion_type"] == "course"
        assert kwargs["course_id"] == "course-1"

    def test_comment_tree(
        self,
        client: TestClient,
        discussion_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        reply = ReplyResponse(id="r-1", author_id="user-2", content="Me too", is_deleted=False)
        discussion_service.get.return_value = discussion_response(
            comments=[
                CommentResponse(
                    id="c-1",
                    author_id="user-1",
                    content="Question",
                    is_deleted=False,
                    replies=[reply],
                )
            ]
        )

        response = client.get("/api/v1/discussions/disc-1", headers=auth_headers("student"))

        comment = response.json()["discussion"]["comments"][0]
        assert comment["replies"][0]["authorId"] == "user-2"
        assert comment["isDeleted"] is False

    def test_reply(
        self,
        client: TestClient,
        discussion_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        discussion_service.add_reply.return_value = ReplyResponse(
            id="r-2", author_id="user-1", content="Thanks", is_deleted=False
        )

        response = client.post(
            "/api/v1/discussions/disc-1/comments/r-1/replies",
            data={"content": "Thanks"},
            headers=auth_headers("student"),
        )

        assert response.status_code == 201
        assert response.json()["reply"]["id"] == "r-2"
        assert discussion_service.add_reply.await_args.args[1:4] == ("disc-1", "r-1", "Thanks")

    def test_delete_comment_by_stranger(
        self,
        client: TestClient,
        discussion_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        discussion_service.delete_comment.side_effect = ForbiddenError(
            "You are not authorized to delete this comment"
        )

        response = client.delete(
            "/api/v1/discussions/disc-1/comments/c-1", headers=auth_headers("student")
        )

        assert response.status_code == 403


class TestSyllabusAPI:
    def test_get_syllabus(
        self,
        client: TestClient,
        syllabus_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        syllabus_service.get_syllabus.return_value = SyllabusResponse(
            id="syl-1",
            course_id="course-1",
            modules=[
                module_response(
                    content_items=[
                        LinkContent(
                            id="i-1",
                            type="link",
                            title="Reading",
                            description="",
                            position=0,
                            url="https://example.com/intro",
                        ),
                        VideoContent(
                            id="i-2",
                            type="video",
                            title="Lecture",
                            description="",
                            position=1,
                            video_url="https://youtube.com/watch?v=abc",
                            video_provider="youtube",
                        ),
                    ]
                )
            ],
        )

        response = client.get("/api/v1/courses/course-1/syllabus", headers=auth_headers("student"))

        assert response.status_code == 200
        body = response.json()
        assert body["courseId"] == "course-1"
        items = body["syllabus"]["modules"][0]["contentItems"]
        assert items[0] == {
            "id": "i-1",
            "title": "Reading",
            "description": "",
            "position": 0,
            "createdAt": None,
            "type": "link",
            "url": "https://example.com/intro",
        }
        assert items[1]["videoProvider"] == "youtube"

    def test_create_module(
        self,
        client: TestClient,
        syllabus_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        syllabus_service.create_module.return_value = module_response()

        response = client.post(
            "/api/v1/courses/course-1/syllabus/modules",
            json={"moduleNumber": 1, "title": "Foundations", "topics": ["variables"]},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 201
        assert response.json()["module"]["moduleNumber"] == 1
        request = syllabus_service.create_module.await_args.args[2]
        assert request.module_number == 1

    def test_module_number_must_be_positive(
        self,
        client: TestClient,
        syllabus_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = client.post(
            "/api/v1/courses/course-1/syllabus/modules",
            json={"moduleNumber": 0, "title": "Zero"},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 400
        syllabus_service.create_module.assert_not_awaited()

    def test_add_video_content(
        self,
        client: TestClient,
        syllabus_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        syllabus_service.add_content.return_value = VideoContent(
            id="i-3",
            type="video",
            title="Lecture",
            description="",
            position=0,
            video_url="https://blobs.example.com/syllabus-videos/lecture.mp4",
            video_provider="other",
            uploaded=True,
        )

        response = client.post(
            "/api/v1/courses/course-1/syllabus/modules/mod-1/content",
            data={"type": "video", "title": "Lecture"},
            files={"videoFile": ("lecture.mp4", b"\x00\x00", "video/mp4")},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 201
        assert response.json()["contentItem"]["uploaded"] is True
        kwargs = syllabus_service.add_content.await_args.kwargs
        assert kwargs["content_type"] == "video"
        assert kwargs["video_file"].filename == "lecture.mp4"
        assert kwargs["file"] is None
