# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for Lecture API endpoints."""

from datetime import datetime, timezone
from typing import Callable
from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.errors import NotFoundError, ValidationError
from src.models.lecture import LectureResponse, ModuleLecturesResponse

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
BASE = "/api/v1/courses/course-1/syllabus"


def lecture_response(**overrides) -> LectureResponse:
    fields = {
        "id": "lec-1",
        "module_id": "mod-1",
        "title": "Variables",
        "content": "",
        "video_url": "https://blobs.example.com/lectures/course-1/module-mod-1/intro.mp4",
        "lecture_order": 1,
        "is_reviewed": False,
        "review_deadline": NOW,
        "is_active": True,
    }
    fields.update(overrides)
    return LectureResponse(**fields)


class TestLecturesAPIRouting:
    def test_routes_registered(self, app: FastAPI) -> None:
        routes = app.openapi()["paths"]

        assert "/api/v1/courses/{course_id}/syllabus/lectures" in routes
        assert "/api/v1/courses/{course_id}/syllabus/modules/{module_id}/lectures" in routes
        assert (
            "/api/v1/courses/{course_id}/syllabus/modules/{module_id}/lectures/reorder" in routes
        )
        assert (
            "/api/v1/courses/{course_id}/syllabus/modules/{module_id}/lectures/{lecture_id}"
            in routes
        )


class TestLecturesAPI:
    def test_create_lecture(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        lecture_service.create_lecture.return_value = lecture_response()

        response = client.post(
            f"{BASE}/modules/mod-1/lectures",
            data={"title": "Variables", "reviewDeadline": "2025-03-17T12:00:00Z"},
            files={"video": ("intro.mp4", b"\x00\x00", "video/mp4")},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Lecture created successfully"
        assert body["lecture"]["lectureOrder"] == 1
        assert body["lecture"]["isReviewed"] is False
        kwargs = lecture_service.create_lecture.await_args.kwargs
        assert kwargs["title"] == "Variables"
        assert kwargs["video"].filename == "intro.mp4"
        assert kwargs["review_deadline"] == datetime(2025, 3, 17, 12, 0, tzinfo=timezone.utc)

    def test_create_without_video(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        lecture_service.create_lecture.side_effect = ValidationError("Video file is required")

        response = client.post(
            f"{BASE}/modules/mod-1/lectures",
            data={"title": "Variables"},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Video file is required"}
        assert lecture_service.create_lecture.await_args.kwargs["video"] is None

    def test_student_cannot_create(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = client.post(
            f"{BASE}/modules/mod-1/lectures",
            data={"title": "Variables"},
            headers=auth_headers("student"),
        )

        assert response.status_code == 403
        lecture_service.create_lecture.assert_not_awaited()

    def test_list_module_lectures(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        lecture_service.list_module_lectures.return_value = [
            lecture_response(),
            lecture_response(id="lec-2", title="Loops", lecture_order=2),
        ]

        response = client.get(f"{BASE}/modules/mod-1/lectures", headers=auth_headers("student"))

        assert response.status_code == 200
        body = response.json()
        assert body["moduleId"] == "mod-1"
        assert [lecture["title"] for lecture in body["lectures"]] == ["Variables", "Loops"]

    def test_course_modules_with_lectures(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        lecture_service.list_course_lectures.return_value = [
            ModuleLecturesResponse(
                id="mod-1",
                module_number=1,
                title="Foundations",
                description="",
                is_active=True,
                lectures=[lecture_response()],
                lecture_count=1,
            )
        ]

        response = client.get(f"{BASE}/lectures", headers=auth_headers("teacher"))

        assert response.status_code == 200
        module = response.json()["modules"][0]
        assert module["lectureCount"] == 1
        assert module["lectures"][0]["id"] == "lec-1"

    def test_get_missing_lecture(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        lecture_service.get_lecture.side_effect = NotFoundError("Lecture not found")

        response = client.get(
            f"{BASE}/modules/mod-1/lectures/lec-9", headers=auth_headers("student")
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Lecture not found"
        assert lecture_service.get_lecture.await_args.args[1:] == ("course-1", "mod-1", "lec-9")

    def test_update_lecture_with_new_video(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        lecture_service.update_lecture.return_value = lecture_response(lecture_order=3)

        response = client.patch(
            f"{BASE}/modules/mod-1/lectures/lec-1",
            data={"lectureOrder": "3", "isActive": "false"},
            files={"video": ("take2.mp4", b"\x00\x01", "video/mp4")},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Lecture updated successfully"
        kwargs = lecture_service.update_lecture.await_args.kwargs
        assert kwargs["lecture_order"] == 3
        assert kwargs["is_active"] is False
        assert kwargs["video"].filename == "take2.mp4"
        assert kwargs["title"] is None

    def test_reorder(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        lecture_service.reorder_lectures.return_value = [
            lecture_response(id="lec-2", lecture_order=1),
            lecture_response(id="lec-1", lecture_order=2),
        ]

        response = client.put(
            f"{BASE}/modules/mod-1/lectures/reorder",
            json={
                "lectureOrders": [
                    {"lectureId": "lec-1", "order": 2},
                    {"lectureId": "lec-2", "order": 1},
                ]
            },
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Lecture order updated successfully"
        orders = lecture_service.reorder_lectures.await_args.args[3]
        assert [(o.lecture_id, o.order) for o in orders] == [("lec-1", 2), ("lec-2", 1)]

    def test_reorder_requires_orders(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = client.put(
            f"{BASE}/modules/mod-1/lectures/reorder",
            json={"lectureOrders": []},
            headers=auth_headers("teacher"),
        )

        assert response.status_code == 400
        lecture_service.reorder_lectures.assert_not_awaited()

    def test_delete_lecture(
        self,
        client: TestClient,
        lecture_service: AsyncMock,
        auth_headers: Callable[..., dict[str, str]],
    ) -> None:
        response = client.delete(
            f"{BASE}/modules/mod-1/lectures/lec-1", headers=auth_headers("teacher")
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Lecture deleted successfully"}
        lecture_service.delete_lecture.assert_awaited_once()
