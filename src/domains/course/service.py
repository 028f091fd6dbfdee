# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service.

This module provides the CourseService class for:
- Course creation and updates by the owning teacher
- Course listing for teachers (owned) and students (enrolled)
- Student enrollment management
"""

from __future__ import annotations

import logging

from src.core.errors import NotFoundError, ValidationError
from src.domains.auth.current_user import CurrentUser
from src.domains.base import EntityService
from src.infrastructure.database.models import Course, Student, new_id
from src.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
)

logger = logging.getLogger(__name__)


class CourseService(EntityService):
    """Service for managing courses and enrollments."""

    async def create_course(
        self, user: CurrentUser, request: CourseCreateRequest
    ) -> CourseResponse:
        """Create a course owned by the calling teacher.

        Args:
            user: The caller.
            request: Course details.

        Returns:
            The created course.

        Raises:
            UnauthorizedError: If the caller has no teacher profile.
            ValidationError: If the title is blank.
        """
        self._require_text(title=request.title)

        async with self._unit_of_work():
            teacher = await self.gate.teacher_profile(user)
            course = Course(
                id=new_id(),
                title=request.title.strip(),
                about=request.about,
                teacher_id=teacher.id,
                is_active=True,
                students=[],
                assignments=[],
                activities=[],
            )
            await self.repos.courses.add(course)

        logger.info("Created course: course=%s, teacher=%s", course.id, teacher.id)
        return self._to_response(course)

    async def list_courses(self, user: CurrentUser) -> list[CourseResponse]:
        """List the caller's courses.

        Teachers see the courses they own; students see the courses they are
        enrolled in. A user with both roles sees both sets.
        """
        courses: dict[str, Course] = {}

        if user.is_teacher:
            teacher = await self.gate.teacher_profile(user)
            for course in await self.repos.courses.find_all(
                Course.teacher_id == teacher.id, order_by=Course.created_at.desc()
            ):
                courses[course.id] = course

        if user.is_student:
            student = await self.gate.student_profile(user)
            for course in student.courses:
                courses.setdefault(course.id, course)

        if not (user.is_teacher or user.is_student):
            if not user.is_admin:
                return []
            return [
                self._to_response(c)
                for c in await self.repos.courses.find_all(order_by=Course.created_at.desc())
            ]

        return [self._to_response(c) for c in courses.values()]

    async def get_course(self, user: CurrentUser, course_id: str) -> CourseResponse:
        """Get a course the caller owns or is enrolled in.

        Raises:
            NotFoundError: If the course does not exist.
            ForbiddenError: If the caller has no relation to the course.
        """
        access = await self.gate.accessible_course(user, course_id)
        return self._to_response(access.course)

    async def update_course(
        self, user: CurrentUser, course_id: str, request: CourseUpdateRequest
    ) -> CourseResponse:
        """Update a course owned by the caller.

        Raises:
            NotFoundError: If the course does not exist.
            ForbiddenError: If the caller does not own the course.
        """
        async with self._unit_of_work():
            course, _ = await self.gate.owned_course(user, course_id)
            changed = self._apply_changes(
                course,
                title=request.title,
                about=request.about,
                is_active=request.is_active,
            )

        logger.info("Updated course: course=%s, fields=%s", course_id, changed)
        return self._to_response(course)

    async def enroll_student(
        self, user: CurrentUser, course_id: str, student_id: str
    ) -> CourseResponse:
        """Enroll a student in a course owned by the caller.

        Enrolling an already enrolled student is a no-op.

        Raises:
            NotFoundError: If the course or student does not exist.
            ForbiddenError: If the caller does not own the course.
        """
        async with self._unit_of_work():
            course, _ = await self.gate.owned_course(user, course_id)
            student = await self._get_student(student_id)
            if not student.is_enrolled_in(course.id):
                course.students.append(student)
                logger.info("Enrolled student: course=%s, student=%s", course.id, student.id)

        return self._to_response(course)

    async def unenroll_student(
        self, user: CurrentUser, course_id: str, student_id: str
    ) -> CourseResponse:
        """Remove a student from a course owned by the caller.

        Raises:
            NotFoundError: If the course does not exist.
            ValidationError: If the student is not enrolled.
            ForbiddenError: If the caller does not own the course.
        """
        async with self._unit_of_work():
            course, _ = await self.gate.owned_course(user, course_id)
            enrolled = next((s for s in course.students if s.id == student_id), None)
            if enrolled is None:
                raise ValidationError("Student is not enrolled in this course")
            course.students.remove(enrolled)

        logger.info("Unenrolled student: course=%s, student=%s", course_id, student_id)
        return self._to_response(course)

    async def _get_student(self, student_id: str) -> Student:
        student = await self.repos.students.get(student_id)
        if student is None:
            raise NotFoundError("Student not found")
        return student

    @staticmethod
    def _to_response(course: Course) -> CourseResponse:
        return CourseResponse(
            id=course.id,
            title=course.title,
            about=course.about,
            teacher_id=course.teacher_id,
            is_active=course.is_active,
            student_ids=[s.id for s in course.students],
            assignment_ids=[a.id for a in course.assignments],
            activity_ids=[a.id for a in course.activities],
            created_at=course.created_at,
        )
