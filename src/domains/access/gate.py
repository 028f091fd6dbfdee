# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authorization gate for course-scoped operations.

Resolves the caller's role profile (teacher or student) from the caller
identity and checks ownership or enrollment before a write or a scoped
read is allowed.

Failures:
    UnauthorizedError: The caller lacks the role or its role profile.
    ForbiddenError: The profile exists but lacks the required relation.
    NotFoundError: The referenced course does not exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from src.domains.auth.current_user import CurrentUser
from src.infrastructure.database.models import Course, Student, Teacher
from src.infrastructure.database.repositories import Repositories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseAccess:
    """Outcome of a course access check.

    Exactly one of teacher/student is set unless the caller is an admin.
    """

    course: Course
    teacher: Optional[Teacher] = None
    student: Optional[Student] = None


class AccessGate:
    """Role-profile resolution and course relation checks."""

    def __init__(self, repositories: Repositories) -> None:
        self._repos = repositories

    async def teacher_profile(self, user: CurrentUser) -> Teacher:
        """Resolve the teacher profile of the caller.

        Raises:
            UnauthorizedError: If the caller is not a teacher or has no profile.
        """
        if not user.is_teacher:
            raise UnauthorizedError("Teacher access required")
        teacher = await self._repos.teachers.find_one(Teacher.user_id == user.id)
        if teacher is None:
            raise UnauthorizedError("Teacher profile not found")
        return teacher

    async def student_profile(self, user: CurrentUser) -> Student:
        """Resolve the student profile of the caller.

        Raises:
            UnauthorizedError: If the caller is not a student or has no profile.
        """
        if not user.is_student:
            raise UnauthorizedError("Student access required")
        student = await self._repos.students.find_one(Student.user_id == user.id)
        if student is None:
            raise UnauthorizedError("Student profile not found")
        return student

    async def require_course(self, course_id: str) -> Course:
        """Load a course.

        Raises:
            NotFoundError: If the course does not exist.
        """
        course = await self._repos.courses.get(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return course

    @staticmethod
    def require_course_owner(course: Course, teacher: Teacher) -> None:
        """Raises ForbiddenError unless the teacher owns the course."""
        if course.teacher_id != teacher.id:
            logger.info(
                "Ownership check failed: course=%s, teacher=%s", course.id, teacher.id
            )
            raise ForbiddenError("You are not authorized to manage this course")

    @staticmethod
    def require_enrollment(course: Course, student: Student) -> None:
        """Raises ForbiddenError unless the student is enrolled in the course."""
        if not student.is_enrolled_in(course.id):
            logger.info(
                "Enrollment check failed: course=%s, student=%s", course.id, student.id
            )
            raise ForbiddenError("You are not enrolled in this course")

    async def owned_course(self, user: CurrentUser, course_id: str) -> tuple[Course, Teacher]:
        """Resolve the caller's teacher profile and a course they own."""
        teacher = await self.teacher_profile(user)
        course = await self.require_course(course_id)
        self.require_course_owner(course, teacher)
        return course, teacher

    async def course_access(self, user: CurrentUser, course: Course) -> CourseAccess:
        """Check read access to a course.

        Admins always pass. Teachers must own the course; students must be
        enrolled. A user holding both roles passes if either relation holds.

        Raises:
            UnauthorizedError: If the caller is neither teacher, student nor admin.
            ForbiddenError: If no relation to the course holds.
        """
        if user.is_admin:
            return CourseAccess(course=course)

        if not (user.is_teacher or user.is_student):
            raise UnauthorizedError("Teacher or student access required")

        denied: Optional[ForbiddenError] = None

        if user.is_teacher:
            teacher = await self.teacher_profile(user)
            try:
                self.require_course_owner(course, teacher)
                return CourseAccess(course=course, teacher=teacher)
            except ForbiddenError as e:
                denied = e

        if user.is_student:
            student = await self.student_profile(user)
            self.require_enrollment(course, student)
            return CourseAccess(course=course, student=student)

        raise denied or ForbiddenError("You do not have access to this course")

    async def accessible_course(self, user: CurrentUser, course_id: str) -> CourseAccess:
        """Load a course and check read access to it."""
        course = await self.require_course(course_id)
        return await self.course_access(user, course)
