# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

This module provides endpoints for course management:
- POST /courses - Create a course (teacher)
- GET /courses - List the caller's courses
- GET /courses/{course_id} - Get course details
- PATCH /courses/{course_id} - Update a course (owner)

Enrollment endpoints:
- POST /courses/{course_id}/students - Enroll a student (owner)
- DELETE /courses/{course_id}/students/{student_id} - Unenroll a student (owner)
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import AuthenticatedUser, Courses, TeacherUser
from src.models.course import (
    CourseCreateRequest,
    CourseEnvelope,
    CourseListEnvelope,
    CourseUpdateRequest,
    EnrollRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/courses",
    response_model=CourseEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
)
async def create_course(
    data: CourseCreateRequest,
    current_user: TeacherUser,
    service: Courses,
) -> CourseEnvelope:
    """Create a course owned by the calling teacher."""
    course = await service.create_course(current_user, data)
    return CourseEnvelope(message="Course created successfully", course=course)


@router.get("/courses", response_model=CourseListEnvelope, summary="List courses")
async def list_courses(current_user: AuthenticatedUser, service: Courses) -> CourseListEnvelope:
    """List owned courses (teachers) or enrolled courses (students)."""
    courses = await service.list_courses(current_user)
    return CourseListEnvelope(courses=courses, count=len(courses))


@router.get("/courses/{course_id}", response_model=CourseEnvelope, summary="Get course")
async def get_course(
    course_id: str, current_user: AuthenticatedUser, service: Courses
) -> CourseEnvelope:
    """Get a course the caller owns or is enrolled in."""
    return CourseEnvelope(course=await service.get_course(current_user, course_id))


@router.patch("/courses/{course_id}", response_model=CourseEnvelope, summary="Update course")
async def update_course(
    course_id: str,
    data: CourseUpdateRequest,
    current_user: TeacherUser,
    service: Courses,
) -> CourseEnvelope:
    """Update a course owned by the caller."""
    course = await service.update_course(current_user, course_id, data)
    return CourseEnvelope(message="Course updated successfully", course=course)


@router.post(
    "/courses/{course_id}/students",
    response_model=CourseEnvelope,
    summary="Enroll student",
)
async def enroll_student(
    course_id: str,
    data: EnrollRequest,
    current_user: TeacherUser,
    service: Courses,
) -> CourseEnvelope:
    """Enroll a student in a course owned by the caller."""
    course = await service.enroll_student(current_user, course_id, data.student_id)
    return CourseEnvelope(message="Student enrolled successfully", course=course)


@router.delete(
    "/courses/{course_id}/students/{student_id}",
    response_model=CourseEnvelope,
    summary="Unenroll student",
)
async def unenroll_student(
    course_id: str,
    student_id: str,
    current_user: TeacherUser,
    service: Courses,
) -> CourseEnvelope:
    """Remove a student from a course owned by the caller."""
    course = await service.unenroll_student(current_user, course_id, student_id)
    return CourseEnvelope(message="Student removed from course", course=course)
