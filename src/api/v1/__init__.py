# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    courses: Course management and enrollment endpoints.
    submittables: Assignment and activity endpoints (shared router factory).
    announcements: Course announcement endpoints.
    discussions: Teacher and course discussion endpoints with comments.
    syllabus: Course syllabus module and content endpoints.
    lectures: Video lecture endpoints of syllabus modules.
"""

from fastapi import APIRouter

from src.api.v1 import (
    announcements,
    courses,
    discussions,
    lectures,
    submittables,
    syllabus,
)

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(courses.router, tags=["Courses"])
router.include_router(submittables.assignments_router, tags=["Assignments"])
router.include_router(submittables.activities_router, tags=["Activities"])
router.include_router(announcements.router, tags=["Announcements"])
router.include_router(discussions.router, tags=["Discussions"])
router.include_router(syllabus.router, tags=["Syllabus"])
router.include_router(lectures.router, tags=["Lectures"])

__all__ = ["router"]
