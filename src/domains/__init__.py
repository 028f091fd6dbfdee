# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for CourseHub.

This package contains domain services that encapsulate business logic.
Each domain module provides a service that checks access, validates
input and persists changes through a unit of work.

Domains:
    access: Role and membership checks shared by all services.
    auth: JWT tokens and the current user.
    course: Courses and enrollment.
    submittable: Assignments, activities, submissions and grading.
    announcement: Course announcements.
    discussion: Discussions, comments and replies.
    syllabus: Syllabus modules and their content items.
    lecture: Video lectures of syllabus modules.
"""
