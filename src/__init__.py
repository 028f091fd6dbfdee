"""CourseHub Backend.

Learning management backend for courses, assignments, activities,
announcements, discussions, course syllabi and video lectures.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
