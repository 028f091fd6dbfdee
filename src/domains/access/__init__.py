# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authorization gate for course-scoped operations."""

from src.domains.access.gate import AccessGate, CourseAccess

__all__ = ["AccessGate", "CourseAccess"]
