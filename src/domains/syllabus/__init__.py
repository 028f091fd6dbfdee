# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Syllabus domain: course modules and their content items."""

from src.domains.syllabus.service import SyllabusService, file_kind

__all__ = ["SyllabusService", "file_kind"]
