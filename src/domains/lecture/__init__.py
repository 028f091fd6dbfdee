# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lecture domain: video lectures of syllabus modules."""

from src.domains.lecture.service import LectureService, lecture_prefix

__all__ = ["LectureService", "lecture_prefix"]
