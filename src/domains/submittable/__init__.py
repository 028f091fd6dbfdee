# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Submittable domain: assignments, activities and their submissions."""

from src.domains.submittable.service import (
    ACTIVITY,
    ASSIGNMENT,
    SubmittableKind,
    SubmittableService,
)

__all__ = [
    "ACTIVITY",
    "ASSIGNMENT",
    "SubmittableKind",
    "SubmittableService",
]
