# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discussion domain: teacher and course discussions with comments."""

from src.domains.discussion.service import DiscussionService

__all__ = ["DiscussionService"]
