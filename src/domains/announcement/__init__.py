# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Announcement domain."""

from src.domains.announcement.service import AnnouncementService

__all__ = ["AnnouncementService"]
