# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Announcement API models."""

from datetime import datetime

from src.models.common import APIModel, Envelope


class AnnouncementResponse(APIModel):
    """Announcement details."""

    id: str
    course_id: str
    title: str
    content: str
    publish_date: datetime
    image_url: str | None = None
    published_by: str
    is_active: bool
    created_at: datetime | None = None


class AnnouncementEnvelope(Envelope):
    announcement: AnnouncementResponse


class AnnouncementListEnvelope(Envelope):
    announcements: list[AnnouncementResponse]
    count: int
