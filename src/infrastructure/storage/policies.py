# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Upload policies: allowed MIME types and size limits per file family.

Policies are checked by the domain services before any upload is attempted,
so a rejected file never reaches blob storage.

Example:
    policies = UploadPolicies.from_settings(settings.uploads)
    policies.submission.validate([file])
"""

from collections.abc import Sequence
from dataclasses import dataclass

from src.core.config.settings import UploadSettings
from src.core.errors import ValidationError
from src.infrastructure.storage.blob_store import UploadedFile

PDF = "application/pdf"
MSWORD = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLS = "application/vnd.ms-excel"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PPT = "application/vnd.ms-powerpoint"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
ZIP = "application/zip"
ZIP_COMPRESSED = "application/x-zip-compressed"
JPEG = "image/jpeg"
JPG = "image/jpg"
PNG = "image/png"
GIF = "image/gif"
WEBP = "image/webp"
MP4 = "video/mp4"
WEBM = "video/webm"
OGG = "video/ogg"
QUICKTIME = "video/quicktime"
AVI = "video/x-msvideo"
MATROSKA = "video/x-matroska"
MPEG = "video/mpeg"

ATTACHMENT_TYPES = frozenset({PDF, JPEG, PNG, JPG, MSWORD, DOCX, XLS, XLSX})
SUBMISSION_TYPES = frozenset({PDF, MSWORD, DOCX, JPEG, PNG, ZIP, ZIP_COMPRESSED})
ANNOUNCEMENT_IMAGE_TYPES = frozenset({JPEG, PNG, JPG, GIF, WEBP})
SYLLABUS_FILE_TYPES = frozenset({PDF, PPT, PPTX, MSWORD, DOCX, JPEG, PNG, GIF})
SYLLABUS_VIDEO_TYPES = frozenset({MP4, WEBM, OGG})
LECTURE_VIDEO_TYPES = frozenset({MP4, WEBM, OGG, QUICKTIME, AVI, MATROSKA, MPEG})


@dataclass(frozen=True)
class UploadPolicy:
    """Constraints applied to one family of uploaded files.

    Attributes:
        name: Family name used in log messages.
        allowed_types: Accepted MIME types, or None to accept any type.
        max_bytes: Maximum size of a single file.
    """

    name: str
    allowed_types: frozenset[str] | None
    max_bytes: int

    @property
    def max_megabytes(self) -> int:
        return self.max_bytes // (1024 * 1024)

    def validate(self, files: Sequence[UploadedFile]) -> None:
        """Reject files with a disallowed MIME type or an oversize payload.

        Raises:
            ValidationError: On the first offending file.
        """
        for file in files:
            if self.allowed_types is not None and file.content_type not in self.allowed_types:
                allowed = ", ".join(sorted(self.allowed_types))
                raise ValidationError(f"Invalid file type. Allowed types: {allowed}")
            if file.size > self.max_bytes:
                raise ValidationError(
                    f"File too large. Maximum size allowed is {self.max_megabytes}MB"
                )


@dataclass(frozen=True)
class UploadPolicies:
    """The full set of upload policies used by the domain services."""

    attachment: UploadPolicy
    submission: UploadPolicy
    announcement_image: UploadPolicy
    discussion_attachment: UploadPolicy
    syllabus_file: UploadPolicy
    syllabus_video: UploadPolicy
    lecture_video: UploadPolicy
    max_files: int

    @classmethod
    def from_settings(cls, settings: UploadSettings) -> "UploadPolicies":
        """Build policies using the size limits from settings."""
        return cls(
            attachment=UploadPolicy(
                "attachment", ATTACHMENT_TYPES, settings.max_attachment_bytes
            ),
            submission=UploadPolicy(
                "submission", SUBMISSION_TYPES, settings.max_submission_bytes
            ),
            announcement_image=UploadPolicy(
                "announcement-image", ANNOUNCEMENT_IMAGE_TYPES, settings.max_attachment_bytes
            ),
            discussion_attachment=UploadPolicy(
                "discussion-attachment", None, settings.max_attachment_bytes
            ),
            syllabus_file=UploadPolicy(
                "syllabus-file", SYLLABUS_FILE_TYPES, settings.max_syllabus_bytes
            ),
            syllabus_video=UploadPolicy(
                "syllabus-video", SYLLABUS_VIDEO_TYPES, settings.max_syllabus_bytes
            ),
            lecture_video=UploadPolicy(
                "lecture-video", LECTURE_VIDEO_TYPES, settings.max_lecture_video_bytes
            ),
            max_files=settings.max_files_per_request,
        )


def default_policies() -> UploadPolicies:
    """Policies with the limits from the current environment."""
    return UploadPolicies.from_settings(UploadSettings())
