# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the CourseHub database.

Importing this package registers every table on Base.metadata, which is what
the Alembic environment uses as its target metadata.
"""

from src.infrastructure.database.models.announcement import Announcement
from src.infrastructure.database.models.base import Base, new_id
from src.infrastructure.database.models.course import Course
from src.infrastructure.database.models.discussion import (
    DELETED_COMMENT_CONTENT,
    DISCUSSION_COURSE,
    DISCUSSION_TEACHER,
    Comment,
    CommentAttachment,
    Discussion,
    DiscussionAttachment,
)
from src.infrastructure.database.models.lecture import REVIEW_PERIOD, Lecture
from src.infrastructure.database.models.submittable import (
    SUBMISSION_GRADED,
    SUBMISSION_SUBMITTED,
    Activity,
    Assignment,
    Submission,
    Submittable,
    SubmittableAttachment,
)
from src.infrastructure.database.models.syllabus import (
    CONTENT_FILE,
    CONTENT_LINK,
    CONTENT_TEXT,
    CONTENT_TYPES,
    CONTENT_VIDEO,
    VIDEO_PROVIDERS,
    ContentItem,
    Syllabus,
    SyllabusModule,
)
from src.infrastructure.database.models.user import (
    Student,
    Teacher,
    User,
    course_enrollments,
)

__all__ = [
    "Base",
    "new_id",
    # Users
    "User",
    "Teacher",
    "Student",
    "course_enrollments",
    # Courses
    "Course",
    # Submittables
    "Submittable",
    "Assignment",
    "Activity",
    "SubmittableAttachment",
    "Submission",
    "SUBMISSION_SUBMITTED",
    "SUBMISSION_GRADED",
    # Announcements
    "Announcement",
    # Discussions
    "Discussion",
    "Comment",
    "DiscussionAttachment",
    "CommentAttachment",
    "DISCUSSION_TEACHER",
    "DISCUSSION_COURSE",
    "DELETED_COMMENT_CONTENT",
    # Syllabus
    "Syllabus",
    "SyllabusModule",
    "ContentItem",
    "CONTENT_FILE",
    "CONTENT_LINK",
    "CONTENT_VIDEO",
    "CONTENT_TEXT",
    "CONTENT_TYPES",
    "VIDEO_PROVIDERS",
    # Lectures
    "Lecture",
    "REVIEW_PERIOD",
]
