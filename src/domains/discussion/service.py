# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Discussion service.

Discussions come in two types:

- teacher: a board visible to every teacher (and admins).
- course: scoped to one course, visible to its teacher and enrolled students.

Each discussion carries a two-level comment tree. Replies always hang off a
top-level comment; replying to a reply attaches the new reply to that
reply's top-level comment. Deleting a comment is a soft delete: the text is
replaced and the row (with its attachments) is kept so the thread stays
intact.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from src.core.errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from src.domains.auth.current_user import CurrentUser
from src.domains.base import EntityService
from src.infrastructure.database.models import (
    DISCUSSION_COURSE,
    DISCUSSION_TEACHER,
    Comment,
    CommentAttachment,
    Course,
    Discussion,
    DiscussionAttachment,
    new_id,
)
from src.infrastructure.storage.blob_store import UploadedFile
from src.models.discussion import CommentResponse, DiscussionResponse, ReplyResponse

logger = logging.getLogger(__name__)

DISCUSSION_PREFIX = "discussion-attachments"
COMMENT_PREFIX = "comment-attachments"


class DiscussionService(EntityService):
    """Service for discussions and their comments."""

    async def create(
        self,
        user: CurrentUser,
        *,
        title: Optional[str],
        content: Optional[str],
        discussion_type: str,
        course_id: Optional[str] = None,
        attachments: Sequence[UploadedFile] = (),
    ) -> DiscussionResponse:
        """Start a discussion.

        Args:
            user: The caller.
            title: Discussion title.
            content: Opening post.
            discussion_type: "teacher" or "course".
            course_id: Required for course discussions.
            attachments: Files to attach.

        Raises:
            ValidationError: If a field is missing or a file is rejected.
            UnauthorizedError: If a non-teacher starts a teacher discussion.
            NotFoundError: If the course does not exist.
            ForbiddenError: If the caller cannot access the course.
            UploadFailure: If an attachment cannot be stored.
        """
        self._require_text(title=title, content=content)
        if discussion_type not in (DISCUSSION_TEACHER, DISCUSSION_COURSE):
            raise ValidationError("Invalid discussion type")
        if discussion_type == DISCUSSION_COURSE and not course_id:
            raise ValidationError("Course ID is required for course discussions")
        self._validate_files(attachments, self.policies.discussion_attachment)

        async with self._unit_of_work() as uow:
            if discussion_type == DISCUSSION_TEACHER:
                await self.gate.teacher_profile(user)
                course_id = None
            else:
                await self.gate.accessible_course(user, course_id)

            blobs = await uow.upload_many(attachments, DISCUSSION_PREFIX)
            discussion = Discussion(
                id=new_id(),
                title=title.strip(),
                content=content,
                type=discussion_type,
                course_id=course_id,
                author_id=user.id,
                view_count=0,
                attachments=[
                    DiscussionAttachment(id=new_id(), **self._attachment_fields(b))
                    for b in blobs
                ],
                comments=[],
            )
            await self.repos.discussions.add(discussion)

        logger.info(
            "Created %s discussion: id=%s, course=%s, author=%s",
            discussion_type,
            discussion.id,
            course_id,
            user.id,
        )
        return DiscussionResponse.model_validate(discussion)

    async def list_teacher(self, user: CurrentUser) -> list[DiscussionResponse]:
        """List teacher discussions, newest first."""
        self._require_teacher_board(user)
        discussions = await self.repos.discussions.find_all(
            Discussion.type == DISCUSSION_TEACHER,
            order_by=Discussion.created_at.desc(),
        )
        return [DiscussionResponse.model_validate(d) for d in discussions]

    async def list_for_course(
        self, user: CurrentUser, course_id: str
    ) -> list[DiscussionResponse]:
        """List a course's discussions, newest first."""
        await self.gate.accessible_course(user, course_id)
        discussions = await self.repos.discussions.find_all(
            Discussion.type == DISCUSSION_COURSE,
            Discussion.course_id == course_id,
            order_by=Discussion.created_at.desc(),
        )
        return [DiscussionResponse.model_validate(d) for d in discussions]

    async def get(self, user: CurrentUser, discussion_id: str) -> DiscussionResponse:
        """Get a discussion and count the view."""
        async with self._unit_of_work():
            discussion = await self._readable_discussion(user, discussion_id)
            discussion.view_count += 1
        return DiscussionResponse.model_validate(discussion)

    async def search(
        self,
        user: CurrentUser,
        query: Optional[str] = None,
        discussion_type: Optional[str] = None,
        course_id: Optional[str] = None,
    ) -> list[DiscussionResponse]:
        """Search discussions the caller can see by title or content.

        Returns:
            At most 20 matches, newest first.
        """
        if discussion_type and discussion_type not in (DISCUSSION_TEACHER, DISCUSSION_COURSE):
            raise ValidationError("Invalid discussion type")

        if course_id:
            await self.gate.accessible_course(user, course_id)
            course_ids: Optional[list[str]] = [course_id]
            include_teacher = False
        elif user.is_admin:
            course_ids, include_teacher = None, True
        else:
            course_ids = await self._visible_course_ids(user)
            include_teacher = user.is_teacher

        discussions = await self.repos.discussions.search(
            query=query.strip() if query else None,
            discussion_type=discussion_type,
            course_ids=course_ids,
            include_teacher=include_teacher,
        )
        return [DiscussionResponse.model_validate(d) for d in discussions]

    async def update(
        self,
        user: CurrentUser,
        discussion_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        attachments: Sequence[UploadedFile] = (),
        remove_attachment_ids: Sequence[str] = (),
    ) -> DiscussionResponse:
        """Edit a discussion. Only its author may do so.

        Raises:
            NotFoundError: If the discussion does not exist.
            ForbiddenError: If the caller is not the author.
        """
        if title is not None:
            self._require_text(title=title)
        if content is not None:
            self._require_text(content=content)
        self._validate_files(attachments, self.policies.discussion_attachment)

        async with self._unit_of_work() as uow:
            discussion = await self._get_discussion(discussion_id)
            if discussion.author_id != user.id:
                raise ForbiddenError("Only the author can edit this discussion")

            changed = self._apply_changes(
                discussion, title=title.strip() if title else None, content=content
            )

            removed = [a for a in discussion.attachments if a.id in set(remove_attachment_ids)]
            for attachment in removed:
                discussion.attachments.remove(attachment)
                uow.discard_blob_on_commit(attachment.key)

            blobs = await uow.upload_many(attachments, DISCUSSION_PREFIX)
            discussion.attachments.extend(
                DiscussionAttachment(id=new_id(), **self._attachment_fields(b)) for b in blobs
            )

        logger.info(
            "Updated discussion: id=%s, fields=%s, added=%d, removed=%d",
            discussion_id,
            changed,
            len(blobs),
            len(removed),
        )
        return DiscussionResponse.model_validate(discussion)

    async def delete(self, user: CurrentUser, discussion_id: str) -> None:
        """Delete a discussion with every comment and attachment.

        Only the author or an admin may delete. Attachment blobs of the
        discussion and of all its comments are deleted best-effort.
        """
        async with self._unit_of_work() as uow:
            discussion = await self._get_discussion(discussion_id)
            if discussion.author_id != user.id and not user.is_admin:
                raise ForbiddenError("Only the author can delete this discussion")

            keys = [a.key for a in discussion.attachments]
            keys += [a.key for c in discussion.all_comments() for a in c.attachments]
            for key in keys:
                await uow.discard_blob(key)

            await self.repos.discussions.delete(discussion)

        logger.info("Deleted discussion: id=%s, blobs=%d", discussion_id, len(keys))

    async def add_comment(
        self,
        user: CurrentUser,
        discussion_id: str,
        content: Optional[str],
        attachments: Sequence[UploadedFile] = (),
    ) -> CommentResponse:
        """Add a top-level comment to a discussion the caller can read."""
        self._require_text(content=content)
        self._validate_files(attachments, self.policies.discussion_attachment)

        async with self._unit_of_work() as uow:
            discussion = await self._readable_discussion(user, discussion_id)
            comment = await self._new_comment(uow, discussion, user, content, attachments)
            discussion.comments.append(comment)

        logger.info("Added comment: discussion=%s, comment=%s", discussion_id, comment.id)
        return CommentResponse.model_validate(comment)

    async def add_reply(
        self,
        user: CurrentUser,
        discussion_id: str,
        comment_id: str,
        content: Optional[str],
        attachments: Sequence[UploadedFile] = (),
    ) -> ReplyResponse:
        """Reply to a comment.

        Replying to a reply attaches the new reply to the top-level comment
        of that reply, so threads never nest deeper than two levels.
        """
        self._require_text(content=content)
        self._validate_files(attachments, self.policies.discussion_attachment)

        async with self._unit_of_work() as uow:
            discussion = await self._readable_discussion(user, discussion_id)
            target = self._get_comment(discussion, comment_id)
            parent = target
            if target.parent_id is not None:
                parent = next(c for c in discussion.comments if c.id == target.parent_id)

            reply = await self._new_comment(
                uow, discussion, user, content, attachments, parent_id=parent.id
            )
            parent.replies.append(reply)

        logger.info(
            "Added reply: discussion=%s, comment=%s, reply=%s",
            discussion_id,
            parent.id,
            reply.id,
        )
        return ReplyResponse.model_validate(reply)

    async def update_comment(
        self,
        user: CurrentUser,
        discussion_id: str,
        comment_id: str,
        content: Optional[str],
    ) -> ReplyResponse:
        """Edit a comment or reply. Only its author may do so."""
        self._require_text(content=content)

        async with self._unit_of_work():
            discussion = await self._get_discussion(discussion_id)
            comment = self._get_comment(discussion, comment_id)
            if comment.author_id != user.id:
                raise ForbiddenError("Only the author can edit this comment")
            if comment.is_deleted:
                raise ValidationError("Cannot edit a deleted comment")
            comment.content = content

        logger.info("Updated comment: discussion=%s, comment=%s", discussion_id, comment_id)
        return ReplyResponse.model_validate(comment)

    async def delete_comment(
        self, user: CurrentUser, discussion_id: str, comment_id: str
    ) -> ReplyResponse:
        """Soft-delete a comment or reply.

        Allowed for the comment's author, the discussion's author and admins.
        Attachments are kept.
        """
        async with self._unit_of_work():
            discussion = await self._get_discussion(discussion_id)
            comment = self._get_comment(discussion, comment_id)
            if user.id not in (comment.author_id, discussion.author_id) and not user.is_admin:
                raise ForbiddenError("You are not authorized to delete this comment")
            comment.soft_delete()

        logger.info("Deleted comment: discussion=%s, comment=%s", discussion_id, comment_id)
        return ReplyResponse.model_validate(comment)

    async def _get_discussion(self, discussion_id: str) -> Discussion:
        discussion = await self.repos.discussions.get(discussion_id)
        if discussion is None:
            raise NotFoundError("Discussion not found")
        return discussion

    @staticmethod
    def _get_comment(discussion: Discussion, comment_id: str) -> Comment:
        comment = discussion.find_comment(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def _readable_discussion(self, user: CurrentUser, discussion_id: str) -> Discussion:
        discussion = await self._get_discussion(discussion_id)
        if discussion.type == DISCUSSION_TEACHER:
            self._require_teacher_board(user)
        else:
            await self.gate.accessible_course(user, discussion.course_id)
        return discussion

    @staticmethod
    def _require_teacher_board(user: CurrentUser) -> None:
        if not (user.is_teacher or user.is_admin):
            raise UnauthorizedError("Teacher access required")

    async def _visible_course_ids(self, user: CurrentUser) -> list[str]:
        course_ids: list[str] = []
        if user.is_teacher:
            teacher = await self.gate.teacher_profile(user)
            owned = await self.repos.courses.find_all(Course.teacher_id == teacher.id)
            course_ids.extend(c.id for c in owned)
        if user.is_student:
            student = await self.gate.student_profile(user)
            course_ids.extend(c.id for c in student.courses)
        return course_ids

    async def _new_comment(
        self,
        uow,
        discussion: Discussion,
        user: CurrentUser,
        content: str,
        attachments: Sequence[UploadedFile],
        parent_id: Optional[str] = None,
    ) -> Comment:
        blobs = await uow.upload_many(attachments, COMMENT_PREFIX)
        return Comment(
            id=new_id(),
            discussion_id=discussion.id,
            parent_id=parent_id,
            author_id=user.id,
            content=content,
            is_deleted=False,
            attachments=[
                CommentAttachment(id=new_id(), **self._attachment_fields(b)) for b in blobs
            ],
            replies=[],
        )
