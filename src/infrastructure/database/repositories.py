# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Repositories over the CourseHub models.

Repositories only read and stage writes on the session they were built
with. They never commit: committing (and rolling back) is the job of the
UnitOfWork wrapping the operation.

Example:
    repos = Repositories(session)
    course = await repos.courses.get(course_id)
    assignments = await repos.assignments.find_all(
        Assignment.course_id == course_id,
        order_by=Assignment.due_date,
    )
"""

import logging
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from src.infrastructure.database.models import (
    Activity,
    Announcement,
    Assignment,
    Base,
    Course,
    Discussion,
    Student,
    Syllabus,
    Teacher,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

SEARCH_LIMIT = 20


class Repository(Generic[ModelT]):
    """Generic async repository for one model class.

    Attributes:
        session: Session all reads and writes go through.
        model: Mapped class this repository serves.
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    async def get(self, entity_id: str) -> Optional[ModelT]:
        """Get an entity by primary key, or None."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        return result.scalar_one_or_none()

    async def find_one(self, *criteria: ColumnElement[bool]) -> Optional[ModelT]:
        """Get the first entity matching all criteria, or None."""
        result = await self.session.execute(select(self.model).where(*criteria).limit(1))
        return result.scalars().first()

    async def find_all(
        self,
        *criteria: ColumnElement[bool],
        order_by: Any = None,
        limit: Optional[int] = None,
    ) -> list[ModelT]:
        """Get every entity matching all criteria."""
        stmt = select(self.model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, entity: ModelT) -> ModelT:
        """Stage a new entity and flush so its defaults are populated."""
        self.session.add(entity)
        await self.session.flush()
        logger.debug("Staged %s: %s", self.model.__name__, entity.id)
        return entity

    async def delete(self, entity: ModelT) -> None:
        """Stage deletion of an entity."""
        await self.session.delete(entity)
        logger.debug("Staged delete of %s: %s", self.model.__name__, entity.id)


class DiscussionRepository(Repository[Discussion]):
    """Discussion queries beyond plain lookups."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Discussion)

    async def search(
        self,
        query: Optional[str] = None,
        discussion_type: Optional[str] = None,
        course_ids: Optional[list[str]] = None,
        include_teacher: bool = False,
        limit: int = SEARCH_LIMIT,
    ) -> list[Discussion]:
        """Case-insensitive search over title and content.

        Args:
            query: Text to look for; matches everything when empty.
            discussion_type: Restrict to "teacher" or "course" discussions.
            course_ids: Course discussions the caller may see. None means
                no restriction (admin).
            include_teacher: Whether teacher-only discussions are visible.
            limit: Maximum number of results.

        Returns:
            Matching discussions, newest first.
        """
        stmt = select(Discussion)

        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(Discussion.title.ilike(pattern), Discussion.content.ilike(pattern))
            )
        if discussion_type:
            stmt = stmt.where(Discussion.type == discussion_type)
        if course_ids is not None:
            visible = Discussion.course_id.in_(course_ids)
            if include_teacher:
                visible = or_(visible, Discussion.type == "teacher")
            stmt = stmt.where(visible)

        stmt = stmt.order_by(Discussion.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class Repositories:
    """Every repository bound to one session.

    Built once per unit of work so all reads and writes of an operation
    share the same transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.teachers = Repository(session, Teacher)
        self.students = Repository(session, Student)
        self.courses = Repository(session, Course)
        self.assignments = Repository(session, Assignment)
        self.activities = Repository(session, Activity)
        self.announcements = Repository(session, Announcement)
        self.discussions = DiscussionRepository(session)
        self.syllabi = Repository(session, Syllabus)
