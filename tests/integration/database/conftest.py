# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database-backed service tests.

Services run against a real AsyncSession on an in-memory SQLite database,
so relationship cascades, custom join conditions and repository queries
execute as SQL. Blob storage stays mocked.

SQLite has no JSONB or native UUID type; both are rendered as plain
column types there. Foreign keys are not enforced by SQLite, so every
row removal observed by these tests comes from the ORM cascades.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest_asyncio
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from src.domains.auth.current_user import CurrentUser
from src.infrastructure.database.models import Base, Course, Student, Teacher, User, new_id
from tests.helpers import make_user


@compiles(JSONB, "sqlite")
def _jsonb_on_sqlite(type_, compiler, **kw) -> str:
    return "JSON"


@compiles(UUID, "sqlite")
def _uuid_on_sqlite(type_, compiler, **kw) -> str:
    return "CHAR(32)"


@dataclass
class Roster:
    """A course with its owner, three enrolled students and one outsider."""

    course_id: str
    teacher: CurrentUser
    students: list[CurrentUser]
    outsider: CurrentUser


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with every table."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a session configured like the application's request sessions."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


def _account(caller: CurrentUser) -> User:
    return User(
        id=caller.id,
        email=f"{caller.id}@example.com",
        name=caller.user_type.title(),
        role=caller.user_type,
    )


@pytest_asyncio.fixture(scope="function")
async def roster(db_session: AsyncSession) -> Roster:
    """Persist a teacher, a course and its students."""
    teacher_user = make_user("teacher")
    student_users = [make_user("student") for _ in range(3)]
    outsider = make_user("student")

    teacher = Teacher(id=new_id(), user=_account(teacher_user))
    enrolled = [Student(id=new_id(), user=_account(u), courses=[]) for u in student_users]
    course = Course(
        id=new_id(),
        title="Algebra I",
        about="Linear equations and functions",
        teacher_id=teacher.id,
        is_active=True,
        students=enrolled,
        assignments=[],
        activities=[],
    )
    db_session.add_all(
        [teacher, course, Student(id=new_id(), user=_account(outsider), courses=[])]
    )
    await db_session.commit()

    return Roster(
        course_id=course.id, teacher=teacher_user, students=student_users, outsider=outsider
    )
