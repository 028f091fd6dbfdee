# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the CourseHub PostgreSQL database.

Example:
    from src.infrastructure.database import DatabaseManager, Repositories, UnitOfWork

    manager = DatabaseManager(settings)
    await manager.init()

    async with manager.session() as session:
        repos = Repositories(session)
        async with UnitOfWork(session, blob_store):
            course = await repos.courses.get(course_id)
            course.title = "Updated"
"""

from src.infrastructure.database.connection import DatabaseError, DatabaseManager
from src.infrastructure.database.repositories import (
    DiscussionRepository,
    Repositories,
    Repository,
)
from src.infrastructure.database.unit_of_work import UnitOfWork

__all__ = [
    "DatabaseError",
    "DatabaseManager",
    "Repository",
    "DiscussionRepository",
    "Repositories",
    "UnitOfWork",
]
