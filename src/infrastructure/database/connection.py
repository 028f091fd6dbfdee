# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database connection management using SQLAlchemy async.

Uses SQLAlchemy 2.0 async API with the asyncpg driver. A single
DatabaseManager is created by the application lifespan and shared through
app.state; nothing here is a module-level singleton.

Example:
    manager = DatabaseManager(settings)
    await manager.init()

    async with manager.session() as session:
        result = await session.execute(select(Course))
        courses = result.scalars().all()

    await manager.close()
"""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class DatabaseManager:
    """Owns the async engine and session factory for the LMS database.

    Sessions handed out by session() are not committed automatically:
    writes are committed by a UnitOfWork, and anything left pending when
    the session scope ends is rolled back.
    """

    def __init__(self, settings: "Settings") -> None:
        """Initialize the manager without connecting.

        Args:
            settings: Application settings containing database configuration.
        """
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    async def init(self) -> None:
        """Create the connection pool.

        Raises:
            DatabaseError: If connection pool creation fails.
        """
        try:
            self._engine = create_async_engine(
                self._settings.db.url,
                pool_size=self._settings.db.pool_size,
                max_overflow=self._settings.db.max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
                echo=self._settings.debug and self._settings.log_level == "DEBUG",
            )
            self._sessionmaker = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to initialize database connection", e) from e

        logger.info(
            "Database pool created: host=%s, database=%s",
            self._settings.db.host,
            self._settings.db.database,
        )

    async def close(self) -> None:
        """Dispose of the connection pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    @property
    def engine(self) -> AsyncEngine:
        """The async engine.

        Raises:
            DatabaseError: If the manager has not been initialized.
        """
        if self._engine is None:
            raise DatabaseError("Database not initialized. Call init() first.")
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session scoped to one logical operation.

        The session is closed exactly once when the scope exits. Any
        transaction still open at that point is rolled back.

        Yields:
            AsyncSession for database operations.

        Raises:
            DatabaseError: If the manager is not initialized or a database
                operation fails outside a unit of work.
        """
        if self._sessionmaker is None:
            raise DatabaseError("Database not initialized. Call init() first.")

        async with self._sessionmaker() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await session.rollback()
                raise

    async def check(self) -> bool:
        """Check if the database is reachable.

        Returns:
            True if SELECT 1 succeeds, False otherwise.
        """
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
