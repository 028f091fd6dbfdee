# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Transactional write coordinator for database writes and blob uploads.

The database and the blob store cannot share a transaction. A UnitOfWork
keeps them consistent:

- Database writes staged on the session are committed together on a clean
  exit and rolled back together on any error.
- Every blob uploaded through the unit is recorded on a compensation list.
  If the unit fails (validation, authorization, database or a later upload)
  the recorded blobs are deleted, best-effort, before the error propagates.
- Blobs that an operation replaces or detaches are deleted only after the
  commit succeeds, so a failed operation never loses a file that is still
  referenced.
- Cascade deletes call discard_blob() directly; those deletions are
  best-effort and never block removal of the owning row.

Example:
    async with UnitOfWork(session, blob_store) as uow:
        blob = await uow.upload(file, f"assignments/course-{course.id}")
        assignment.attachments.append(...)
        uow.discard_blob_on_commit(old_key)
"""

import asyncio
import logging
from collections.abc import Sequence
from types import TracebackType
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import TransactionFailure
from src.infrastructure.storage.blob_store import BlobStore, StoredBlob, UploadedFile

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Async context manager wrapping one logical write operation.

    Attributes:
        uploaded_keys: Keys uploaded by this unit (the compensation list).
        deferred_keys: Keys to delete once the commit has succeeded.
    """

    def __init__(self, session: AsyncSession, blob_store: BlobStore) -> None:
        self._session = session
        self._blob_store = blob_store
        self.uploaded_keys: list[str] = []
        self.deferred_keys: list[str] = []

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        if exc_type is not None:
            logger.debug("Unit of work aborted: %s", exc_type.__name__)
            await self._rollback()
            await self._compensate()
            return False

        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.error("Commit failed: %s", str(e))
            await self._rollback()
            await self._compensate()
            raise TransactionFailure("Failed to save changes", e) from e

        await self._run_deferred()
        return False

    async def upload(self, file: UploadedFile, prefix: str) -> StoredBlob:
        """Upload a file and record it for compensation.

        Raises:
            UploadFailure: If the blob store rejects the upload.
        """
        blob = await self._blob_store.upload(file, prefix)
        self.uploaded_keys.append(blob.key)
        return blob

    async def upload_many(
        self, files: Sequence[UploadedFile], prefix: str
    ) -> list[StoredBlob]:
        """Upload several files concurrently.

        Every successful upload is recorded before the first failure (if
        any) is raised, so a partial batch is cleaned up on abort.

        Raises:
            UploadFailure: If any upload fails.
        """
        if not files:
            return []

        results = await asyncio.gather(
            *(self._blob_store.upload(file, prefix) for file in files),
            return_exceptions=True,
        )

        blobs: list[StoredBlob] = []
        failure: Optional[BaseException] = None
        for result in results:
            if isinstance(result, BaseException):
                failure = failure or result
            else:
                self.uploaded_keys.append(result.key)
                blobs.append(result)

        if failure is not None:
            raise failure
        return blobs

    async def discard_blob(self, key: Optional[str]) -> bool:
        """Delete a blob now, best-effort.

        Failures are logged and never raised.

        Returns:
            True if the store reported the blob deleted.
        """
        if not key:
            return False
        try:
            result = await self._blob_store.delete(key)
            return result.deleted
        except Exception as e:
            logger.warning("Failed to delete blob %s: %s", key, str(e))
            return False

    def discard_blob_on_commit(self, key: Optional[str]) -> None:
        """Delete a blob after a successful commit, best-effort."""
        if key:
            self.deferred_keys.append(key)

    async def _rollback(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError as e:
            logger.error("Rollback failed: %s", str(e))

    async def _compensate(self) -> None:
        keys, self.uploaded_keys = self.uploaded_keys, []
        for key in reversed(keys):
            await self.discard_blob(key)
        if keys:
            logger.info("Removed %d uploaded blob(s) after abort", len(keys))

    async def _run_deferred(self) -> None:
        keys, self.deferred_keys = self.deferred_keys, []
        for key in keys:
            await self.discard_blob(key)
