# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the transactional write coordinator."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.core.errors import TransactionFailure, UploadFailure, ValidationError
from src.infrastructure.database.unit_of_work import UnitOfWork
from tests.helpers import deleted_keys, make_file


class TestUnitOfWork:
    """Tests for commit, rollback and blob compensation."""

    @pytest.mark.asyncio
    async def test_clean_exit_commits_and_keeps_uploads(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        async with UnitOfWork(mock_db, blob_store) as uow:
            await uow.upload(make_file(), "assignments/course-1")

        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_not_awaited()
        blob_store.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_rolls_back_and_removes_uploads(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        with pytest.raises(ValidationError):
            async with UnitOfWork(mock_db, blob_store) as uow:
                first = await uow.upload(make_file("a.pdf"), "p")
                second = await uow.upload(make_file("b.pdf"), "p")
                raise ValidationError("nope")

        mock_db.commit.assert_not_awaited()
        mock_db.rollback.assert_awaited_once()
        assert deleted_keys(blob_store) == [second.key, first.key]

    @pytest.mark.asyncio
    async def test_commit_failure_raises_transaction_failure(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        mock_db.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate"))

        with pytest.raises(TransactionFailure) as exc_info:
            async with UnitOfWork(mock_db, blob_store) as uow:
                blob = await uow.upload(make_file(), "p")
                uow.discard_blob_on_commit("old-key")

        assert isinstance(exc_info.value.original_error, IntegrityError)
        mock_db.rollback.assert_awaited_once()
        assert deleted_keys(blob_store) == [blob.key]

    @pytest.mark.asyncio
    async def test_deferred_deletes_run_after_commit(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        async with UnitOfWork(mock_db, blob_store) as uow:
            uow.discard_blob_on_commit("old-key")
            uow.discard_blob_on_commit(None)
            blob_store.delete.assert_not_awaited()

        assert deleted_keys(blob_store) == ["old-key"]

    @pytest.mark.asyncio
    async def test_deferred_deletes_skipped_on_abort(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        with pytest.raises(RuntimeError):
            async with UnitOfWork(mock_db, blob_store) as uow:
                uow.discard_blob_on_commit("old-key")
                raise RuntimeError("boom")

        assert deleted_keys(blob_store) == []

    @pytest.mark.asyncio
    async def test_upload_many_records_partial_batch(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        original = blob_store.upload.side_effect

        async def flaky(file, prefix):
            if file.filename == "bad.pdf":
                raise UploadFailure("Failed to upload bad.pdf")
            return await original(file, prefix)

        blob_store.upload.side_effect = flaky

        with pytest.raises(UploadFailure):
            async with UnitOfWork(mock_db, blob_store) as uow:
                await uow.upload_many(
                    [make_file("a.pdf"), make_file("bad.pdf"), make_file("c.pdf")], "p"
                )

        deleted = deleted_keys(blob_store)
        assert len(deleted) == 2
        assert all(key.startswith("p/") for key in deleted)

    @pytest.mark.asyncio
    async def test_upload_many_empty(self, mock_db: AsyncMock, blob_store: MagicMock) -> None:
        async with UnitOfWork(mock_db, blob_store) as uow:
            assert await uow.upload_many([], "p") == []

        blob_store.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_discard_blob_swallows_failures(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        blob_store.delete.side_effect = UploadFailure("Failed to delete k")

        async with UnitOfWork(mock_db, blob_store) as uow:
            assert await uow.discard_blob("k") is False

        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_compensation_failure_keeps_original_error(
        self, mock_db: AsyncMock, blob_store: MagicMock
    ) -> None:
        blob_store.delete.side_effect = UploadFailure("Failed to delete")

        with pytest.raises(ValidationError, match="original"):
            async with UnitOfWork(mock_db, blob_store) as uow:
                await uow.upload(make_file(), "p")
                raise ValidationError("original")
