# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Builders shared by the unit and integration tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from src.domains.auth.current_user import CurrentUser
from src.infrastructure.storage import UploadedFile

FIXED_NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_repository() -> MagicMock:
    """Create a repository mock with the async Repository interface."""
    repo = MagicMock()
    repo.get = AsyncMock(return_value=None)
    repo.find_one = AsyncMock(return_value=None)
    repo.find_all = AsyncMock(return_value=[])
    repo.add = AsyncMock(side_effect=lambda entity: entity)
    repo.delete = AsyncMock()
    repo.search = AsyncMock(return_value=[])
    return repo


def make_file(
    filename: str = "notes.pdf",
    content_type: str = "application/pdf",
    data: bytes = b"%PDF-1.4 test",
) -> UploadedFile:
    """Create an in-memory uploaded file."""
    return UploadedFile(filename=filename, content_type=content_type, data=data)


def make_user(*roles: str, user_id: str | None = None) -> CurrentUser:
    """Create an authenticated caller with the given roles."""
    return CurrentUser(id=user_id or str(uuid4()), roles=list(roles), user_type=roles[0])


def deleted_keys(blob_store: MagicMock) -> list[str]:
    """Keys passed to blob_store.delete, in call order."""
    return [call.args[0] for call in blob_store.delete.await_args_list]


def uploaded_prefixes(blob_store: MagicMock) -> list[str]:
    """Prefixes passed to blob_store.upload, in call order."""
    return [call.args[1] for call in blob_store.upload.await_args_list]
