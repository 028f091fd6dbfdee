# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base class shared by the entity services.

Every entity family (courses, assignments, activities, announcements,
discussions, syllabus) follows the same write pattern:

1. open a UnitOfWork on the request session,
2. resolve the caller's profile and check ownership or enrollment,
3. validate uploaded files against the family's UploadPolicy,
4. upload files through the unit (recorded for compensation),
5. stage database writes and let the unit commit.

EntityService wires up the collaborators each family needs so the
subclasses only describe their own schema and authorization predicate.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.errors import ValidationError
from src.domains.access.gate import AccessGate
from src.infrastructure.database.repositories import Repositories
from src.infrastructure.database.unit_of_work import UnitOfWork
from src.infrastructure.storage.blob_store import BlobStore, StoredBlob, UploadedFile
from src.infrastructure.storage.policies import UploadPolicies, UploadPolicy, default_policies
from src.models.common import FileResponse
from src.utils.datetime import utc_now

Clock = Callable[[], datetime]


class EntityService:
    """Collaborators and helpers shared by every entity service.

    Attributes:
        db: Request-scoped database session.
        blob_store: Attachment storage.
        repos: Repositories bound to db.
        gate: Authorization gate.
        policies: Upload policies.
    """

    def __init__(
        self,
        db: AsyncSession,
        blob_store: BlobStore,
        *,
        repositories: Optional[Repositories] = None,
        policies: Optional[UploadPolicies] = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the service.

        Args:
            db: Request-scoped database session.
            blob_store: Attachment storage.
            repositories: Repositories to use instead of building them from db.
            policies: Upload policies (defaults to the environment's limits).
            clock: Source of the current time.
        """
        self.db = db
        self.blob_store = blob_store
        self.repos = repositories or Repositories(db)
        self.gate = AccessGate(self.repos)
        self.policies = policies or default_policies()
        self._clock = clock

    def _unit_of_work(self) -> UnitOfWork:
        return UnitOfWork(self.db, self.blob_store)

    def _now(self) -> datetime:
        return self._clock()

    def _validate_files(self, files: Sequence[UploadedFile], policy: UploadPolicy) -> None:
        """Check file count, MIME types and sizes before anything is uploaded.

        Raises:
            ValidationError: If any file is rejected.
        """
        if len(files) > self.policies.max_files:
            raise ValidationError(
                f"Too many files. Maximum {self.policies.max_files} files per request"
            )
        policy.validate(files)

    @staticmethod
    def _require_text(**fields: Optional[str]) -> None:
        """Raise ValidationError if any named field is missing or blank."""
        missing = [name for name, value in fields.items() if value is None or not value.strip()]
        if missing:
            raise ValidationError(f"Please provide all required fields: {', '.join(missing)}")

    @staticmethod
    def _apply_changes(entity: Any, **changes: Any) -> list[str]:
        """Set every non-None change on entity.

        Returns:
            Names of the fields that were set.
        """
        applied = []
        for name, value in changes.items():
            if value is not None:
                setattr(entity, name, value)
                applied.append(name)
        return applied

    @staticmethod
    def _file_response(attachment: Any) -> FileResponse:
        return FileResponse.model_validate(attachment)

    @staticmethod
    def _attachment_fields(blob: StoredBlob) -> dict[str, str]:
        return {
            "name": blob.name,
            "url": blob.url,
            "key": blob.key,
            "mime_type": blob.content_type,
        }
