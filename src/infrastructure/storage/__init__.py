# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Blob storage for file attachments (Azure Blob Storage).

Example:
    from src.infrastructure.storage import BlobStore, UploadedFile

    store = BlobStore(settings.blob_storage)
    blob = await store.upload(UploadedFile("a.pdf", "application/pdf", data), "syllabus-files")
"""

from src.infrastructure.storage.blob_store import (
    BlobDeleteResult,
    BlobStore,
    StoredBlob,
    UploadedFile,
    build_blob_key,
)
from src.infrastructure.storage.policies import (
    UploadPolicies,
    UploadPolicy,
    default_policies,
)

__all__ = [
    "BlobStore",
    "BlobDeleteResult",
    "StoredBlob",
    "UploadedFile",
    "build_blob_key",
    "UploadPolicy",
    "UploadPolicies",
    "default_policies",
]
