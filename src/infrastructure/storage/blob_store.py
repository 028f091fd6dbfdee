# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Azure Blob Storage client for file attachments.

Every binary payload (assignment attachments, submission files, announcement
images, discussion and syllabus files) is stored in a single container under
a path-like key. Keys encode a logical folder, a millisecond timestamp, a
short random fragment and the sanitized original filename:

    assignments/course-42/1736467200000-3f9c2a1b-Week-1-notes.pdf

MIME type and size limits are enforced by the caller through UploadPolicy
before anything reaches this client.

Example:
    store = BlobStore(settings.blob_storage)
    await store.ensure_container()
    blob = await store.upload(file, "announcement-images")
    await store.delete(blob.key)
    await store.close()
"""

import logging
import re
import uuid
from dataclasses import dataclass

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from src.core.config.settings import BlobStorageSettings
from src.core.errors import UploadFailure
from src.utils.datetime import epoch_millis

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a client, fully read into memory.

    Attributes:
        filename: Original filename as sent by the client.
        content_type: MIME type declared by the client.
        data: File content.
    """

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredBlob:
    """Reference to an uploaded blob.

    Attributes:
        url: Public URL of the blob.
        key: Storage key used for later deletion.
        name: Original filename.
        content_type: MIME type the blob was stored with.
    """

    url: str
    key: str
    name: str
    content_type: str


@dataclass(frozen=True)
class BlobDeleteResult:
    """Acknowledgement returned by BlobStore.delete.

    Attributes:
        key: The key that was requested.
        deleted: Whether a blob was actually removed.
        message: Human-readable outcome.
    """

    key: str
    deleted: bool
    message: str


def build_blob_key(prefix: str, filename: str, millis: int | None = None) -> str:
    """Build a collision-resistant storage key.

    Args:
        prefix: Logical folder, e.g. "assignments/course-42".
        filename: Original filename; whitespace runs become "-".
        millis: Timestamp in epoch milliseconds (defaults to now).

    Returns:
        The storage key.
    """
    safe_name = _WHITESPACE.sub("-", filename.strip()) or "file"
    stamp = epoch_millis() if millis is None else millis
    return f"{prefix.strip('/')}/{stamp}-{uuid.uuid4().hex[:8]}-{safe_name}"


class BlobStore:
    """Async client for the attachment container.

    The underlying BlobServiceClient is created once and owned by this
    object; the application lifespan constructs it at startup and closes it
    at shutdown.

    Attributes:
        container_name: Name of the container holding all files.
    """

    def __init__(
        self,
        settings: BlobStorageSettings,
        client: BlobServiceClient | None = None,
    ) -> None:
        """Initialize the blob store.

        Args:
            settings: Blob storage configuration.
            client: Optional preconfigured service client.
        """
        self._settings = settings
        self.container_name = settings.container_name
        self._client = client or self._create_client(settings)
        self._container = self._client.get_container_client(self.container_name)

    @staticmethod
    def _create_client(settings: BlobStorageSettings) -> BlobServiceClient:
        if settings.connection_string is not None:
            return BlobServiceClient.from_connection_string(
                settings.connection_string.get_secret_value()
            )
        return BlobServiceClient(
            account_url=settings.account_url,
            credential=settings.account_key.get_secret_value(),
        )

    def _public_url(self, key: str, default_url: str) -> str:
        if self._settings.public_base_url:
            return f"{self._settings.public_base_url.rstrip('/')}/{key}"
        return default_url

    async def ensure_container(self) -> None:
        """Create the container with public blob read access if missing."""
        try:
            await self._container.create_container(public_access="blob")
            logger.info("Created blob container: %s", self.container_name)
        except ResourceExistsError:
            logger.debug("Blob container already exists: %s", self.container_name)

    async def upload(self, file: UploadedFile, prefix: str) -> StoredBlob:
        """Upload a file under a generated key.

        Args:
            file: The file to store.
            prefix: Logical folder for the key.

        Returns:
            StoredBlob with the public URL and key.

        Raises:
            UploadFailure: If the store rejects the write.
        """
        key = build_blob_key(prefix, file.filename)
        blob_client = self._container.get_blob_client(key)

        try:
            await blob_client.upload_blob(
                file.data,
                overwrite=True,
                content_settings=ContentSettings(content_type=file.content_type),
            )
        except AzureError as e:
            logger.error("Blob upload failed: key=%s, error=%s", key, str(e))
            raise UploadFailure(f"Failed to upload {file.filename}", e) from e

        logger.debug("Uploaded blob: key=%s, size=%d", key, file.size)
        return StoredBlob(
            url=self._public_url(key, blob_client.url),
            key=key,
            name=file.filename,
            content_type=file.content_type,
        )

    async def delete(self, key: str | None) -> BlobDeleteResult:
        """Delete a blob by key.

        Deleting an empty key or a blob that no longer exists is acknowledged
        rather than raised, so the call is safe to repeat.

        Args:
            key: Storage key returned by upload().

        Returns:
            BlobDeleteResult describing the outcome.

        Raises:
            UploadFailure: If the store rejects the delete for any other reason.
        """
        if not key:
            return BlobDeleteResult(key="", deleted=False, message="No file key provided")

        try:
            await self._container.get_blob_client(key).delete_blob()
        except ResourceNotFoundError:
            logger.debug("Blob already absent: key=%s", key)
            return BlobDeleteResult(key=key, deleted=False, message="File not found")
        except AzureError as e:
            logger.error("Blob delete failed: key=%s, error=%s", key, str(e))
            raise UploadFailure(f"Failed to delete {key}", e) from e

        logger.debug("Deleted blob: key=%s", key)
        return BlobDeleteResult(key=key, deleted=True, message="File deleted successfully")

    async def check(self) -> bool:
        """Check if the container is reachable.

        Returns:
            True if the container properties can be read, False otherwise.
        """
        try:
            await self._container.get_container_properties()
            return True
        except AzureError:
            return False

    async def close(self) -> None:
        """Close the underlying service client and its HTTP session."""
        await self._client.close()
