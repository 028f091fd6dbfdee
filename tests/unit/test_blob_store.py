# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the Azure blob store client and upload policies."""

import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError, ResourceNotFoundError

from src.core.config.settings import BlobStorageSettings, UploadSettings
from src.core.errors import UploadFailure, ValidationError
from src.infrastructure.storage import BlobStore, UploadPolicies, build_blob_key
from tests.helpers import make_file


@pytest.fixture
def blob_client() -> MagicMock:
    client = MagicMock()
    client.url = "https://account.blob.core.windows.net/coursehub-files/some-key"
    client.upload_blob = AsyncMock()
    client.delete_blob = AsyncMock()
    return client


@pytest.fixture
def container(blob_client: MagicMock) -> MagicMock:
    container = MagicMock()
    container.get_blob_client.return_value = blob_client
    container.create_container = AsyncMock()
    container.get_container_properties = AsyncMock()
    return container


@pytest.fixture
def service_client(container: MagicMock) -> MagicMock:
    client = MagicMock()
    client.get_container_client.return_value = container
    client.close = AsyncMock()
    return client


@pytest.fixture
def store(service_client: MagicMock) -> BlobStore:
    return BlobStore(BlobStorageSettings(container_name="coursehub-files"), client=service_client)


class TestBuildBlobKey:
    def test_key_layout(self) -> None:
        key = build_blob_key("assignments/course-42", "Week 1 notes.pdf", millis=1736467200000)

        assert re.fullmatch(
            r"assignments/course-42/1736467200000-[0-9a-f]{8}-Week-1-notes\.pdf", key
        )

    def test_keys_do_not_collide(self) -> None:
        keys = {build_blob_key("x", "a.pdf", millis=1) for _ in range(50)}

        assert len(keys) == 50

    def test_blank_filename(self) -> None:
        assert build_blob_key("x/", "   ", millis=1).endswith("-file")


class TestBlobStore:
    @pytest.mark.asyncio
    async def test_upload_returns_blob_reference(
        self, store: BlobStore, container: MagicMock, blob_client: MagicMock
    ) -> None:
        blob = await store.upload(make_file("hw 1.pdf"), "assignment-submissions/x")

        assert blob.key.startswith("assignment-submissions/x/")
        assert blob.key.endswith("-hw-1.pdf")
        assert blob.name == "hw 1.pdf"
        assert blob.content_type == "application/pdf"
        assert blob.url == blob_client.url
        container.get_blob_client.assert_called_once_with(blob.key)
        blob_client.upload_blob.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_upload_uses_public_base_url(self, service_client: MagicMock) -> None:
        store = BlobStore(
            BlobStorageSettings(public_base_url="https://cdn.example.com/files/"),
            client=service_client,
        )

        blob = await store.upload(make_file(), "syllabus-files")

        assert blob.url == f"https://cdn.example.com/files/{blob.key}"

    @pytest.mark.asyncio
    async def test_upload_failure_raises(self, store: BlobStore, blob_client: MagicMock) -> None:
        blob_client.upload_blob.side_effect = HttpResponseError(message="boom")

        with pytest.raises(UploadFailure, match="Failed to upload notes.pdf"):
            await store.upload(make_file(), "syllabus-files")

    @pytest.mark.asyncio
    async def test_delete(self, store: BlobStore, blob_client: MagicMock) -> None:
        result = await store.delete("syllabus-files/1-abc-notes.pdf")

        assert result.deleted is True
        assert result.message == "File deleted successfully"
        blob_client.delete_blob.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_empty_key(self, store: BlobStore, blob_client: MagicMock) -> None:
        result = await store.delete("")

        assert result.deleted is False
        assert result.message == "No file key provided"
        blob_client.delete_blob.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_missing_blob_is_acknowledged(
        self, store: BlobStore, blob_client: MagicMock
    ) -> None:
        blob_client.delete_blob.side_effect = ResourceNotFoundError(message="gone")

        result = await store.delete("k")

        assert result.deleted is False
        assert result.message == "File not found"

    @pytest.mark.asyncio
    async def test_delete_twice(self, store: BlobStore, blob_client: MagicMock) -> None:
        blob_client.delete_blob.side_effect = [None, ResourceNotFoundError(message="gone")]

        first = await store.delete("k")
        second = await store.delete("k")

        assert first.deleted is True
        assert second.deleted is False
        assert second.key == "k"

    @pytest.mark.asyncio
    async def test_delete_failure_raises(self, store: BlobStore, blob_client: MagicMock) -> None:
        blob_client.delete_blob.side_effect = HttpResponseError(message="boom")

        with pytest.raises(UploadFailure):
            await store.delete("k")

    @pytest.mark.asyncio
    async def test_ensure_container_tolerates_existing(
        self, store: BlobStore, container: MagicMock
    ) -> None:
        container.create_container.side_effect = ResourceExistsError(message="exists")

        await store.ensure_container()

        container.create_container.assert_awaited_once_with(public_access="blob")

    @pytest.mark.asyncio
    async def test_check(self, store: BlobStore, container: MagicMock) -> None:
        assert await store.check() is True

        container.get_container_properties.side_effect = HttpResponseError(message="down")
        assert await store.check() is False

    @pytest.mark.asyncio
    async def test_close(self, store: BlobStore, service_client: MagicMock) -> None:
        await store.close()

        service_client.close.assert_awaited_once()


class TestUploadPolicies:
    @pytest.fixture
    def policies(self) -> UploadPolicies:
        return UploadPolicies.from_settings(UploadSettings(max_attachment_mb=1))

    def test_accepts_allowed_file(self, policies: UploadPolicies) -> None:
        policies.attachment.validate([make_file()])

    def test_rejects_type(self, policies: UploadPolicies) -> None:
        with pytest.raises(ValidationError, match="Invalid file type"):
            policies.submission.validate([make_file("a.mp4", "video/mp4")])

    def test_rejects_size(self, policies: UploadPolicies) -> None:
        big = make_file(data=b"x" * (1024 * 1024 + 1))

        with pytest.raises(ValidationError, match="Maximum size allowed is 1MB"):
            policies.attachment.validate([big])

    def test_discussion_attachments_accept_any_type(self, policies: UploadPolicies) -> None:
        policies.discussion_attachment.validate([make_file("clip.mov", "video/quicktime")])

    def test_syllabus_families(self, policies: UploadPolicies) -> None:
        policies.syllabus_file.validate([make_file("deck.pptx", "application/vnd.ms-powerpoint")])
        policies.syllabus_video.validate([make_file("lecture.mp4", "video/mp4")])

        with pytest.raises(ValidationError):
            policies.syllabus_video.validate([make_file()])
