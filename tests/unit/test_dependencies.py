# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the upload and role dependencies."""

from io import BytesIO
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from src.api.dependencies import RequireRole, read_upload, read_uploads
from tests.helpers import make_user


def upload(filename: str, data: bytes = b"data", content_type: str | None = "application/pdf"):
    headers = Headers({"content-type": content_type}) if content_type else Headers({})
    return UploadFile(BytesIO(data), filename=filename, headers=headers)


class TestReadUpload:
    @pytest.mark.asyncio
    async def test_reads_file(self) -> None:
        result = await read_upload(upload("notes.pdf", b"%PDF"))

        assert result.filename == "notes.pdf"
        assert result.content_type == "application/pdf"
        assert result.data == b"%PDF"

    @pytest.mark.asyncio
    async def test_missing_content_type(self) -> None:
        result = await read_upload(upload("blob.bin", content_type=None))

        assert result.content_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_empty_part_is_no_file(self) -> None:
        assert await read_upload(upload("", b"")) is None
        assert await read_upload(None) is None

    @pytest.mark.asyncio
    async def test_read_uploads_skips_empty_parts(self) -> None:
        result = await read_uploads([upload("a.pdf"), upload(""), upload("b.pdf")])

        assert [f.filename for f in result] == ["a.pdf", "b.pdf"]
        assert await read_uploads(None) == []


class TestRequireRole:
    def test_allows_any_listed_role(self) -> None:
        request = MagicMock()
        request.state.user = make_user("student", "teacher")

        assert RequireRole("teacher")(request) is request.state.user

    def test_unauthenticated(self) -> None:
        request = MagicMock()
        request.state.user = None

        with pytest.raises(HTTPException) as exc_info:
            RequireRole("teacher")(request)

        assert exc_info.value.status_code == 401

    def test_missing_role(self) -> None:
        request = MagicMock()
        request.state.user = make_user("student")

        with pytest.raises(HTTPException) as exc_info:
            RequireRole("teacher", "admin")(request)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Requires role: teacher, admin"
