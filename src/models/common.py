# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models.

Every response body is an envelope ``{"success": bool, "message": str, ...}``.
Field names are exposed in camelCase (``dueDate``, ``isLate``) and accepted
in either camelCase or snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base model with camelCase aliases and ORM attribute loading."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(APIModel):
    """Base response envelope."""

    success: bool = Field(default=True, description="Whether the operation succeeded")
    message: str | None = Field(default=None, description="Human-readable outcome")


class MessageResponse(Envelope):
    """Envelope without payload."""


class ErrorResponse(APIModel):
    """Error envelope returned for every failed request."""

    success: bool = Field(default=False, description="Always false")
    message: str = Field(..., description="What went wrong")


class FileResponse(APIModel):
    """Reference to a stored file."""

    id: str = Field(..., description="Attachment ID")
    name: str = Field(..., description="Original filename")
    url: str = Field(..., description="Public URL")
    key: str = Field(..., description="Storage key")
    mime_type: str = Field(..., description="MIME type")
