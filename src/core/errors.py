# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by every CourseHub domain service.

Each error carries the HTTP status code it is surfaced with, so routers and
the global exception handlers can render it without a per-endpoint mapping.

Example:
    >>> raise NotFoundError("Course not found")
"""

from typing import Optional


class LMSError(Exception):
    """Base exception for CourseHub operations.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code used when rendering the error.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            status_code: Overrides the class default status code.
        """
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(LMSError):
    """Raised when input is missing or malformed."""

    status_code = 400


class NotFoundError(LMSError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class UnauthorizedError(LMSError):
    """Raised when the caller lacks the role or role profile required."""

    status_code = 403


class ForbiddenError(LMSError):
    """Raised when the caller's profile lacks ownership, enrollment or authorship."""

    status_code = 403


class UploadFailure(LMSError):
    """Raised when the blob store rejects an upload or delete.

    Attributes:
        original_error: The underlying storage or network error.
    """

    status_code = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class TransactionFailure(LMSError):
    """Raised when a database commit or rollback fails.

    Attributes:
        original_error: The underlying SQLAlchemy error.
    """

    status_code = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message
