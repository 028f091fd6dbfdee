# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain.

Users are authenticated by an external identity provider that issues JWT
access tokens. CourseHub validates those tokens and exposes the caller to
the domain services as a CurrentUser.

Exports:
    JWTManager: JWT token creation and validation.
    CurrentUser: The authenticated caller.
"""

from src.domains.auth.current_user import (
    ROLE_ADMIN,
    ROLE_STUDENT,
    ROLE_TEACHER,
    CurrentUser,
)
from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)

__all__ = [
    "JWTManager",
    "TokenPayload",
    "JWTError",
    "TokenExpiredError",
    "InvalidTokenError",
    "CurrentUser",
    "ROLE_TEACHER",
    "ROLE_STUDENT",
    "ROLE_ADMIN",
]
