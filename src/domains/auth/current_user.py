# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""The authenticated caller as seen by the domain services."""

from src.domains.auth.jwt import TokenPayload

ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"


class CurrentUser:
    """Current authenticated user from JWT token.

    Attributes:
        id: User UUID (JWT subject).
        user_type: Primary role of the user.
        roles: List of role codes.
        name: Display name, if known.
    """

    def __init__(
        self,
        id: str,
        roles: list[str],
        user_type: str | None = None,
        name: str | None = None,
    ) -> None:
        self.id = id
        self.roles = list(roles)
        self.user_type = user_type
        self.name = name
        if user_type and user_type not in self.roles:
            self.roles.append(user_type)

    @classmethod
    def from_payload(cls, payload: TokenPayload) -> "CurrentUser":
        """Build the user from a decoded token payload."""
        return cls(
            id=payload.sub,
            roles=payload.roles,
            user_type=payload.user_type,
            name=payload.name,
        )

    def has_role(self, role: str) -> bool:
        """Check if user has a specific role."""
        return role in self.roles

    def has_any_role(self, *roles: str) -> bool:
        """Check if user has any of the specified roles."""
        return any(role in self.roles for role in roles)

    @property
    def is_admin(self) -> bool:
        return self.has_role(ROLE_ADMIN)

    @property
    def is_teacher(self) -> bool:
        return self.has_role(ROLE_TEACHER)

    @property
    def is_student(self) -> bool:
        return self.has_role(ROLE_STUDENT)

    def __repr__(self) -> str:
        return f"CurrentUser(id={self.id!r}, roles={self.roles!r})"
