# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token utilities and the CurrentUser model.

Tests the JWTManager class and token operations.
"""

import time
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from jose import jwt
from pydantic import SecretStr

from src.domains.auth.current_user import CurrentUser
from src.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManager:
    """Tests for JWTManager class."""

    def test_create_and_decode_access_token(self, jwt_manager: JWTManager) -> None:
        """Test that a created token decodes to the same claims."""
        user_id = str(uuid4())

        token = jwt_manager.create_access_token(
            user_id=user_id, user_type="teacher", name="Jane Smith"
        )
        payload = jwt_manager.decode_token(token)

        assert isinstance(payload, TokenPayload)
        assert payload.sub == user_id
        assert payload.type == "access"
        assert payload.user_type == "teacher"
        assert payload.roles == ["teacher"]
        assert payload.name == "Jane Smith"
        assert payload.exp - payload.iat == 30 * 60

    def test_explicit_roles_are_kept(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(
            user_id="user-1", user_type="teacher", roles=["teacher", "admin"]
        )

        assert jwt_manager.decode_token(token).roles == ["teacher", "admin"]

    def test_expired_token_raises(self, jwt_manager: JWTManager, jwt_settings: MagicMock) -> None:
        """Test that an expired token raises TokenExpiredError."""
        now = int(time.time())
        token = jwt.encode(
            {
                "sub": "user-1",
                "type": "access",
                "exp": now - 60,
                "iat": now - 120,
                "jti": "abc",
            },
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(TokenExpiredError):
            jwt_manager.decode_token(token)

    def test_wrong_secret_raises(self, jwt_manager: JWTManager) -> None:
        other_settings = MagicMock()
        other_settings.secret_key = SecretStr("another-secret")
        other_settings.algorithm = "HS256"
        other_settings.access_token_expire_minutes = 30
        token = JWTManager(other_settings).create_access_token(user_id="user-1")

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_wrong_token_type_raises(
        self, jwt_manager: JWTManager, jwt_settings: MagicMock
    ) -> None:
        now = int(time.time())
        token = jwt.encode(
            {
                "sub": "user-1",
                "type": "refresh",
                "exp": now + 600,
                "iat": now,
                "jti": "abc",
            },
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="Expected access token"):
            jwt_manager.decode_token(token)

    def test_missing_claims_raise(
        self, jwt_manager: JWTManager, jwt_settings: MagicMock
    ) -> None:
        token = jwt.encode(
            {"type": "access", "exp": int(time.time()) + 600},
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="Invalid token claims"):
            jwt_manager.decode_token(token)

    def test_verify_token(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(user_id="user-1", user_type="student")

        assert jwt_manager.verify_token(token) is True
        assert jwt_manager.verify_token("not-a-token") is False


class TestCurrentUser:
    """Tests for CurrentUser."""

    def test_user_type_is_added_to_roles(self) -> None:
        user = CurrentUser(id="user-1", roles=[], user_type="student")

        assert user.roles == ["student"]
        assert user.is_student
        assert not user.is_teacher
        assert not user.is_admin

    def test_from_payload(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(
            user_id="user-1", user_type="teacher", roles=["teacher", "student"]
        )

        user = CurrentUser.from_payload(jwt_manager.decode_token(token))

        assert user.id == "user-1"
        assert user.has_any_role("admin", "student")
        assert user.is_teacher and user.is_student
