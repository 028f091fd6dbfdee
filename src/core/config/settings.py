# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for CourseHub.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_MEGABYTE = 1024 * 1024


class DatabaseSettings(BaseSettings):
    """PostgreSQL configuration for the LMS database.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "coursehub"
    password: SecretStr = SecretStr("coursehub_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "coursehub"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def sync_url(self) -> str:
        """Build the sync database URL for migrations."""
        pwd = self.password.get_secret_value()
        return f"postgresql://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class BlobStorageSettings(BaseSettings):
    """Azure Blob Storage configuration for file attachments.

    Either a full connection string or an account name and key must be
    provided. The connection string wins when both are set.

    Attributes:
        account_name: Storage account name.
        account_key: Storage account access key.
        connection_string: Full connection string (e.g. for Azurite).
        container_name: Container holding every uploaded file.
        public_base_url: Optional CDN or custom domain used to build URLs.
    """

    model_config = SettingsConfigDict(
        env_prefix="AZURE_STORAGE_",
        extra="ignore",
    )

    account_name: str = "devstoreaccount1"
    account_key: SecretStr = SecretStr("")
    connection_string: SecretStr | None = None
    container_name: str = "coursehub-files"
    public_base_url: str | None = None

    @property
    def account_url(self) -> str:
        """Build the blob service endpoint for the account."""
        return f"https://{self.account_name}.blob.core.windows.net"


class UploadSettings(BaseSettings):
    """Upload size limits applied before anything reaches blob storage.

    Attributes:
        max_attachment_mb: Limit for attachments, images and discussion files.
        max_submission_mb: Limit for student submission files.
        max_syllabus_mb: Limit for syllabus files and videos.
        max_lecture_video_mb: Limit for lecture videos.
        max_files_per_request: Maximum number of files in one request.
    """

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        extra="ignore",
    )

    max_attachment_mb: int = 5
    max_submission_mb: int = 10
    max_syllabus_mb: int = 10
    max_lecture_video_mb: int = 500
    max_files_per_request: int = 10

    @property
    def max_attachment_bytes(self) -> int:
        return self.max_attachment_mb * _MEGABYTE

    @property
    def max_submission_bytes(self) -> int:
        return self.max_submission_mb * _MEGABYTE

    @property
    def max_syllabus_bytes(self) -> int:
        return self.max_syllabus_mb * _MEGABYTE

    @property
    def max_lecture_video_bytes(self) -> int:
        return self.max_lecture_video_mb * _MEGABYTE


class JWTSettings(BaseSettings):
    """JWT authentication configuration.

    Attributes:
        secret_key: Secret key for signing tokens.
        algorithm: JWT signing algorithm.
        access_token_expire_minutes: Access token expiration time.
    """

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        extra="ignore",
    )

    secret_key: SecretStr = SecretStr("change-this-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(
        default=60,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2
    reload: bool = False


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        db: Database settings.
        blob_storage: Azure Blob Storage settings.
        uploads: Upload limit settings.
        jwt: JWT authentication settings.
        cors: CORS settings.
        api: API server settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            default_jwt_secret = "change-this-in-production"
            if self.jwt.secret_key.get_secret_value() == default_jwt_secret:
                raise ValueError(
                    "JWT secret key must be changed from default in production. "
                    "Set JWT_SECRET_KEY environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing.
    """
    get_settings.cache_clear()
