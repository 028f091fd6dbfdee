# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for CourseHub.

Settings are Pydantic models loaded from environment variables.

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.blob_storage.container_name)
    'coursehub-files'
"""

from src.core.config.settings import (
    APISettings,
    BlobStorageSettings,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    Settings,
    UploadSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "BlobStorageSettings",
    "UploadSettings",
    "JWTSettings",
    "CORSSettings",
    "APISettings",
]
