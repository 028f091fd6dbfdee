# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

Exports:
    AuthMiddleware: JWT authentication and request logging context.
"""

from src.api.middleware.auth import AuthMiddleware

__all__ = ["AuthMiddleware"]
