# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Alembic environment and revisions for the CourseHub database. Revisions
live in versions/ and are applied with ``alembic upgrade head``.
"""
