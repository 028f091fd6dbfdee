# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the health endpoints.

The client is not entered as a context manager, so the lifespan never
opens real connections. Component checks are mocks placed on app.state.
"""

import os
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.core.config.settings import clear_settings_cache


def component(healthy: bool = True, error: Exception | None = None) -> MagicMock:
    check = AsyncMock(side_effect=error) if error else AsyncMock(return_value=healthy)
    return MagicMock(check=check)


@pytest.fixture
def health_app(test_environment: dict[str, str]) -> Iterator[FastAPI]:
    with patch.dict(os.environ, test_environment):
        clear_settings_cache()
        app = create_app()
        app.state.db = component()
        app.state.blob_store = component()
        yield app
    clear_settings_cache()


@pytest.fixture
def health_client(health_app: FastAPI) -> TestClient:
    return TestClient(health_app)


class TestHealth:
    def test_healthy(self, health_client: TestClient) -> None:
        response = health_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "development"
        assert body["components"]["database"]["status"] == "healthy"
        assert body["components"]["storage"]["status"] == "healthy"

    def test_degraded_when_storage_fails(
        self, health_app: FastAPI, health_client: TestClient
    ) -> None:
        health_app.state.blob_store = component(error=RuntimeError("container unreachable"))

        body = health_client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["components"]["storage"]["message"] == "container unreachable"

    def test_unhealthy_when_everything_fails(
        self, health_app: FastAPI, health_client: TestClient
    ) -> None:
        health_app.state.db = component(healthy=False)
        health_app.state.blob_store = component(healthy=False)

        assert health_client.get("/health").json()["status"] == "unhealthy"

    def test_not_initialized(self, health_app: FastAPI, health_client: TestClient) -> None:
        del health_app.state.db

        body = health_client.get("/health").json()

        assert body["components"]["database"]["message"] == "Database not initialized"

    def test_live(self, health_client: TestClient) -> None:
        response = health_client.get("/health/live")

        assert response.json() == {"status": "alive"}

    def test_ready(self, health_client: TestClient) -> None:
        response = health_client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_not_ready_without_database(
        self, health_app: FastAPI, health_client: TestClient
    ) -> None:
        health_app.state.db = component(healthy=False)

        response = health_client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["ready"] is False
