# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health, liveness and readiness endpoints for the API.
Component checks use the database manager and blob store held on app.state.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel, Field

from src.core.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class ComponentsHealth(BaseModel):
    """All components health status."""
    database: ComponentHealth | None = None
    storage: ComponentHealth | None = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    components: ComponentsHealth = Field(default_factory=ComponentsHealth)


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")
    checks: dict[str, Any] = Field(description="Individual check results")


async def _timed_check(
    name: str, check: Callable[[], Awaitable[bool]] | None
) -> ComponentHealth:
    if check is None:
        return ComponentHealth(status="unhealthy", message=f"{name} not initialized")

    start = time.time()
    try:
        healthy = await check()
    except Exception as e:
        logger.error("%s health check failed: %s", name, str(e))
        return ComponentHealth(status="unhealthy", message=str(e))

    latency = round((time.time() - start) * 1000, 2)
    if not healthy:
        return ComponentHealth(status="unhealthy", latency_ms=latency)
    return ComponentHealth(status="healthy", latency_ms=latency)


async def check_database(request: Request) -> ComponentHealth:
    """Check PostgreSQL database connection."""
    database = getattr(request.app.state, "db", None)
    return await _timed_check("Database", database.check if database else None)


async def check_storage(request: Request) -> ComponentHealth:
    """Check the blob container."""
    blob_store = getattr(request.app.state, "blob_store", None)
    return await _timed_check("Storage", blob_store.check if blob_store else None)


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check if the API is healthy with component details.

    Returns:
        HealthResponse with detailed status.
    """
    settings = get_settings()
    db_health = await check_database(request)
    storage_health = await check_storage(request)

    statuses = [db_health.status, storage_health.status]
    if all(s == "healthy" for s in statuses):
        overall_status = "healthy"
    elif all(s == "unhealthy" for s in statuses):
        overall_status = "unhealthy"
    else:
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=API_VERSION,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        components=ComponentsHealth(database=db_health, storage=storage_health),
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Report that the process is serving requests."""
    return {"status": "alive"}


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request, response: Response) -> ReadinessResponse:
    """Check if the API is ready to accept traffic.

    Responds with 503 while the database is unreachable.
    """
    db_health = await check_database(request)
    storage_health = await check_storage(request)

    checks = {
        "database": {"status": db_health.status, "latency_ms": db_health.latency_ms},
        "storage": {"status": storage_health.status, "latency_ms": storage_health.latency_ms},
    }
    ready = db_health.status == "healthy"
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(ready=ready, checks=checks)
