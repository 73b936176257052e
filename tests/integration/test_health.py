"""Tests for health and metrics endpoints."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from src.frontdoor.core import health
from src.frontdoor.core.config import get_settings
from src.frontdoor.core.exceptions import UpstreamError
from src.frontdoor.core.health import reset_health_cache
from src.frontdoor.main import create_app
from src.frontdoor.registry import InMemoryExecutionRegistry

pytestmark = pytest.mark.integration


async def test_health_reports_dependencies(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert data["registry"] == "healthy"
    assert data["cached"] is False


async def test_health_is_cached(client: AsyncClient):
    await client.get("/health")

    response = await client.get("/health")

    data = response.json()
    assert data["cached"] is True
    assert data["cache_age_seconds"] < 10


async def test_registry_failure_is_degraded(
    client: AsyncClient, registry: InMemoryExecutionRegistry, monkeypatch
):
    monkeypatch.setattr(
        registry, "list", AsyncMock(side_effect=UpstreamError("Dispatch namespace API not configured"))
    )

    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["registry"] == "unhealthy: Dispatch namespace API not configured"


async def test_database_failure_is_unhealthy(client: AsyncClient, monkeypatch):
    @asynccontextmanager
    async def broken_session(engine=None):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))
        yield

    monkeypatch.setattr(health, "get_session", broken_session)

    response = await client.get("/health")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["database"].startswith("unhealthy:")
    assert data["registry"] == "healthy"


async def test_metrics_exposed(client: AsyncClient):
    await client.get("/health")

    response = await client.get("/metrics")

    assert response.status_code == 200


async def test_metrics_key_required_when_configured(
    database_url: str, registry: InMemoryExecutionRegistry, monkeypatch
):
    monkeypatch.setenv("METRICS_API_KEY", "s3cret")
    get_settings.cache_clear()
    reset_health_cache()
    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        denied = await client.get("/metrics")
        allowed = await client.get("/metrics", headers={"X-Metrics-Key": "s3cret"})

    assert denied.status_code == 401
    assert allowed.status_code == 200
