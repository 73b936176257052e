"""Health check endpoint with dependency validation and caching."""

import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.frontdoor.core.config import get_settings
from src.frontdoor.core.db import get_session
from src.frontdoor.core.exceptions import UpstreamError
from src.frontdoor.registry import get_execution_registry

# Health check caching
_health_cache: dict[str, Any] | None = None
_health_cache_time: float = 0
HEALTH_CACHE_TTL = 10  # seconds


def reset_health_cache() -> None:
    """Reset health cache (for testing)."""
    global _health_cache, _health_cache_time
    _health_cache = None
    _health_cache_time = 0


def setup_health_endpoint(app: FastAPI) -> None:
    """Configure the health check endpoint."""

    @app.get("/health", include_in_schema=False)
    async def health() -> JSONResponse:
        """Health check with dependency validation and caching."""
        global _health_cache, _health_cache_time

        now = time.time()

        # Return cached result if still valid
        if _health_cache and (now - _health_cache_time) < HEALTH_CACHE_TTL:
            cached_response = _health_cache.copy()
            cached_response["cached"] = True
            cached_response["cache_age_seconds"] = round(now - _health_cache_time, 1)
            status_code = 503 if cached_response["status"] == "unhealthy" else 200
            return JSONResponse(content=cached_response, status_code=status_code)

        health_status: dict[str, Any] = {
            "status": "healthy",
            "database": "unknown",
            "registry": "unknown",
            "cached": False,
            "timestamp": now,
        }

        # Check the Project Store
        try:
            async with get_session() as session:
                await session.execute(text("SELECT 1"))
            health_status["database"] = "healthy"
        except (SQLAlchemyError, OSError) as e:
            health_status["database"] = f"unhealthy: {e!s}"
            health_status["status"] = "unhealthy"

        # Registry being down is "degraded" and still answers 200: the store
        # and the admin routes keep working
        try:
            await get_execution_registry().list()
            health_status["registry"] = "healthy"
        except UpstreamError as e:
            health_status["registry"] = f"unhealthy: {e.detail}"
            if health_status["status"] == "healthy":
                health_status["status"] = "degraded"

        _health_cache = health_status
        _health_cache_time = now

        status_code = 503 if health_status["status"] == "unhealthy" else 200
        return JSONResponse(content=health_status, status_code=status_code)


def setup_metrics(app: FastAPI) -> None:
    """Configure Prometheus metrics with optional API key protection."""
    settings = get_settings()
    instrumentator = Instrumentator().instrument(app)

    if settings.metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(
            api_key: str | None = Depends(api_key_header),
        ) -> None:
            if (
                api_key is None
                or settings.metrics_api_key is None
                or not secrets.compare_digest(api_key, settings.metrics_api_key)
            ):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(
            app,
            endpoint="/metrics",
            include_in_schema=False,
            dependencies=[Depends(verify_metrics_key)],
        )
    else:
        instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)
