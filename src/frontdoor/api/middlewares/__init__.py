"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI

from .bootstrap import bootstrap_middleware
from .logging_context import logging_context_middleware
from .tenant_dispatch import TenantDispatchMiddleware, to_response

__all__ = [
    "setup_middlewares",
    "TenantDispatchMiddleware",
    "bootstrap_middleware",
    "logging_context_middleware",
    "to_response",
]


def setup_middlewares(app: FastAPI) -> None:
    """Configure all application middlewares.

    The middleware added last is the outermost, so they are added from the
    inside out: dispatch, bootstrap, logging context, correlation ID.
    """
    # Tenant dispatch - answers tenant requests before any route matches
    app.add_middleware(TenantDispatchMiddleware)

    # Schema bootstrap - first request per instance creates the projects table
    @app.middleware("http")
    async def _bootstrap(request, call_next):  # type: ignore[no-untyped-def]
        return await bootstrap_middleware(request, call_next)

    # Logging context - binds request_id to structlog context
    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    # Correlation ID - generates/propagates X-Request-ID
    app.add_middleware(CorrelationIdMiddleware)
