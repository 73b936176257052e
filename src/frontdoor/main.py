from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.frontdoor.api.middlewares import setup_middlewares
from src.frontdoor.api.router import api_router
from src.frontdoor.core.config import get_settings
from src.frontdoor.core.db import dispose_engine
from src.frontdoor.core.exceptions import setup_exception_handlers
from src.frontdoor.core.health import setup_health_endpoint, setup_metrics
from src.frontdoor.core.logging import get_logger, setup_logging
from src.frontdoor.registry import close_execution_registry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(
        f"Starting {settings.app_name}",
        platform_base_domain=settings.platform_base_domain,
        registry_backend=settings.registry_backend,
    )

    yield

    logger.info("Closing connections...")
    await close_execution_registry()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "projects", "description": "Tenant project creation and domain status"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant front door dispatching to per-project execution contexts",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    # Exception handlers to include request_id in error responses
    setup_exception_handlers(app)

    setup_middlewares(app)

    app.include_router(api_router)

    setup_health_endpoint(app)
    setup_metrics(app)

    return app


app = create_app()
