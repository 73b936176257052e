"""Database engine management."""

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.frontdoor.core.config import get_settings

_engine: AsyncEngine | None = None


def _get_engine_kwargs(database_url: str) -> dict[str, Any]:
    """Pool arguments for the configured backend.

    SQLite (aiosqlite) manages its own pool and rejects the sizing options.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    settings = get_settings()
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }


def get_engine() -> AsyncEngine:
    """Get or create the database engine singleton."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            **_get_engine_kwargs(settings.database_url),
        )
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
