"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file and a fresh in-memory
Execution Registry. Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.frontdoor.core.config import get_settings
from src.frontdoor.core.db import (
    create_schema,
    dispose_engine,
    get_engine,
    get_session,
    schema_bootstrap,
)
from src.frontdoor.core.health import reset_health_cache
from src.frontdoor.main import create_app
from src.frontdoor.models import Project
from src.frontdoor.registry import (
    InMemoryExecutionRegistry,
    close_execution_registry,
    set_execution_registry,
)
from tests.factories import ProjectFactory


@pytest.fixture
async def database_url(tmp_path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[str]:
    """Point the app at a per-test SQLite database."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'frontdoor.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    get_settings.cache_clear()
    await dispose_engine()
    schema_bootstrap.reset()

    yield url

    await dispose_engine()
    schema_bootstrap.reset()


@pytest.fixture
async def engine(database_url: str) -> AsyncEngine:
    return get_engine()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does not auto-commit; tests call `await session.commit()`.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
async def registry() -> AsyncGenerator[InMemoryExecutionRegistry]:
    registry = InMemoryExecutionRegistry()
    set_execution_registry(registry)
    yield registry
    await close_execution_registry()


@pytest.fixture
def platform_domain(database_url: str, monkeypatch: pytest.MonkeyPatch) -> str:
    """Switch routing to subdomain/hostname mode under a platform base domain."""
    monkeypatch.setenv("PLATFORM_BASE_DOMAIN", "saasysite.me")
    get_settings.cache_clear()
    return "saasysite.me"


@pytest.fixture
async def client(
    database_url: str, registry: InMemoryExecutionRegistry
) -> AsyncGenerator[AsyncClient]:
    reset_health_cache()
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://frontdoor.test",
    ) as client:
        yield client
    reset_health_cache()


@pytest.fixture
async def stored_project(engine: AsyncEngine, db_session: AsyncSession) -> Project:
    """A project in the store whose script has never been deployed."""
    await create_schema(engine)
    project = ProjectFactory.build(subdomain="demo")
    db_session.add(project)
    await db_session.commit()
    return project
