"""Tests for the run-once schema bootstrap."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.frontdoor.core.db import (
    BootstrapInitializer,
    BootstrapState,
    create_schema,
    projects_table_exists,
)
from src.frontdoor.core.db import bootstrap as bootstrap_module

pytestmark = pytest.mark.integration


async def test_first_call_creates_projects_table(engine: AsyncEngine):
    initializer = BootstrapInitializer()
    assert not await projects_table_exists(engine)

    await initializer.ensure_initialized(engine)

    assert await projects_table_exists(engine)
    assert initializer.state is BootstrapState.INITIALIZED


async def test_existing_schema_is_left_alone(engine: AsyncEngine, monkeypatch):
    await create_schema(engine)
    calls = 0

    async def counting_create_schema(engine):
        nonlocal calls
        calls += 1

    monkeypatch.setattr(bootstrap_module, "create_schema", counting_create_schema)
    initializer = BootstrapInitializer()

    await initializer.ensure_initialized(engine)

    assert calls == 0
    assert initializer.is_initialized


async def test_create_schema_is_idempotent(engine: AsyncEngine):
    await create_schema(engine)
    await create_schema(engine)

    assert await projects_table_exists(engine)


async def test_concurrent_requests_check_once(engine: AsyncEngine, monkeypatch):
    checks = 0
    real_exists = bootstrap_module.projects_table_exists

    async def counting_exists(engine):
        nonlocal checks
        checks += 1
        await asyncio.sleep(0)
        return await real_exists(engine)

    monkeypatch.setattr(bootstrap_module, "projects_table_exists", counting_exists)
    initializer = BootstrapInitializer()

    await asyncio.gather(*(initializer.ensure_initialized(engine) for _ in range(5)))

    assert checks == 1
    assert await real_exists(engine)


async def test_later_calls_are_noops(engine: AsyncEngine, monkeypatch):
    initializer = BootstrapInitializer()
    await initializer.ensure_initialized(engine)

    async def fail(engine):
        raise AssertionError("schema checked twice")

    monkeypatch.setattr(bootstrap_module, "projects_table_exists", fail)

    await initializer.ensure_initialized(engine)


async def test_store_failure_is_logged_and_marks_initialized(tmp_path, capturing_logger):
    broken = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'x.db'}")
    initializer = BootstrapInitializer()

    try:
        await initializer.ensure_initialized(broken)
    finally:
        await broken.dispose()

    assert initializer.state is BootstrapState.INITIALIZED
    errors = [call for call in capturing_logger.calls if call.method_name == "error"]
    assert errors
    assert errors[0].kwargs["error_type"] == "StoreUnavailableError"


async def test_reset_returns_to_uninitialized(engine: AsyncEngine):
    initializer = BootstrapInitializer()
    await initializer.ensure_initialized(engine)

    initializer.reset()

    assert initializer.state is BootstrapState.UNINITIALIZED
