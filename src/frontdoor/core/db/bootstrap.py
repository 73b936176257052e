"""Run-once schema bootstrap for the Project Store.

The first request each instance serves checks the store's catalog for the
projects table and creates it when missing. The instance remembers that it
tried, whatever the outcome, so a degraded store is not hit with a schema
check on every request.
"""

import asyncio
from enum import StrEnum

from sqlalchemy import Table, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel

from src.frontdoor.core.db.engine import get_engine
from src.frontdoor.core.exceptions import StoreUnavailableError
from src.frontdoor.core.logging import get_logger
from src.frontdoor.models import PROJECTS_TABLE

logger = get_logger(__name__)


def _projects_table() -> Table:
    return SQLModel.metadata.tables[PROJECTS_TABLE]


async def projects_table_exists(engine: AsyncEngine) -> bool:
    """Query the store's catalog for the projects table."""
    async with engine.connect() as connection:
        return await connection.run_sync(
            lambda sync_conn: inspect(sync_conn).has_table(PROJECTS_TABLE)
        )


async def create_schema(engine: AsyncEngine) -> None:
    """Create the projects table if it does not exist.

    Idempotent: concurrent or repeated calls leave the same final state.
    """
    async with engine.begin() as connection:
        await connection.run_sync(
            SQLModel.metadata.create_all, tables=[_projects_table()], checkfirst=True
        )


async def reset_schema(engine: AsyncEngine) -> None:
    """Drop and recreate the projects table, discarding every project."""
    async with engine.begin() as connection:
        await connection.run_sync(
            SQLModel.metadata.drop_all, tables=[_projects_table()], checkfirst=True
        )
        await connection.run_sync(
            SQLModel.metadata.create_all, tables=[_projects_table()], checkfirst=True
        )


class BootstrapState(StrEnum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class BootstrapInitializer:
    """Per-instance state cell guarding the first-request schema check."""

    def __init__(self) -> None:
        self._state = BootstrapState.UNINITIALIZED
        self._lock = asyncio.Lock()

    @property
    def state(self) -> BootstrapState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is BootstrapState.INITIALIZED

    async def ensure_initialized(self, engine: AsyncEngine | None = None) -> None:
        """Check for the projects table once, creating it when absent.

        Never raises on store errors: they are logged and the instance
        proceeds degraded.
        """
        if self.is_initialized:
            return

        async with self._lock:
            if self.is_initialized:
                return
            try:
                await self._initialize(engine or get_engine())
            finally:
                self._state = BootstrapState.INITIALIZED

    async def _initialize(self, engine: AsyncEngine) -> None:
        logger.info("Checking project store initialization")
        try:
            if await projects_table_exists(engine):
                logger.info("Project store schema already exists")
                return
            logger.info("Creating project store schema")
            await create_schema(engine)
            logger.info("Project store schema created")
        except (SQLAlchemyError, OSError) as e:
            error = StoreUnavailableError("Project store initialization failed")
            logger.error(
                error.detail,
                error_type=type(error).__name__,
                error=str(e),
            )

    def reset(self) -> None:
        """Reset to uninitialized. For testing only."""
        self._state = BootstrapState.UNINITIALIZED
        self._lock = asyncio.Lock()


# Process-wide initializer instance
schema_bootstrap = BootstrapInitializer()
