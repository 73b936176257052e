"""Database utilities - engine, session, schema bootstrap."""

from src.frontdoor.core.db.bootstrap import (
    BootstrapInitializer,
    BootstrapState,
    create_schema,
    projects_table_exists,
    reset_schema,
    schema_bootstrap,
)
from src.frontdoor.core.db.engine import dispose_engine, get_engine
from src.frontdoor.core.db.session import get_session

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    # Schema bootstrap
    "BootstrapInitializer",
    "BootstrapState",
    "create_schema",
    "projects_table_exists",
    "reset_schema",
    "schema_bootstrap",
]
