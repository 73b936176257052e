"""FastAPI dependency injection definitions."""

from src.frontdoor.api.dependencies.db import DBSession, get_db_session
from src.frontdoor.api.dependencies.repositories import (
    ProjectRepo,
    Registry,
    get_project_repository,
    get_registry,
)
from src.frontdoor.api.dependencies.services import ProjectServiceDep, get_project_service

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "ProjectRepo",
    "Registry",
    "get_project_repository",
    "get_registry",
    # Services
    "ProjectServiceDep",
    "get_project_service",
]
