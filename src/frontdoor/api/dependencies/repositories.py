"""Repository and registry factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.frontdoor.api.dependencies.db import DBSession
from src.frontdoor.registry import ExecutionRegistry, get_execution_registry
from src.frontdoor.repositories import ProjectRepository


def get_project_repository(session: DBSession) -> ProjectRepository:
    """Get project repository bound to the request session."""
    return ProjectRepository(session)


def get_registry() -> ExecutionRegistry:
    """Get the process-wide Execution Registry."""
    return get_execution_registry()


ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
Registry = Annotated[ExecutionRegistry, Depends(get_registry)]
