"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.frontdoor.api.dependencies.db import DBSession
from src.frontdoor.api.dependencies.repositories import ProjectRepo, Registry
from src.frontdoor.services import ProjectService


def get_project_service(
    project_repo: ProjectRepo,
    session: DBSession,
    registry: Registry,
) -> ProjectService:
    """Get project service."""
    return ProjectService(project_repo, session, registry)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
