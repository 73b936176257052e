"""Project endpoints - creation and custom domain status."""

from fastapi import APIRouter, status

from src.frontdoor.api.dependencies import ProjectServiceDep
from src.frontdoor.schemas import (
    CustomDomainStatusRead,
    ProjectCreate,
    ProjectCreated,
    ProjectRead,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post(
    "",
    response_model=ProjectCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Create a project, deploy its script and register its custom hostname.",
    responses={
        201: {"description": "Project created"},
        400: {"description": "Missing fields or invalid subdomain"},
        409: {"description": "Subdomain or custom hostname already exists"},
    },
)
async def create_project(
    request: ProjectCreate,
    service: ProjectServiceDep,
) -> ProjectCreated:
    """Create a new project."""
    project = await service.create_project(
        name=request.name,
        subdomain=request.subdomain,
        script_content=request.script_content,
        custom_hostname=request.custom_hostname,
    )
    return ProjectCreated(project=ProjectRead.model_validate(project))


@router.get(
    "/{subdomain}/custom-domain-status",
    response_model=CustomDomainStatusRead,
    response_model_exclude_none=True,
    summary="Custom domain status",
    description="Public URL of a project and, if it has one, its custom hostname state.",
    responses={
        200: {"description": "Custom domain status"},
        404: {"description": "Project not found"},
    },
)
async def get_custom_domain_status(
    subdomain: str,
    service: ProjectServiceDep,
) -> CustomDomainStatusRead:
    """Get custom domain status for a project."""
    return await service.get_custom_domain_status(subdomain)
