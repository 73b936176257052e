"""Project service - creation, custom domain status and platform reset.

The Project Store is the source of truth. Registry entries and custom
hostnames are derived from it and written after the row is committed; a
failure there leaves a reachable project that dispatch can repair.
"""

import asyncio
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.frontdoor.core.config import get_settings
from src.frontdoor.core.db import get_engine, reset_schema
from src.frontdoor.core.exceptions import (
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.frontdoor.core.hostnames import (
    deregister_custom_hostname,
    get_custom_hostname_status,
    register_custom_hostname,
)
from src.frontdoor.core.logging import get_logger
from src.frontdoor.models import Project
from src.frontdoor.models.base import utc_now
from src.frontdoor.registry import ExecutionRegistry, ScriptInfo
from src.frontdoor.repositories import ProjectRepository
from src.frontdoor.schemas import CustomDomainStatusRead

logger = get_logger(__name__)

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9-]+$")

MISSING_FIELDS_DETAIL = "Missing required fields: name, subdomain, script_content"
INVALID_SUBDOMAIN_DETAIL = "Subdomain must only contain lowercase letters, numbers, and hyphens"
SUBDOMAIN_TAKEN_DETAIL = "Subdomain already exists"
HOSTNAME_TAKEN_DETAIL = "Custom hostname already exists"


def is_valid_subdomain(subdomain: str) -> bool:
    return SUBDOMAIN_PATTERN.fullmatch(subdomain) is not None


def worker_url(subdomain: str) -> str:
    """Public URL a project is reachable at without a custom hostname."""
    settings = get_settings()
    if settings.platform_base_domain:
        return f"https://{subdomain}.{settings.platform_base_domain}"
    return f"https://{settings.workers_dev_subdomain}.workers.dev/{subdomain}"


class ProjectService:
    """Service for tenant project lifecycle."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        session: AsyncSession,
        registry: ExecutionRegistry,
        engine: AsyncEngine | None = None,
    ):
        self.project_repo = project_repo
        self.session = session
        self.registry = registry
        self.engine = engine

    async def create_project(
        self,
        name: str | None,
        subdomain: str | None,
        script_content: str | None,
        custom_hostname: str | None = None,
    ) -> Project:
        """Create a project, deploy its script and register its custom hostname.

        Validation runs in order and stops at the first failure, before any
        write: required fields, subdomain format, subdomain free, custom
        hostname free.

        Raises:
            ValidationError: Missing field or malformed subdomain
            ConflictError: Subdomain or custom hostname already taken
        """
        if not name or not subdomain or not script_content:
            raise ValidationError(MISSING_FIELDS_DETAIL)
        if not is_valid_subdomain(subdomain):
            raise ValidationError(INVALID_SUBDOMAIN_DETAIL, subdomain=subdomain)
        if await self.project_repo.exists_by_subdomain(subdomain):
            raise ConflictError(SUBDOMAIN_TAKEN_DETAIL, subdomain=subdomain)
        if custom_hostname and await self.project_repo.exists_by_custom_hostname(
            custom_hostname
        ):
            raise ConflictError(HOSTNAME_TAKEN_DETAIL, custom_hostname=custom_hostname)

        now = utc_now()
        project = Project(
            name=name,
            subdomain=subdomain,
            custom_hostname=custom_hostname or None,
            script_content=script_content,
            created_on=now,
            modified_on=now,
        )
        self.project_repo.add(project)

        # Unique constraints catch a concurrent create that passed the checks
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if "custom_hostname" in str(e.orig):
                raise ConflictError(
                    HOSTNAME_TAKEN_DETAIL, custom_hostname=custom_hostname
                ) from e
            raise ConflictError(SUBDOMAIN_TAKEN_DETAIL, subdomain=subdomain) from e

        logger.info("Project created", subdomain=subdomain, project_id=str(project.id))

        try:
            await self.registry.put(subdomain, script_content)
        except UpstreamError as e:
            # Dispatch redeploys from script_content on the first request
            logger.warning(
                "Script deploy failed after project creation",
                subdomain=subdomain,
                error=e.detail,
            )

        if project.custom_hostname:
            registered = await register_custom_hostname(project.custom_hostname)
            if not registered:
                logger.warning(
                    "Failed to create custom hostname",
                    subdomain=subdomain,
                    custom_hostname=project.custom_hostname,
                )

        return project

    async def get_custom_domain_status(self, subdomain: str) -> CustomDomainStatusRead:
        """Report a project's public URL and custom hostname verification state.

        Raises:
            NotFoundError: No project with this subdomain
        """
        project = await self.project_repo.get_by_subdomain(subdomain)
        if project is None:
            raise NotFoundError("Project not found", subdomain=subdomain)

        url = worker_url(subdomain)
        if not project.custom_hostname:
            return CustomDomainStatusRead(has_custom_domain=False, worker_url=url)

        status = await get_custom_hostname_status(project.custom_hostname)
        return CustomDomainStatusRead(
            has_custom_domain=True,
            worker_url=url,
            custom_domain=project.custom_hostname,
            status=status.status,
            ssl_status=status.ssl.status if status.ssl else None,
            verification_errors=status.verification_errors,
            is_active=status.is_active,
        )

    async def list_projects(self) -> list[Project]:
        return await self.project_repo.list_all()

    async def list_scripts(self) -> list[ScriptInfo]:
        """List deployed scripts. Raises UpstreamError when the registry fails."""
        return await self.registry.list()

    async def reset_platform(self) -> None:
        """Clear the registry, custom hostnames and the Project Store together.

        Raises:
            UpstreamError: Listing or deleting registry entries failed
        """
        scripts = await self.registry.list()
        await asyncio.gather(*(self.registry.delete(script.id) for script in scripts))

        projects = await self.project_repo.list_all()
        hostnames = [p.custom_hostname for p in projects if p.custom_hostname]
        await asyncio.gather(*(deregister_custom_hostname(h) for h in hostnames))

        # The session's read transaction must end before the table is dropped
        await self.session.rollback()
        await reset_schema(self.engine or get_engine())

        logger.info(
            "Platform reset",
            scripts_deleted=len(scripts),
            hostnames_deregistered=len(hostnames),
            projects_deleted=len(projects),
        )
