"""Repository for Project entity."""

from sqlmodel import select

from src.frontdoor.models import Project
from src.frontdoor.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project records.

    Lookups are exact and case-sensitive; keys are compared as received.
    """

    model = Project

    async def get_by_subdomain(self, subdomain: str) -> Project | None:
        """Get project by subdomain."""
        result = await self.session.execute(select(Project).where(Project.subdomain == subdomain))
        return result.scalar_one_or_none()

    async def get_by_custom_hostname(self, hostname: str) -> Project | None:
        """Get project by custom hostname."""
        result = await self.session.execute(
            select(Project).where(Project.custom_hostname == hostname)
        )
        return result.scalar_one_or_none()

    async def exists_by_subdomain(self, subdomain: str) -> bool:
        """Check if a project with the given subdomain exists."""
        return await self.get_by_subdomain(subdomain) is not None

    async def exists_by_custom_hostname(self, hostname: str) -> bool:
        """Check if a project already claims the given custom hostname."""
        return await self.get_by_custom_hostname(hostname) is not None

    async def list_all(self) -> list[Project]:
        """List all projects, oldest first."""
        result = await self.session.execute(select(Project).order_by(Project.created_on))
        return list(result.scalars().all())
