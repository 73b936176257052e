"""Tenant resolution: routing decision to Project record."""

from src.frontdoor.dispatch.classifier import RoutingDecision, RoutingMode
from src.frontdoor.models import Project
from src.frontdoor.repositories import ProjectRepository


class TenantResolver:
    """Maps a tenant key onto a stored project.

    Not-found is a normal outcome, returned as None.
    """

    def __init__(self, project_repo: ProjectRepository):
        self.project_repo = project_repo

    async def resolve(self, decision: RoutingDecision) -> Project | None:
        if decision.candidate_key is None:
            return None
        if decision.mode is RoutingMode.TENANT_BY_SUBDOMAIN:
            return await self.project_repo.get_by_subdomain(decision.candidate_key)
        if decision.mode is RoutingMode.TENANT_BY_HOSTNAME:
            return await self.project_repo.get_by_custom_hostname(decision.candidate_key)
        return None
