from src.frontdoor.schemas.project import (
    CustomDomainStatusRead,
    ProjectCreate,
    ProjectCreated,
    ProjectRead,
)

__all__ = [
    "CustomDomainStatusRead",
    "ProjectCreate",
    "ProjectCreated",
    "ProjectRead",
]
