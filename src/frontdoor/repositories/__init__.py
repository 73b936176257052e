"""Repository layer - data access abstraction."""

from src.frontdoor.repositories.base import BaseRepository
from src.frontdoor.repositories.project import ProjectRepository

__all__ = [
    "BaseRepository",
    "ProjectRepository",
]
