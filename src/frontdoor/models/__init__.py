"""Model exports.

Import from here: `from src.frontdoor.models import Project`
"""

from src.frontdoor.models.project import PROJECTS_TABLE, Project

__all__ = [
    "PROJECTS_TABLE",
    "Project",
]
