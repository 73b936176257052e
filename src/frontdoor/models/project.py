"""Project model - one row per tenant site."""

from datetime import datetime
from typing import Final
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.frontdoor.models.base import utc_now

PROJECTS_TABLE: Final[str] = "projects"


class Project(SQLModel, table=True):
    """Tenant project record.

    `subdomain` doubles as the name of the project's Execution Registry
    entry. That entry is derived state: it may be missing while the row
    exists, and dispatch redeploys it from `script_content` on demand.
    """

    __tablename__ = PROJECTS_TABLE

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200)
    subdomain: str = Field(max_length=63, unique=True, index=True)
    custom_hostname: str | None = Field(default=None, max_length=255, unique=True, index=True)
    script_content: str
    created_on: datetime = Field(default_factory=utc_now)
    modified_on: datetime = Field(default_factory=utc_now)
