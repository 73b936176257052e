"""Project schemas for API request/response."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, field_validator


class ProjectCreate(BaseModel):
    """Schema for creating a project.

    Every field is optional here so that presence is checked by the service,
    in order, with the same 400 as the other creation failures.
    """

    name: str | None = None
    subdomain: str | None = None
    script_content: str | None = None
    custom_hostname: str | None = None

    @field_validator("custom_hostname")
    @classmethod
    def validate_custom_hostname(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: UUID
    name: str
    subdomain: str
    custom_hostname: str | None
    created_on: datetime
    modified_on: datetime

    model_config = {"from_attributes": True}


class ProjectCreated(BaseModel):
    detail: str = "Project created successfully"
    project: ProjectRead


class CustomDomainStatusRead(BaseModel):
    """Custom domain status for a project.

    Only `has_custom_domain` and `worker_url` are present for projects
    without a custom hostname.
    """

    has_custom_domain: bool
    worker_url: str
    custom_domain: str | None = None
    status: str | None = None
    ssl_status: str | None = None
    verification_errors: list[str] | None = None
    is_active: bool | None = None
