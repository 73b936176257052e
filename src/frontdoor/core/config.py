from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Frontdoor"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Database (Project Store)
    database_url: str = "sqlite+aiosqlite:///./frontdoor.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Routing
    platform_base_domain: str | None = Field(
        default=None,
        validation_alias=AliasChoices("platform_base_domain", "custom_domain"),
    )
    admin_subdomain: str = Field(
        default="build",
        validation_alias=AliasChoices("admin_subdomain", "builder_subdomain"),
    )
    workers_dev_subdomain: str = "my-worker"

    # Execution Registry
    registry_backend: Literal["memory", "cloudflare"] = "memory"
    account_id: str | None = None
    dispatch_namespace_name: str = "frontdoor"
    dispatch_namespace_api_token: str | None = None
    dispatch_gateway_url: str | None = None  # Worker that invokes scripts in the namespace

    # Hostname/SSL oracle
    cloudflare_api_base_url: str = "https://api.cloudflare.com/client/v4"
    cloudflare_zone_id: str | None = None
    cloudflare_api_token: str | None = None

    # Outbound HTTP
    upstream_timeout_seconds: float = 30.0

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("platform_base_domain")
    @classmethod
    def normalize_platform_base_domain(cls, v: str | None) -> str | None:
        """Treat an empty value as unset and drop a leading dot."""
        if v is None:
            return None
        v = v.strip().lstrip(".")
        return v or None

    @field_validator("admin_subdomain")
    @classmethod
    def validate_admin_subdomain(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("ADMIN_SUBDOMAIN cannot be empty")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
