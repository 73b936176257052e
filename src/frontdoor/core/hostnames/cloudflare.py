"""Custom hostname client using the Cloudflare for SaaS API.

Every call degrades to a logged warning: a missing zone configuration or a
failing API never propagates to the caller.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from pydantic import BaseModel, Field

from src.frontdoor.core.config import get_settings
from src.frontdoor.core.logging import get_logger

logger = get_logger(__name__)

# SSL settings requested for every new custom hostname
_SSL_OPTIONS: dict[str, Any] = {
    "method": "http",
    "type": "dv",
    "settings": {
        "http2": "on",
        "min_tls_version": "1.2",
        "tls_1_3": "on",
    },
}


class SslStatus(BaseModel):
    status: str
    validation_method: str | None = None


class CustomHostnameStatus(BaseModel):
    """Status of a custom hostname as reported by the zone."""

    status: str  # active, pending, error, not_found (zone may report finer states)
    ssl: SslStatus | None = None
    verification_errors: list[str] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status == "active"


def _zone_config() -> tuple[str, dict[str, str]] | None:
    """Return (custom_hostnames URL, auth headers), or None when unconfigured."""
    settings = get_settings()
    if not settings.cloudflare_zone_id or not settings.cloudflare_api_token:
        return None
    url = (
        f"{settings.cloudflare_api_base_url.rstrip('/')}"
        f"/zones/{settings.cloudflare_zone_id}/custom_hostnames"
    )
    return url, {"Authorization": f"Bearer {settings.cloudflare_api_token}"}


@asynccontextmanager
async def _client(client: httpx.AsyncClient | None) -> AsyncGenerator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.upstream_timeout_seconds) as owned:
        yield owned


async def _find_hostname(
    client: httpx.AsyncClient, url: str, headers: dict[str, str], hostname: str
) -> dict[str, Any] | None:
    response = await client.get(url, headers=headers, params={"hostname": hostname})
    response.raise_for_status()
    results = response.json().get("result") or []
    return results[0] if results else None


async def register_custom_hostname(
    hostname: str, client: httpx.AsyncClient | None = None
) -> bool:
    """Register a custom hostname with HTTP DV certificate issuance.

    Returns:
        True if the zone accepted the hostname, False otherwise
    """
    config = _zone_config()
    if config is None:
        logger.warning("Custom hostname API not configured", hostname=hostname)
        return False
    url, headers = config

    try:
        async with _client(client) as http:
            response = await http.post(
                url,
                headers=headers,
                json={"hostname": hostname, "ssl": _SSL_OPTIONS},
            )
    except httpx.HTTPError as e:
        logger.error("Error creating custom hostname", hostname=hostname, error=str(e))
        return False

    if response.is_error:
        logger.error(
            "Failed to create custom hostname",
            hostname=hostname,
            status=response.status_code,
            body=response.text[:500],
        )
        return False

    logger.info("Custom hostname created", hostname=hostname)
    return True


async def get_custom_hostname_status(
    hostname: str, client: httpx.AsyncClient | None = None
) -> CustomHostnameStatus:
    """Look up verification and certificate status for a hostname."""
    config = _zone_config()
    if config is None:
        return CustomHostnameStatus(status="error", verification_errors=["API not configured"])
    url, headers = config

    try:
        async with _client(client) as http:
            data = await _find_hostname(http, url, headers, hostname)
    except httpx.HTTPStatusError as e:
        logger.error(
            "Failed to get custom hostname status",
            hostname=hostname,
            status=e.response.status_code,
        )
        return CustomHostnameStatus(status="error", verification_errors=["API request failed"])
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Error getting custom hostname status", hostname=hostname, error=str(e))
        return CustomHostnameStatus(status="error", verification_errors=["Network error"])

    if data is None:
        return CustomHostnameStatus(status="not_found")

    ssl_data = data.get("ssl")
    return CustomHostnameStatus(
        status=data.get("status", "error"),
        ssl=SslStatus(
            status=ssl_data.get("status", "error"),
            validation_method=ssl_data.get("method") or ssl_data.get("validation_method"),
        )
        if ssl_data
        else None,
        verification_errors=[str(error) for error in data.get("verification_errors") or []],
    )


async def deregister_custom_hostname(
    hostname: str, client: httpx.AsyncClient | None = None
) -> bool:
    """Remove a custom hostname from the zone.

    Returns:
        True if the hostname was deleted, False if missing or on error
    """
    config = _zone_config()
    if config is None:
        return False
    url, headers = config

    try:
        async with _client(client) as http:
            data = await _find_hostname(http, url, headers, hostname)
            if data is None:
                logger.warning("Custom hostname not found", hostname=hostname)
                return False
            response = await http.delete(f"{url}/{data['id']}", headers=headers)
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Error deleting custom hostname", hostname=hostname, error=str(e))
        return False

    if response.is_error:
        logger.error(
            "Failed to delete custom hostname",
            hostname=hostname,
            status=response.status_code,
        )
        return False

    logger.info("Custom hostname deleted", hostname=hostname)
    return True
