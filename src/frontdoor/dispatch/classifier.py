"""Request classification: platform-admin traffic versus tenant traffic.

Pure and synchronous; no store access.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

DEFAULT_ADMIN_SUBDOMAIN: Final[str] = "build"

# First path segments served by the platform itself in path-based routing
RESERVED_PATH_SEGMENTS: Final[frozenset[str]] = frozenset(
    {"admin", "projects", "upload", "init", "dispatch", "favicon.ico"}
)


class RoutingMode(StrEnum):
    PLATFORM_ADMIN = "platform-admin"
    TENANT_BY_SUBDOMAIN = "tenant-by-subdomain"
    TENANT_BY_HOSTNAME = "tenant-by-hostname"


@dataclass(frozen=True)
class RoutingDecision:
    """Classification result for one request."""

    mode: RoutingMode
    candidate_key: str | None = None
    path_prefix_to_strip: str | None = None

    @property
    def is_tenant(self) -> bool:
        return self.mode is not RoutingMode.PLATFORM_ADMIN


PLATFORM_ADMIN = RoutingDecision(mode=RoutingMode.PLATFORM_ADMIN)


def classify_request(
    *,
    host: str,
    path: str,
    platform_base_domain: str | None,
    admin_subdomain: str = DEFAULT_ADMIN_SUBDOMAIN,
) -> RoutingDecision:
    """
    Decide how a request is routed.

    With a platform base domain, the host decides: `<key>.<base>` is a
    tenant subdomain (or the admin UI when `<key>` is the admin label), any
    other host is a candidate custom hostname. Without one, tenants share
    the host and are addressed by the first path segment, which is then
    stripped before forwarding.

    Args:
        host: Request hostname, as received (no port)
        path: Request path (no query string)
        platform_base_domain: Base domain tenants hang off, if configured
        admin_subdomain: Label reserved for the platform's own UI

    Returns:
        RoutingDecision with the mode, tenant key and prefix to strip
    """
    if platform_base_domain:
        suffix = f".{platform_base_domain}"
        if host.endswith(suffix):
            candidate = host[: -len(suffix)]
            if candidate == admin_subdomain:
                return PLATFORM_ADMIN
            return RoutingDecision(mode=RoutingMode.TENANT_BY_SUBDOMAIN, candidate_key=candidate)
        return RoutingDecision(mode=RoutingMode.TENANT_BY_HOSTNAME, candidate_key=host)

    if not path or path == "/":
        return PLATFORM_ADMIN

    segment = path.removeprefix("/").split("/", 1)[0]
    if not segment or segment in RESERVED_PATH_SEGMENTS:
        return PLATFORM_ADMIN

    return RoutingDecision(
        mode=RoutingMode.TENANT_BY_SUBDOMAIN,
        candidate_key=segment,
        path_prefix_to_strip=f"/{segment}",
    )
