"""Custom hostname / SSL status client.

Re-exports the hostname functions so callers import from one place.
"""

from src.frontdoor.core.hostnames.cloudflare import (
    CustomHostnameStatus,
    SslStatus,
    deregister_custom_hostname,
    get_custom_hostname_status,
    register_custom_hostname,
)

__all__ = [
    "CustomHostnameStatus",
    "SslStatus",
    "deregister_custom_hostname",
    "get_custom_hostname_status",
    "register_custom_hostname",
]
