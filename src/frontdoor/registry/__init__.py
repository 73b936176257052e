"""Execution Registry - backends and process-wide client.

The registry client is created lazily from settings on first use and reused
thereafter. Credentials are only checked when a call needs them.
"""

from src.frontdoor.core.config import get_settings
from src.frontdoor.core.logging import get_logger
from src.frontdoor.registry.base import (
    ExecutionRegistry,
    ForwardRequest,
    ForwardResponse,
    InvocationOutcome,
    InvocationResult,
    ScriptHandle,
    ScriptInfo,
)
from src.frontdoor.registry.cloudflare import CloudflareDispatchRegistry
from src.frontdoor.registry.memory import InMemoryExecutionRegistry, echo_runner

logger = get_logger(__name__)

_registry: ExecutionRegistry | None = None


def get_execution_registry() -> ExecutionRegistry:
    """Get the Execution Registry for the configured backend."""
    global _registry
    if _registry is None:
        settings = get_settings()
        if settings.registry_backend == "cloudflare":
            _registry = CloudflareDispatchRegistry(
                account_id=settings.account_id,
                namespace=settings.dispatch_namespace_name,
                api_token=settings.dispatch_namespace_api_token,
                gateway_url=settings.dispatch_gateway_url,
                api_base_url=settings.cloudflare_api_base_url,
                timeout=settings.upstream_timeout_seconds,
            )
        else:
            _registry = InMemoryExecutionRegistry()
        logger.info("Execution registry ready", backend=settings.registry_backend)
    return _registry


def set_execution_registry(registry: ExecutionRegistry) -> None:
    """Replace the process-wide registry. For testing and embedding."""
    global _registry
    _registry = registry


async def close_execution_registry() -> None:
    """Close the registry client. Call during shutdown."""
    global _registry
    if _registry is not None:
        await _registry.aclose()
        _registry = None


__all__ = [
    "CloudflareDispatchRegistry",
    "ExecutionRegistry",
    "ForwardRequest",
    "ForwardResponse",
    "InMemoryExecutionRegistry",
    "InvocationOutcome",
    "InvocationResult",
    "ScriptHandle",
    "ScriptInfo",
    "close_execution_registry",
    "echo_runner",
    "get_execution_registry",
    "set_execution_registry",
]
