"""Tenant dispatch pipeline: classify, resolve, rewrite, invoke."""

from src.frontdoor.dispatch.classifier import (
    DEFAULT_ADMIN_SUBDOMAIN,
    RESERVED_PATH_SEGMENTS,
    RoutingDecision,
    RoutingMode,
    classify_request,
)
from src.frontdoor.dispatch.orchestrator import (
    DispatchOrchestrator,
    DispatchResult,
    DispatchState,
    InboundRequest,
)
from src.frontdoor.dispatch.resolver import TenantResolver
from src.frontdoor.dispatch.rewriter import rewrite_request, strip_path_prefix

__all__ = [
    # Classification
    "DEFAULT_ADMIN_SUBDOMAIN",
    "RESERVED_PATH_SEGMENTS",
    "RoutingDecision",
    "RoutingMode",
    "classify_request",
    # Resolution
    "TenantResolver",
    # Rewriting
    "rewrite_request",
    "strip_path_prefix",
    # Orchestration
    "DispatchOrchestrator",
    "DispatchResult",
    "DispatchState",
    "InboundRequest",
]
