"""Tenant dispatch: resolve, invoke, and deploy-then-retry once on a miss.

The Execution Registry is treated as a cache of the Project Store. A
project whose script is missing from the registry is redeployed from its
stored `script_content` the first time a request needs it.
"""

from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit

from src.frontdoor.core.exceptions import DispatchError, UpstreamError
from src.frontdoor.core.logging import bind_tenant_context, get_logger
from src.frontdoor.dispatch.classifier import (
    DEFAULT_ADMIN_SUBDOMAIN,
    RoutingDecision,
    classify_request,
)
from src.frontdoor.dispatch.resolver import TenantResolver
from src.frontdoor.dispatch.rewriter import rewrite_request
from src.frontdoor.models import Project
from src.frontdoor.registry import (
    ExecutionRegistry,
    ForwardResponse,
    InvocationOutcome,
    InvocationResult,
)

logger = get_logger(__name__)


class DispatchState(StrEnum):
    RESOLVING = "resolving"
    INVOKING = "invoking"
    DEPLOY_REQUIRED = "deploy_required"
    DEPLOYING = "deploying"
    RETRYING = "retrying"
    INVOKED = "invoked"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchResult:
    """Response from a tenant's execution context."""

    project: Project
    decision: RoutingDecision
    response: ForwardResponse
    deployed: bool = False


@dataclass(frozen=True)
class InboundRequest:
    """The parts of an inbound request dispatch needs. Body already buffered."""

    method: str
    url: str
    host: str
    headers: list[tuple[str, str]]
    body: bytes = b""

    @property
    def path(self) -> str:
        return urlsplit(self.url).path


def _transition(state: DispatchState, **context: object) -> None:
    logger.debug("Dispatch state", state=state.value, **context)


class DispatchOrchestrator:
    """Runs one request through the dispatch state machine.

    Holds no per-request state; a single instance may serve concurrent
    requests as long as its resolver's session is not shared.
    """

    def __init__(
        self,
        registry: ExecutionRegistry,
        resolver: TenantResolver,
        *,
        platform_base_domain: str | None = None,
        admin_subdomain: str = DEFAULT_ADMIN_SUBDOMAIN,
    ):
        self.registry = registry
        self.resolver = resolver
        self.platform_base_domain = platform_base_domain
        self.admin_subdomain = admin_subdomain

    def classify(self, request: InboundRequest) -> RoutingDecision:
        return classify_request(
            host=request.host,
            path=request.path,
            platform_base_domain=self.platform_base_domain,
            admin_subdomain=self.admin_subdomain,
        )

    async def dispatch(self, request: InboundRequest) -> DispatchResult | None:
        """Dispatch a request to its tenant's execution context.

        Returns:
            DispatchResult, or None when the request is platform traffic or
            names no known project (the caller falls through to local routes)

        Raises:
            DispatchError: Invocation failed, or deploy-and-retry did not
                produce a response
        """
        _transition(DispatchState.RESOLVING, host=request.host, path=request.path)
        decision = self.classify(request)
        if not decision.is_tenant:
            return None

        project = await self.resolver.resolve(decision)
        if project is None:
            logger.debug(
                "No project for tenant key",
                candidate_key=decision.candidate_key,
                routing_mode=decision.mode.value,
            )
            return None

        bind_tenant_context(project.subdomain, decision.mode.value)

        _transition(DispatchState.INVOKING)
        result = await self._invoke(project, decision, request)
        if result.outcome is InvocationOutcome.INVOKED:
            return self._invoked(project, decision, result, deployed=False)
        if result.outcome is InvocationOutcome.FAILED:
            _transition(DispatchState.FAILED)
            raise DispatchError(
                "Tenant invocation failed",
                subdomain=project.subdomain,
                error=result.error,
            )

        _transition(DispatchState.DEPLOY_REQUIRED)
        await self._deploy(project)

        _transition(DispatchState.RETRYING)
        result = await self._invoke(project, decision, request)
        if result.outcome is InvocationOutcome.INVOKED:
            return self._invoked(project, decision, result, deployed=True)

        _transition(DispatchState.FAILED)
        raise DispatchError(
            "Tenant invocation failed after deploy",
            subdomain=project.subdomain,
            outcome=result.outcome.value,
            error=result.error,
        )

    async def _invoke(
        self, project: Project, decision: RoutingDecision, request: InboundRequest
    ) -> InvocationResult:
        # Fresh handle and freshly rewritten request on every attempt
        forward = rewrite_request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            body=request.body,
            decision=decision,
        )
        return await self.registry.get(project.subdomain).invoke(forward)

    async def _deploy(self, project: Project) -> None:
        _transition(DispatchState.DEPLOYING)
        logger.info("Deploying script on dispatch", subdomain=project.subdomain)
        try:
            await self.registry.put(project.subdomain, project.script_content)
        except UpstreamError as e:
            _transition(DispatchState.FAILED)
            raise DispatchError(
                "Deploy on dispatch failed",
                subdomain=project.subdomain,
                upstream=e.detail,
                **e.context,
            ) from e

    def _invoked(
        self,
        project: Project,
        decision: RoutingDecision,
        result: InvocationResult,
        *,
        deployed: bool,
    ) -> DispatchResult:
        if result.response is None:
            _transition(DispatchState.FAILED)
            raise DispatchError("Tenant returned no response", subdomain=project.subdomain)
        _transition(DispatchState.INVOKED, deployed=deployed)
        return DispatchResult(
            project=project,
            decision=decision,
            response=result.response,
            deployed=deployed,
        )
