"""Tenant dispatch middleware.

Runs ahead of the platform's own routes. Requests that resolve to a
project are answered by the project's execution context; everything else
falls through to the routes.
"""

from urllib.parse import quote, urlunsplit

from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.frontdoor.core.config import get_settings
from src.frontdoor.core.db import get_session
from src.frontdoor.core.exceptions import FrontdoorError, StoreUnavailableError, error_response
from src.frontdoor.dispatch import (
    DispatchOrchestrator,
    InboundRequest,
    TenantResolver,
    classify_request,
)
from src.frontdoor.registry import ForwardResponse, get_execution_registry
from src.frontdoor.repositories import ProjectRepository


def to_response(forwarded: ForwardResponse) -> Response:
    """Convert a tenant response, keeping repeated headers such as set-cookie."""
    response = Response(content=forwarded.body, status_code=forwarded.status_code)
    response.raw_headers = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in forwarded.headers
        if key.lower() != "content-length"
    ] + [(b"content-length", str(len(forwarded.body)).encode("latin-1"))]
    return response


def forwarded_url(request: Request) -> str:
    """Rebuild the request URL from the bytes the client sent.

    `request.url` is assembled from the decoded path, so `%3F` and `%2F`
    would turn into a query separator and a path separator.
    """
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else quote(request.url.path)
    query = request.scope.get("query_string", b"").decode("latin-1")
    return urlunsplit((request.url.scheme, request.url.netloc, path, query, ""))


class TenantDispatchMiddleware(BaseHTTPMiddleware):
    """Dispatch tenant traffic into the Execution Registry.

    Errors are rendered here: exception handlers registered on the app do
    not see exceptions raised by middleware.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        settings = get_settings()
        host = request.url.hostname or ""
        decision = classify_request(
            host=host,
            path=request.url.path,
            platform_base_domain=settings.platform_base_domain,
            admin_subdomain=settings.admin_subdomain,
        )
        if not decision.is_tenant:
            return await call_next(request)

        # Buffered once so a deploy-and-retry can replay it
        inbound = InboundRequest(
            method=request.method,
            url=forwarded_url(request),
            host=host,
            headers=[
                (key.decode("latin-1"), value.decode("latin-1"))
                for key, value in request.headers.raw
            ],
            body=await request.body(),
        )

        try:
            async with get_session() as session:
                orchestrator = DispatchOrchestrator(
                    get_execution_registry(),
                    TenantResolver(ProjectRepository(session)),
                    platform_base_domain=settings.platform_base_domain,
                    admin_subdomain=settings.admin_subdomain,
                )
                result = await orchestrator.dispatch(inbound)
        except SQLAlchemyError as e:
            return error_response(
                StoreUnavailableError("Project store unavailable", host=host, error=str(e))
            )
        except FrontdoorError as e:
            return error_response(e)

        if result is None:
            return await call_next(request)
        return to_response(result.response)
