"""Execution Registry backed by a Workers for Platforms dispatch namespace.

Script management goes through the account REST API. Invocation goes
through a dispatch gateway: a Worker bound to the namespace that runs the
script named in the `X-Dispatch-Script` header and answers
`404 Worker not found` when that script is not deployed.
"""

from __future__ import annotations

import json

import httpx

from src.frontdoor.core.exceptions import UpstreamError
from src.frontdoor.core.logging import get_logger
from src.frontdoor.registry.base import (
    ExecutionRegistry,
    ForwardRequest,
    ForwardResponse,
    InvocationResult,
    ScriptInfo,
)

logger = get_logger(__name__)

DISPATCH_SCRIPT_HEADER = "x-dispatch-script"
NOT_PROVISIONED_MARKER = "Worker not found"

# Hop-by-hop and transport-owned headers are re-derived on each leg
_REQUEST_SKIP_HEADERS = frozenset(
    {"host", "connection", "keep-alive", "transfer-encoding", "content-length", "upgrade"}
)
_RESPONSE_SKIP_HEADERS = frozenset(
    {"connection", "keep-alive", "transfer-encoding", "content-length", "content-encoding"}
)


class CloudflareDispatchRegistry(ExecutionRegistry):
    """Registry client for one dispatch namespace."""

    def __init__(
        self,
        *,
        account_id: str | None,
        namespace: str,
        api_token: str | None,
        gateway_url: str | None,
        api_base_url: str = "https://api.cloudflare.com/client/v4",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._account_id = account_id
        self._namespace = namespace
        self._api_token = api_token
        self._gateway_url = gateway_url
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def scripts_uri(self) -> str:
        return (
            f"{self._api_base_url}/accounts/{self._account_id}"
            f"/workers/dispatch/namespaces/{self._namespace}/scripts"
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _api_headers(self) -> dict[str, str]:
        if not self._account_id or not self._api_token:
            raise UpstreamError(
                "Dispatch namespace API not configured",
                namespace=self._namespace,
            )
        return {"Authorization": f"Bearer {self._api_token}"}

    async def _api_request(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        headers = self._api_headers()
        try:
            response = await self._get_client().request(method, url, headers=headers, **kwargs)  # type: ignore[arg-type]
        except httpx.HTTPError as e:
            raise UpstreamError(
                "Dispatch namespace API request failed",
                method=method,
                url=url,
                error=str(e),
            ) from e
        if response.is_error:
            raise UpstreamError(
                "Dispatch namespace API returned an error",
                method=method,
                url=url,
                status=response.status_code,
                body=response.text[:500],
            )
        return response

    async def put(self, name: str, code: str) -> None:
        module_name = f"{name}.mjs"
        metadata = {"main_module": module_name}
        files = {
            "metadata": ("metadata.json", json.dumps(metadata), "application/json"),
            "script": (module_name, code, "application/javascript+module"),
        }
        await self._api_request("PUT", f"{self.scripts_uri}/{name}", files=files)
        logger.info("Script deployed to dispatch namespace", script=name, namespace=self._namespace)

    async def list(self) -> list[ScriptInfo]:
        response = await self._api_request("GET", self.scripts_uri)
        data = response.json()
        return [
            ScriptInfo(
                id=item["id"],
                created_on=item.get("created_on", ""),
                modified_on=item.get("modified_on", ""),
            )
            for item in data.get("result") or []
        ]

    async def delete(self, name: str) -> None:
        await self._api_request("DELETE", f"{self.scripts_uri}/{name}")
        logger.info("Script deleted from dispatch namespace", script=name, namespace=self._namespace)

    async def invoke(self, name: str, request: ForwardRequest) -> InvocationResult:
        if not self._gateway_url:
            return InvocationResult.failed("Dispatch gateway not configured")

        original = httpx.URL(request.url)
        target = httpx.URL(self._gateway_url).copy_with(raw_path=original.raw_path)
        headers = [
            (key, value)
            for key, value in request.headers
            if key.lower() not in _REQUEST_SKIP_HEADERS
        ]
        headers.append((DISPATCH_SCRIPT_HEADER, name))
        if original.host:
            headers.append(("x-forwarded-host", original.host))

        try:
            response = await self._get_client().request(
                request.method,
                target,
                headers=headers,
                content=request.body,
            )
        except httpx.HTTPError as e:
            return InvocationResult.failed(f"{type(e).__name__}: {e}")

        if response.status_code == 404 and response.text.startswith(NOT_PROVISIONED_MARKER):
            return InvocationResult.not_provisioned(name)

        return InvocationResult.invoked(
            ForwardResponse(
                status_code=response.status_code,
                headers=[
                    (key, value)
                    for key, value in response.headers.multi_items()
                    if key.lower() not in _RESPONSE_SKIP_HEADERS
                ],
                body=response.content,
            )
        )
