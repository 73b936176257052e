"""Tests for the dispatch namespace registry client."""

import httpx
import pytest

from src.frontdoor.core.exceptions import UpstreamError
from src.frontdoor.registry import (
    CloudflareDispatchRegistry,
    ForwardRequest,
    InvocationOutcome,
)

pytestmark = pytest.mark.unit

API = "https://api.cloudflare.test/client/v4"
GATEWAY = "https://gateway.workers.test"
SCRIPTS = f"{API}/accounts/acct-1/workers/dispatch/namespaces/sites/scripts"


def _registry(handler, **overrides) -> CloudflareDispatchRegistry:
    options = {
        "account_id": "acct-1",
        "namespace": "sites",
        "api_token": "ns-token",
        "gateway_url": GATEWAY,
        "api_base_url": API,
        "transport": httpx.MockTransport(handler),
    }
    options.update(overrides)
    return CloudflareDispatchRegistry(**options)


async def test_put_uploads_module_with_metadata():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    registry = _registry(handler)
    await registry.put("demo", "export default {};")
    await registry.aclose()

    [request] = seen
    assert request.method == "PUT"
    assert str(request.url) == f"{SCRIPTS}/demo"
    assert request.headers["authorization"] == "Bearer ns-token"
    assert b'filename="metadata.json"' in request.content
    assert b'"main_module": "demo.mjs"' in request.content
    assert b'filename="demo.mjs"' in request.content
    assert b"application/javascript+module" in request.content
    assert b"export default {};" in request.content


async def test_list_parses_result():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert str(request.url) == SCRIPTS
        return httpx.Response(
            200,
            json={
                "result": [
                    {
                        "id": "demo",
                        "created_on": "2026-01-01T00:00:00Z",
                        "modified_on": "2026-01-02T00:00:00Z",
                    }
                ]
            },
        )

    scripts = await _registry(handler).list()

    assert [s.id for s in scripts] == ["demo"]
    assert scripts[0].modified_on == "2026-01-02T00:00:00Z"


async def test_delete_targets_script():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    await _registry(handler).delete("demo")

    assert seen[0].method == "DELETE"
    assert str(seen[0].url) == f"{SCRIPTS}/demo"


async def test_missing_credentials_raise_upstream_error():
    registry = _registry(lambda request: httpx.Response(200), api_token=None)

    with pytest.raises(UpstreamError, match="not configured"):
        await registry.list()


async def test_api_error_raises_upstream_error():
    registry = _registry(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(UpstreamError) as exc_info:
        await registry.put("demo", "code")

    assert exc_info.value.context["status"] == 500


async def test_network_error_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError):
        await _registry(handler).delete("demo")


async def test_invoke_forwards_to_gateway_with_script_header():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            201,
            headers=[("content-type", "text/plain"), ("set-cookie", "a=1"), ("set-cookie", "b=2")],
            text="created",
        )

    registry = _registry(handler)
    result = await registry.get("demo").invoke(
        ForwardRequest(
            method="POST",
            url="https://demo.saasysite.me/items?page=2",
            headers=[("host", "demo.saasysite.me"), ("content-type", "text/plain")],
            body=b"hello",
        )
    )

    [request] = seen
    assert str(request.url) == f"{GATEWAY}/items?page=2"
    assert request.method == "POST"
    assert request.headers["x-dispatch-script"] == "demo"
    assert request.headers["x-forwarded-host"] == "demo.saasysite.me"
    assert request.headers["host"] == "gateway.workers.test"
    assert request.content == b"hello"

    assert result.outcome is InvocationOutcome.INVOKED
    assert result.response is not None
    assert result.response.status_code == 201
    assert result.response.body == b"created"
    cookies = [v for k, v in result.response.headers if k.lower() == "set-cookie"]
    assert cookies == ["a=1", "b=2"]


async def test_worker_not_found_is_not_provisioned():
    registry = _registry(lambda request: httpx.Response(404, text="Worker not found: demo"))

    result = await registry.get("demo").invoke(ForwardRequest(method="GET", url="https://x.test/"))

    assert result.outcome is InvocationOutcome.NOT_PROVISIONED


async def test_tenant_404_is_invoked():
    registry = _registry(lambda request: httpx.Response(404, text="Page not found"))

    result = await registry.get("demo").invoke(ForwardRequest(method="GET", url="https://x.test/"))

    assert result.outcome is InvocationOutcome.INVOKED
    assert result.response is not None
    assert result.response.status_code == 404


async def test_gateway_network_error_is_failed():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await _registry(handler).get("demo").invoke(
        ForwardRequest(method="GET", url="https://x.test/")
    )

    assert result.outcome is InvocationOutcome.FAILED
    assert "ConnectError" in (result.error or "")


async def test_missing_gateway_is_failed():
    registry = _registry(lambda request: httpx.Response(200), gateway_url=None)

    result = await registry.get("demo").invoke(ForwardRequest(method="GET", url="https://x.test/"))

    assert result.outcome is InvocationOutcome.FAILED


def test_scripts_uri():
    registry = _registry(lambda request: httpx.Response(200))

    assert registry.scripts_uri == SCRIPTS
