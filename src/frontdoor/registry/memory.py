"""In-process Execution Registry for local development and tests."""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from datetime import datetime

from src.frontdoor.models.base import utc_now
from src.frontdoor.registry.base import (
    ExecutionRegistry,
    ForwardRequest,
    ForwardResponse,
    InvocationResult,
    ScriptInfo,
)


@dataclass(frozen=True)
class DeployedScript:
    name: str
    content: str
    created_on: datetime
    modified_on: datetime


Runner = Callable[[DeployedScript, ForwardRequest], Awaitable[ForwardResponse]]


async def echo_runner(script: DeployedScript, request: ForwardRequest) -> ForwardResponse:
    """Describe the forwarded request instead of executing the script."""
    payload = {
        "script": script.name,
        "method": request.method,
        "path": request.path,
        "query": request.query,
        "body_size": len(request.body),
    }
    return ForwardResponse(
        status_code=200,
        headers=[("content-type", "application/json")],
        body=json.dumps(payload).encode(),
    )


class InMemoryExecutionRegistry(ExecutionRegistry):
    """Registry backed by a dict; invocation is delegated to a runner."""

    def __init__(self, runner: Runner = echo_runner) -> None:
        self._scripts: dict[str, DeployedScript] = {}
        self._runner = runner

    def __contains__(self, name: object) -> bool:
        return name in self._scripts

    async def put(self, name: str, code: str) -> None:
        now = utc_now()
        existing = self._scripts.get(name)
        if existing is not None:
            self._scripts[name] = replace(existing, content=code, modified_on=now)
        else:
            self._scripts[name] = DeployedScript(
                name=name, content=code, created_on=now, modified_on=now
            )

    async def list(self) -> list[ScriptInfo]:
        return [
            ScriptInfo(
                id=script.name,
                created_on=script.created_on.isoformat(),
                modified_on=script.modified_on.isoformat(),
            )
            for script in self._scripts.values()
        ]

    async def delete(self, name: str) -> None:
        self._scripts.pop(name, None)

    async def invoke(self, name: str, request: ForwardRequest) -> InvocationResult:
        script = self._scripts.get(name)
        if script is None:
            return InvocationResult.not_provisioned(name)
        try:
            response = await self._runner(script, request)
        except Exception as e:
            # Tenant code failures are results, not front door errors
            return InvocationResult.failed(f"{type(e).__name__}: {e}")
        return InvocationResult.invoked(response)
