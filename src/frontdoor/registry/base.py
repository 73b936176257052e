"""Execution Registry contract.

A registry is a namespace of deployable, named code units. Getting a
handle never fails; a missing deployment only shows up when the handle is
invoked, as a NOT_PROVISIONED result rather than an exception.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
from urllib.parse import urlsplit


@dataclass(frozen=True)
class ForwardRequest:
    """Request handed to an execution context."""

    method: str
    url: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def query(self) -> str:
        return urlsplit(self.url).query


@dataclass(frozen=True)
class ForwardResponse:
    """Response produced by an execution context."""

    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


class InvocationOutcome(StrEnum):
    INVOKED = "invoked"
    NOT_PROVISIONED = "not_provisioned"
    FAILED = "failed"


@dataclass(frozen=True)
class InvocationResult:
    """Tagged result of invoking a script handle."""

    outcome: InvocationOutcome
    response: ForwardResponse | None = None
    error: str | None = None

    @classmethod
    def invoked(cls, response: ForwardResponse) -> InvocationResult:
        return cls(InvocationOutcome.INVOKED, response=response)

    @classmethod
    def not_provisioned(cls, name: str) -> InvocationResult:
        return cls(InvocationOutcome.NOT_PROVISIONED, error=f"Script '{name}' is not deployed")

    @classmethod
    def failed(cls, error: str) -> InvocationResult:
        return cls(InvocationOutcome.FAILED, error=error)


@dataclass(frozen=True)
class ScriptInfo:
    """Registry listing entry."""

    id: str
    created_on: str
    modified_on: str


@dataclass(frozen=True)
class ScriptHandle:
    """Reference to a named code unit, deployed or not."""

    registry: ExecutionRegistry
    name: str

    async def invoke(self, request: ForwardRequest) -> InvocationResult:
        return await self.registry.invoke(self.name, request)


class ExecutionRegistry(ABC):
    """Namespace of independently invocable code units addressed by name."""

    def get(self, name: str) -> ScriptHandle:
        """Return a handle for `name` without checking that it is deployed."""
        return ScriptHandle(registry=self, name=name)

    @abstractmethod
    async def put(self, name: str, code: str) -> None:
        """Deploy or overwrite `name`. Raises UpstreamError on failure."""

    @abstractmethod
    async def list(self) -> list[ScriptInfo]:
        """List deployed code units. Raises UpstreamError on failure."""

    @abstractmethod
    async def delete(self, name: str) -> None:
        """Remove `name`. Raises UpstreamError on failure."""

    @abstractmethod
    async def invoke(self, name: str, request: ForwardRequest) -> InvocationResult:
        """Run `request` through the code deployed under `name`."""

    async def aclose(self) -> None:
        """Release transport resources."""
