"""Schema bootstrap middleware."""

from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.frontdoor.core.db import schema_bootstrap


async def bootstrap_middleware(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Make sure the Project Store schema exists before any route or dispatch runs.

    A no-op once the instance has made its first attempt.
    """
    await schema_bootstrap.ensure_initialized()
    return await call_next(request)
