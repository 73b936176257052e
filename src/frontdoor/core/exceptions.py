"""Error taxonomy and exception handlers with request_id in responses."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.frontdoor.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


class FrontdoorError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, **context: Any) -> None:
        super().__init__(detail)
        self.detail = detail
        self.context = context

    @property
    def public_detail(self) -> str:
        """Message safe to show the client."""
        if self.status_code >= 500:
            return GENERIC_SERVER_ERROR
        return self.detail


class ValidationError(FrontdoorError):
    """Bad or missing input to project creation."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(FrontdoorError):
    """Subdomain or custom hostname already taken."""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(FrontdoorError):
    """Admin-facing lookup did not match a project."""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(FrontdoorError):
    """Registry or hostname API call failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DispatchError(UpstreamError):
    """A tenant request could not be delivered to its execution context."""

    @property
    def public_detail(self) -> str:
        return "Could not dispatch request"


class StoreUnavailableError(FrontdoorError):
    """Project Store could not be reached or initialized."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def error_response(exc: FrontdoorError) -> JSONResponse:
    """Render a FrontdoorError, logging 500-class errors with full detail."""
    request_id = correlation_id.get()
    if exc.status_code >= 500:
        logger.error(
            exc.detail,
            error_type=type(exc).__name__,
            request_id=request_id,
            **exc.context,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.public_detail,
            "request_id": request_id,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(FrontdoorError)
    async def frontdoor_exception_handler(request: Request, exc: FrontdoorError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed bodies are user-correctable, same as failed field validation
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid request body",
                "errors": jsonable_errors(exc),
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": GENERIC_SERVER_ERROR,
                "request_id": request_id,
            },
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Reduce pydantic errors to location and message."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
