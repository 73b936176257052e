"""Platform UI: builder page, admin view and full reset."""

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from src.frontdoor.api.dependencies import ProjectServiceDep
from src.frontdoor.core.config import get_settings
from src.frontdoor.core.exceptions import UpstreamError
from src.frontdoor.core.logging import get_logger
from src.frontdoor.web import render_admin_page, render_build_page

logger = get_logger(__name__)

router = APIRouter(tags=["admin"], include_in_schema=False)


@router.get("/", response_class=HTMLResponse)
async def build_page() -> HTMLResponse:
    """Builder form for creating a project."""
    return HTMLResponse(render_build_page(get_settings().platform_base_domain))


@router.get("/favicon.ico")
async def favicon() -> Response:
    return Response()


@router.get("/admin", response_class=HTMLResponse)
async def admin_page(service: ProjectServiceDep) -> HTMLResponse:
    """Tables of stored projects and deployed scripts."""
    settings = get_settings()

    projects: list[dict[str, str | None]] | None
    try:
        projects = [
            {
                "id": str(p.id),
                "name": p.name,
                "subdomain": p.subdomain,
                "custom_hostname": p.custom_hostname,
                "script_content": p.script_content,
                "created_on": p.created_on.isoformat(),
                "modified_on": p.modified_on.isoformat(),
            }
            for p in await service.list_projects()
        ]
    except SQLAlchemyError as e:
        logger.warning("Could not read project store", error=str(e))
        projects = None

    scripts: list[dict[str, str]] | None
    try:
        scripts = [
            {"id": s.id, "created_on": s.created_on, "modified_on": s.modified_on}
            for s in await service.list_scripts()
        ]
    except UpstreamError as e:
        logger.warning("Could not list dispatch namespace", detail=e.detail, **e.context)
        scripts = None

    return HTMLResponse(
        render_admin_page(projects, scripts, namespace=settings.dispatch_namespace_name)
    )


@router.get("/init")
async def reset_platform(request: Request, service: ProjectServiceDep) -> RedirectResponse:
    """Reset the registry, custom hostnames and Project Store, then go back."""
    await service.reset_platform()
    target = request.url.replace(path=request.url.path.removesuffix("/init") or "/")
    return RedirectResponse(str(target), status_code=status.HTTP_302_FOUND)
