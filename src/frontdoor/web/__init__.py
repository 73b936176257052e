"""Server-rendered pages for the platform UI."""

from src.frontdoor.web.render import (
    build_table,
    format_value,
    render_admin_page,
    render_build_page,
    render_page,
)

__all__ = [
    "build_table",
    "format_value",
    "render_admin_page",
    "render_build_page",
    "render_page",
]
