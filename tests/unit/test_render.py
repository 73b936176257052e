"""Tests for the platform HTML pages."""

import pytest

from src.frontdoor.web import build_table, format_value, render_admin_page, render_build_page

pytestmark = pytest.mark.unit


def test_values_are_escaped():
    assert format_value("<script>alert('x')</script>") == (
        "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;"
    )


def test_none_renders_as_null():
    assert format_value(None) == "null"


def test_long_script_content_is_truncated_with_tooltip():
    script = "x" * 150 + "<end>"

    rendered = format_value(script, "script_content")

    assert 'class="script-preview"' in rendered
    assert f'title="{"x" * 150}&lt;end&gt;"' in rendered
    assert f">{'x' * 100}...</div>" in rendered


def test_short_script_content_is_not_truncated():
    assert format_value("short", "script_content") == "short"


def test_long_values_in_other_columns_are_not_truncated():
    assert format_value("y" * 150, "name") == "y" * 150


def test_build_table_uses_first_row_columns():
    table = build_table("projects", [{"name": "A", "subdomain": "a"}, {"name": "B", "subdomain": "b"}])

    assert "<h3>projects</h3>" in table
    assert "<th>name</th><th>subdomain</th>" in table
    assert "<td>A</td><td>a</td>" in table
    assert "<td>B</td><td>b</td>" in table


def test_build_table_without_rows():
    assert "no data" in build_table("projects", [])


def test_admin_page_notes_missing_namespace():
    page = render_admin_page([], None, namespace="sites")

    assert 'Dispatch namespace "sites" was not found.' in page
    assert 'action="/init"' in page


def test_admin_page_notes_unreadable_store():
    page = render_admin_page(None, [], namespace="sites")

    assert "No DB data." in page
    assert "<h3>projects</h3>" not in page
    assert "<h3>sites</h3>" in page


def test_admin_page_lists_scripts():
    page = render_admin_page(
        [],
        [{"id": "demo", "created_on": "2026-01-01", "modified_on": "2026-01-01"}],
        namespace="sites",
    )

    assert "<h3>sites</h3>" in page
    assert "<td>demo</td>" in page


@pytest.mark.parametrize(
    ("base_domain", "hint"),
    [
        ("saasysite.me", "&lt;name&gt;.saasysite.me"),
        (None, "/&lt;name&gt;/"),
    ],
)
def test_build_page_url_hint(base_domain, hint):
    page = render_build_page(base_domain)

    assert hint in page
    assert 'id="projectForm"' in page
    assert "fetch('/projects'" in page
