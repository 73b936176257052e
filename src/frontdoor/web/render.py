"""HTML pages for the platform's own UI: the builder form and the admin view."""

import html
from collections.abc import Mapping, Sequence
from typing import Any

SCRIPT_PREVIEW_LENGTH = 100

_CSS = """
:root {
  --background: #fbf3e9;
  --surface: #ffffff;
  --foreground: #000000;
  --main: #ff7a05;
  --border: #000000;
  --shadow: 4px 4px 0px 0px var(--border);
}
* { box-sizing: border-box; }
body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  background-color: var(--background);
  color: var(--foreground);
  line-height: 1.6;
  max-width: 1200px;
  margin: 0 auto;
  padding: 20px;
}
.header { padding-bottom: 20px; border-bottom: 2px solid var(--border); margin-bottom: 20px; }
.header h1 { font-size: 2.5rem; margin: 0 0 15px 0; }
.dataContainer { margin-bottom: 30px; overflow-x: auto; }
.dataTable { border-collapse: collapse; width: 100%; background: var(--surface); box-shadow: var(--shadow); }
.dataTable th, .dataTable td { border: 2px solid var(--border); padding: 8px 12px; text-align: left; }
.dataTable th { background-color: var(--main); }
.script-preview { font-family: 'Monaco', 'Menlo', monospace; font-size: 12px; cursor: help; }
.form-container { background: var(--surface); border: 2px solid var(--border); padding: 24px; box-shadow: var(--shadow); }
.form-group { margin-bottom: 20px; }
.form-group label { display: block; font-weight: 700; margin-bottom: 6px; }
.form-group input, .form-group textarea { width: 100%; padding: 12px; border: 2px solid var(--border); }
button { padding: 12px 20px; background-color: var(--main); border: 2px solid var(--border); font-weight: 700; cursor: pointer; box-shadow: var(--shadow); }
#result { margin-top: 20px; font-family: 'Monaco', 'Menlo', monospace; }
"""

_DEFAULT_SCRIPT = """export default {
  async fetch(request, env, ctx) {
    return new Response('<h1>Hello from my website!</h1>', {
      headers: { 'content-type': 'text/html' },
    });
  },
};
"""

_BUILD_FORM = """
<div class="form-container">
  <form id="projectForm">
    <div class="form-group">
      <label for="projectName">Website Name</label>
      <input type="text" id="projectName" required placeholder="My Awesome Site">
    </div>
    <div class="form-group">
      <label for="subdomain">Your URL</label>
      <input type="text" id="subdomain" required placeholder="my-awesome-site"
             pattern="[a-z0-9-]+" title="Only lowercase letters, numbers, and hyphens">
      <small>{url_hint}</small>
    </div>
    <div class="form-group">
      <label for="customHostname">Or connect your own domain (optional)</label>
      <input type="text" id="customHostname" placeholder="mystore.com">
    </div>
    <div class="form-group">
      <label for="scriptContent">Website Code</label>
      <textarea id="scriptContent" rows="14" required>{default_script}</textarea>
    </div>
    <button type="submit">Create Website</button>
  </form>
  <div id="result"></div>
</div>
<script>
  document.getElementById('projectName').addEventListener('input', function () {{
    document.getElementById('subdomain').value = this.value.toLowerCase()
      .replace(/[^a-z0-9\\s-]/g, '').replace(/\\s+/g, '-').replace(/^-+|-+$/g, '');
  }});
  document.getElementById('projectForm').addEventListener('submit', async function (event) {{
    event.preventDefault();
    const response = await fetch('/projects', {{
      method: 'POST',
      headers: {{ 'Content-Type': 'application/json' }},
      body: JSON.stringify({{
        name: document.getElementById('projectName').value,
        subdomain: document.getElementById('subdomain').value,
        custom_hostname: document.getElementById('customHostname').value || null,
        script_content: document.getElementById('scriptContent').value,
      }}),
    }});
    const data = await response.json();
    document.getElementById('result').textContent = data.detail;
  }});
</script>
"""


def format_value(value: Any, column: str | None = None) -> str:
    """Render one table cell, escaped. Long script content is truncated with a tooltip."""
    if value is None:
        return "null"
    text = str(value)
    if column == "script_content" and len(text) > SCRIPT_PREVIEW_LENGTH:
        preview = text[:SCRIPT_PREVIEW_LENGTH] + "..."
        return (
            f'<div class="script-preview" title="{html.escape(text)}">'
            f"{html.escape(preview)}</div>"
        )
    return html.escape(text)


def build_table(name: str, rows: Sequence[Mapping[str, Any]]) -> str:
    """Render rows as an HTML table under a heading; columns come from the first row."""
    heading = f"<h3>{html.escape(name)}</h3>"
    if not rows:
        return f'<div class="dataContainer">{heading}no data</div>'

    columns = list(rows[0].keys())
    head = "".join(f"<th>{format_value(column)}</th>" for column in columns)
    body = "".join(
        "<tr>" + "".join(f"<td>{format_value(row.get(c), c)}</td>" for c in columns) + "</tr>"
        for row in rows
    )
    return (
        f'<div class="dataContainer">{heading}'
        f'<table class="dataTable"><tr>{head}</tr>{body}</table></div>'
    )


def render_page(body: str, title: str = "Build a Website") -> str:
    """Wrap a body fragment in the shared page layout."""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{html.escape(title)}</title>
  <style>{_CSS}</style>
</head>
<body>
<div class="header">
  <h1>{html.escape(title)}</h1>
  <p>Create and deploy your website instantly</p>
</div>
{body}
</body>
</html>
"""


def render_build_page(platform_base_domain: str | None) -> str:
    if platform_base_domain:
        url_hint = f"Your site will live at &lt;name&gt;.{html.escape(platform_base_domain)}"
    else:
        url_hint = "Your site will live under /&lt;name&gt;/ on this host"
    form = _BUILD_FORM.format(url_hint=url_hint, default_script=html.escape(_DEFAULT_SCRIPT))
    return render_page(form)


def render_admin_page(
    projects: Sequence[Mapping[str, Any]] | None,
    scripts: Sequence[Mapping[str, Any]] | None,
    namespace: str,
) -> str:
    """Admin view of the Project Store and the Execution Registry.

    `projects` is None when the Project Store could not be read, `scripts`
    is None when the registry could not be listed.
    """
    parts = [
        '<hr class="solid"><br/>',
        "<div>",
        '<form style="display: inline" action="/init">'
        '<input type="submit" value="Initialize" /></form>',
        "<small> - Resets db and dispatch namespace to initial state</small>",
        "</div>",
        "<h2>DB Tables</h2>",
    ]
    if projects is None:
        parts.append(
            "<div>No DB data. Initialize to recreate the projects table.</div>"
        )
    else:
        parts.append(build_table("projects", projects))
    parts.append("<br/><h2>Dispatch Namespace</h2>")
    if scripts is None:
        parts.append(f'<div>Dispatch namespace "{html.escape(namespace)}" was not found.</div>')
    else:
        parts.append(build_table(namespace, scripts))
    return render_page("\n".join(parts), title="Admin")
