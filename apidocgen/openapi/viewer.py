"""Scalar API reference page for the merged document."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

SCALAR_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/@scalar/api-reference"

_env = Environment(
    loader=FileSystemLoader(str(Path(__file__).with_name("templates"))),
    autoescape=False,
    keep_trailing_newline=True,
)


def render_viewer(yaml_text: str, *, title: str = "API Reference") -> str:
    """Render an HTML page that embeds ``yaml_text`` for the Scalar viewer."""
    # Only the closing tag needs escaping; the YAML stays readable in the page source.
    safe_yaml = yaml_text.replace("</script>", "<\\/script>")
    template = _env.get_template("scalar.html.j2")
    return template.render(title=title, spec_yaml=safe_yaml, script_url=SCALAR_SCRIPT_URL)


__all__ = ["SCALAR_SCRIPT_URL", "render_viewer"]
