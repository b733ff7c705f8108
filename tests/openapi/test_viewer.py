from __future__ import annotations

from apidocgen.openapi.viewer import SCALAR_SCRIPT_URL, render_viewer


def test_render_embeds_yaml_and_title() -> None:
    html = render_viewer("openapi: 3.0.3\npaths: {}\n", title="Orders API")

    assert "<title>Orders API</title>" in html
    assert "openapi: 3.0.3\npaths: {}" in html
    assert f'<script src="{SCALAR_SCRIPT_URL}"></script>' in html
    assert 'id="api-reference" type="application/yaml"' in html


def test_closing_script_tags_are_escaped() -> None:
    html = render_viewer("description: '</script><b>'\n")

    assert "<\\/script><b>" in html
    assert html.count("</script>") == 2
