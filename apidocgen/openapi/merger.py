"""Combine per-controller fragments into one OpenAPI document."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable

import yaml

from ..logging import get_logger
from .validator import FRAGMENT_OPENAPI_VERSION, fragment_parts, load_fragment

_VALID_STARTS = ("paths:", "schemas:", "openapi:", "info:", "components:")
_MARKDOWN_PATTERNS = (
    re.compile(r"^\d+\.\s+\*\*", re.MULTILINE),
    re.compile(r"^#+\s+", re.MULTILINE),
    re.compile(r"^-\s+\*\*", re.MULTILINE),
    re.compile(r"```"),
)

_logger = get_logger("openapi.merger")


def looks_like_openapi(content: str) -> bool:
    """Cheap screen for model output that is YAML rather than prose or markdown."""
    trimmed = content.strip()
    if not trimmed.startswith(_VALID_STARTS):
        return False
    return not any(pattern.search(trimmed) for pattern in _MARKDOWN_PATTERNS)


def merge_fragments(yamls: Iterable[str], title: str, version: str) -> str:
    """Merge fragments into a single OpenAPI 3.0.3 YAML document.

    Operations of the same path are merged method by method with later
    fragments winning; the first definition of a schema name is kept.
    Fragments that are not OpenAPI-looking YAML are skipped with a warning.
    """
    all_paths: Dict[str, Dict[str, Any]] = {}
    all_schemas: Dict[str, Any] = {}

    for content in yamls:
        if not looks_like_openapi(content):
            _logger.warning("Skipping invalid YAML content: %s...", content.strip()[:50])
            continue
        data, errors = load_fragment(content)
        if data is None:
            _logger.warning("Failed to parse YAML: %s", "; ".join(errors))
            continue

        paths, schemas = fragment_parts(data)
        if isinstance(paths, dict):
            for path, methods in paths.items():
                if not isinstance(methods, dict):
                    continue
                all_paths.setdefault(path, {}).update(methods)
        if isinstance(schemas, dict):
            for name, schema in schemas.items():
                all_schemas.setdefault(name, schema)

    merged = {
        "openapi": FRAGMENT_OPENAPI_VERSION,
        "info": {"title": title, "version": version},
        "paths": {path: all_paths[path] for path in sorted(all_paths)},
        "components": {"schemas": {name: all_schemas[name] for name in sorted(all_schemas)}},
    }
    return yaml.safe_dump(merged, sort_keys=False, default_flow_style=False, allow_unicode=True)


__all__ = ["looks_like_openapi", "merge_fragments"]
