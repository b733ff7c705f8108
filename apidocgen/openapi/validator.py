"""Structural checks for per-controller OpenAPI fragments."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import yaml
from openapi_spec_validator import validate

FRAGMENT_OPENAPI_VERSION = "3.0.3"


def load_fragment(yaml_text: str) -> Tuple[Optional[Dict[str, Any]], List[str]]:
    """Parse a fragment into a JSON-compatible mapping, or return the parse errors."""
    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as exc:
        return None, [f"Invalid YAML: {exc}"]
    if not isinstance(data, dict):
        return None, ["Fragment must be a YAML mapping"]
    try:
        return _plain(data), []
    except RecursionError:
        return None, ["Invalid YAML: self-referencing anchors are not supported"]


def _plain(value: Any) -> Any:
    """Turn YAML scalars that JSON lacks into strings, keys included.

    Unquoted status codes load as ints and dates as ``date`` objects, while
    OpenAPI keys are strings and examples must stay serializable.
    """
    if isinstance(value, dict):
        return {_plain_key(key): _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, date):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _plain_key(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, date):
        return key.isoformat()
    return str(key)


def fragment_parts(data: Dict[str, Any]) -> Tuple[Any, Any]:
    """Return ``(paths, schemas)``; schemas may sit at the top level or under ``components``."""
    schemas = data.get("schemas")
    if schemas is None:
        components = data.get("components")
        if isinstance(components, dict):
            schemas = components.get("schemas")
    return data.get("paths"), schemas


def validate_fragment(yaml_text: str) -> List[str]:
    """Return a list of problems with ``yaml_text``; an empty list means it is usable."""
    data, errors = load_fragment(yaml_text)
    if data is None:
        return errors

    paths, schemas = fragment_parts(data)
    if paths is None and schemas is None:
        return ["Fragment defines neither 'paths' nor 'schemas'"]
    if paths is not None and not isinstance(paths, dict):
        errors.append("'paths' must be a mapping")
    if schemas is not None and not isinstance(schemas, dict):
        errors.append("'schemas' must be a mapping")
    if errors:
        return errors

    document = {
        "openapi": FRAGMENT_OPENAPI_VERSION,
        "info": {"title": "fragment", "version": "0.0.0"},
        "paths": paths or {},
        "components": {"schemas": schemas or {}},
    }
    try:
        validate(document)
    except Exception as exc:  # validator and ref resolver raise several unrelated types
        message = str(exc).strip().splitlines()
        return [message[0] if message else exc.__class__.__name__]
    return []


def is_valid_fragment(yaml_text: str) -> bool:
    return not validate_fragment(yaml_text)


__all__ = ["fragment_parts", "is_valid_fragment", "load_fragment", "validate_fragment"]
