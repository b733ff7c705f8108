"""Validation, merging and rendering of OpenAPI documents."""

from .merger import looks_like_openapi, merge_fragments
from .validator import is_valid_fragment, validate_fragment
from .viewer import render_viewer

__all__ = [
    "is_valid_fragment",
    "looks_like_openapi",
    "merge_fragments",
    "render_viewer",
    "validate_fragment",
]
