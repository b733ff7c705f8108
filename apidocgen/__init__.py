"""Generate OpenAPI documents from API controller source code."""

__version__ = "0.1.0"
