"""Per-controller collection and generation steps."""

from .collector import CollectionLoop
from .generator import GenerationStep, InvalidOpenApiError, strip_code_fence

__all__ = ["CollectionLoop", "GenerationStep", "InvalidOpenApiError", "strip_code_fence"]
