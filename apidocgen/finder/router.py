"""Map file extensions to language-specific type finders."""

from __future__ import annotations

from typing import Optional

from .finder import TypeFinder
from .languages import language_for_extension


def finder_for_extension(extension: str) -> Optional[TypeFinder]:
    """Return a fresh finder for ``extension`` or ``None`` when unsupported."""
    spec = language_for_extension(extension)
    if spec is None:
        return None
    return TypeFinder(spec)


__all__ = ["finder_for_extension"]
