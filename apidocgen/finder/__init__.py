"""Multi-language declaration lookup built on tree-sitter."""

from .finder import InvalidInputError, TypeFinder, walk_files
from .languages import SUPPORTED_LANGUAGES, LanguageSpec, language_for_extension, supported_extensions
from .router import finder_for_extension
from .syntax import SyntaxIndex

__all__ = [
    "InvalidInputError",
    "LanguageSpec",
    "SUPPORTED_LANGUAGES",
    "SyntaxIndex",
    "TypeFinder",
    "finder_for_extension",
    "language_for_extension",
    "supported_extensions",
    "walk_files",
]
