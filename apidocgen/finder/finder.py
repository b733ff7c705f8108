"""Locate named declarations in a file or the files around it."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Optional

from ..logging import get_logger
from ..models import DeclarationLocation
from .languages import LanguageSpec
from .syntax import SyntaxIndex

MAX_SEARCH_DEPTH = 10

_IGNORED_DIRS = frozenset(
    {
        ".git",
        ".idea",
        ".vscode",
        ".gradle",
        "node_modules",
        "build",
        "target",
        "dist",
        "out",
        "bin",
        "__pycache__",
    }
)

_logger = get_logger("finder")


class InvalidInputError(ValueError):
    """Raised when a finder is handed a file of another language."""


def walk_files(root: Path, extension: str, max_depth: int = MAX_SEARCH_DEPTH) -> Iterator[Path]:
    """Yield files ending in ``.extension`` below ``root``, depth-first.

    Entries are visited in sorted name order. Hidden and build/vendor
    directories are not entered; ``root`` itself is depth 0.
    """
    yield from _walk(root, extension.lower(), max_depth, 0)


def _walk(directory: Path, extension: str, max_depth: int, depth: int) -> Iterator[Path]:
    if depth > max_depth or not directory.is_dir():
        return
    try:
        with os.scandir(directory) as scan:
            entries = sorted(scan, key=lambda entry: entry.name)
    except OSError:
        return
    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            if not entry.name.startswith(".") and entry.name not in _IGNORED_DIRS:
                yield from _walk(path, extension, max_depth, depth + 1)
            continue
        if entry.is_file() and path.suffix.lstrip(".").lower() == extension:
            yield path


class TypeFinder:
    """Finds a declaration by name for one configured language."""

    def __init__(self, spec: LanguageSpec, index: SyntaxIndex | None = None) -> None:
        self.spec = spec
        self.index = index or SyntaxIndex(spec)

    @property
    def extension(self) -> str:
        return self.spec.extension

    def find_by_name(self, start_file: Path | str, type_name: str) -> Optional[DeclarationLocation]:
        """Look for ``type_name`` in ``start_file``, then in files beside and below it."""
        path = Path(start_file)
        actual = path.suffix.lstrip(".")
        if actual != self.spec.extension:
            raise InvalidInputError(
                f"Expected .{self.spec.extension} file, but got .{actual}"
            )

        if path.is_file():
            location = self._search_file(path, type_name)
            if location is not None:
                return location

        for candidate in walk_files(path.parent, self.spec.extension):
            location = self._search_file(candidate, type_name)
            if location is not None:
                return location
        _logger.debug("No %s declaration named %s near %s", self.spec.key, type_name, path)
        return None

    def _search_file(self, path: Path, type_name: str) -> Optional[DeclarationLocation]:
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _logger.debug("Skipping unreadable file %s: %s", path, exc)
            return None
        parsed = self.index.parse(source)
        node = self.index.find_declaration(parsed, type_name)
        if node is None:
            return None
        return DeclarationLocation(
            class_name=type_name,
            file_path=str(path.resolve()),
            line_number=node.start_point[0] + 1,
            source_code=parsed.text(node),
            imports=tuple(self.index.list_imports(parsed)),
        )


__all__ = ["InvalidInputError", "MAX_SEARCH_DEPTH", "TypeFinder", "walk_files"]
