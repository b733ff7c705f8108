"""Per-language grammar and declaration tables for the syntax index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional, Tuple

import tree_sitter_go
import tree_sitter_java
import tree_sitter_javascript
import tree_sitter_kotlin
import tree_sitter_python
import tree_sitter_typescript
from tree_sitter import Language


@dataclass(frozen=True)
class LanguageSpec:
    """Everything the syntax index needs to know about one source language.

    Name extraction tries, in order: the structural fields in ``name_fields``,
    the first direct child whose kind is in ``identifier_kinds``, and finally
    the name of the first direct child whose kind is in ``delegate_kinds``.
    The last step lets TypeScript ``declare`` wrappers match by the name of
    the declaration they hold. Go type groups and decorated Python
    definitions are not wrappers here: the walk descends into them and
    matches the inner ``type_spec`` or ``class_definition``.
    """

    key: str
    extension: str
    grammar: Callable[[], object]
    declaration_kinds: FrozenSet[str]
    import_kinds: FrozenSet[str]
    name_fields: Tuple[str, ...] = ("name",)
    identifier_kinds: FrozenSet[str] = frozenset()
    delegate_kinds: FrozenSet[str] = frozenset()

    def load_language(self) -> Language:
        return Language(self.grammar())


KOTLIN = LanguageSpec(
    key="kotlin",
    extension="kt",
    grammar=tree_sitter_kotlin.language,
    declaration_kinds=frozenset(
        {
            "class_declaration",
            "object_declaration",
            "interface_declaration",
            "companion_object",
            "enum_class_body",
            "typealias_declaration",
            "type_alias",
        }
    ),
    import_kinds=frozenset({"import_header", "import_list", "import"}),
    identifier_kinds=frozenset({"type_identifier", "simple_identifier", "identifier"}),
)

JAVA = LanguageSpec(
    key="java",
    extension="java",
    grammar=tree_sitter_java.language,
    declaration_kinds=frozenset(
        {
            "class_declaration",
            "interface_declaration",
            "enum_declaration",
            "record_declaration",
        }
    ),
    import_kinds=frozenset({"import_declaration"}),
)

TYPESCRIPT = LanguageSpec(
    key="typescript",
    extension="ts",
    grammar=tree_sitter_typescript.language_typescript,
    declaration_kinds=frozenset(
        {
            "class_declaration",
            "abstract_class_declaration",
            "interface_declaration",
            "type_alias_declaration",
            "enum_declaration",
            "ambient_declaration",
        }
    ),
    import_kinds=frozenset({"import_statement"}),
    delegate_kinds=frozenset(
        {
            "class_declaration",
            "abstract_class_declaration",
            "interface_declaration",
            "type_alias_declaration",
            "enum_declaration",
        }
    ),
)

JAVASCRIPT = LanguageSpec(
    key="javascript",
    extension="js",
    grammar=tree_sitter_javascript.language,
    declaration_kinds=frozenset(
        {"class_declaration", "function_declaration", "generator_function_declaration"}
    ),
    import_kinds=frozenset({"import_statement"}),
)

PYTHON = LanguageSpec(
    key="python",
    extension="py",
    grammar=tree_sitter_python.language,
    declaration_kinds=frozenset(
        {"class_definition", "function_definition"}
    ),
    import_kinds=frozenset({"import_statement", "import_from_statement"}),
    identifier_kinds=frozenset({"identifier"}),
)

GO = LanguageSpec(
    key="go",
    extension="go",
    grammar=tree_sitter_go.language,
    declaration_kinds=frozenset(
        {
            "type_spec",
            "type_alias",
            "function_declaration",
            "method_declaration",
        }
    ),
    import_kinds=frozenset({"import_declaration", "import_spec"}),
)

SUPPORTED_LANGUAGES: Tuple[LanguageSpec, ...] = (KOTLIN, JAVA, TYPESCRIPT, JAVASCRIPT, PYTHON, GO)

_BY_EXTENSION: Dict[str, LanguageSpec] = {spec.extension: spec for spec in SUPPORTED_LANGUAGES}


def normalize_extension(extension: str) -> str:
    """Return ``extension`` lowercased and without a leading dot."""
    return extension.strip().lstrip(".").lower()


def language_for_extension(extension: str) -> Optional[LanguageSpec]:
    """Return the language registered for ``extension`` or ``None``."""
    return _BY_EXTENSION.get(normalize_extension(extension))


def supported_extensions() -> Tuple[str, ...]:
    return tuple(_BY_EXTENSION)


__all__ = [
    "GO",
    "JAVA",
    "JAVASCRIPT",
    "KOTLIN",
    "LanguageSpec",
    "PYTHON",
    "SUPPORTED_LANGUAGES",
    "TYPESCRIPT",
    "language_for_extension",
    "normalize_extension",
    "supported_extensions",
]
