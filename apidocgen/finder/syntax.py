"""Tree-sitter backed declaration and import lookups for one language."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from tree_sitter import Node, Parser, Tree

from .languages import LanguageSpec


@dataclass(frozen=True)
class ParsedSource:
    """A parse tree together with the exact bytes it was built from."""

    tree: Tree
    source_bytes: bytes

    def text(self, node: Node) -> str:
        return node_text(node, self.source_bytes)


def node_text(node: Node, source_bytes: bytes) -> str:
    """Return the source covered by ``node``.

    Tree-sitter reports byte offsets, so the slice is taken on the encoded
    bytes and decoded afterwards. Slicing the ``str`` with the same offsets
    breaks as soon as a multi-byte character precedes the node.
    """
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class SyntaxIndex:
    """Parses source files of one language and answers declaration queries."""

    def __init__(self, spec: LanguageSpec) -> None:
        self.spec = spec
        self._parser: Optional[Parser] = None

    @property
    def parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(self.spec.load_language())
        return self._parser

    def parse(self, source: str) -> ParsedSource:
        source_bytes = source.encode("utf-8")
        return ParsedSource(tree=self.parser.parse(source_bytes), source_bytes=source_bytes)

    def find_declaration(self, parsed: ParsedSource, name: str) -> Optional[Node]:
        """Return the first declaration named ``name`` in pre-order, if any."""
        stack: List[Node] = [parsed.tree.root_node]
        while stack:
            node = stack.pop()
            if node.type in self.spec.declaration_kinds:
                if self.declaration_name(node, parsed.source_bytes) == name:
                    return node
            stack.extend(reversed(node.children))
        return None

    def list_imports(self, parsed: ParsedSource) -> List[str]:
        """Return top-level import statements in document order."""
        return [
            parsed.text(child)
            for child in parsed.tree.root_node.children
            if child.type in self.spec.import_kinds
        ]

    def declaration_name(self, node: Node, source_bytes: bytes) -> Optional[str]:
        for field_name in self.spec.name_fields:
            child = node.child_by_field_name(field_name)
            if child is not None:
                return node_text(child, source_bytes)
        if self.spec.identifier_kinds:
            for child in node.children:
                if child.type in self.spec.identifier_kinds:
                    return node_text(child, source_bytes)
        if self.spec.delegate_kinds:
            for child in node.children:
                if child.type in self.spec.delegate_kinds:
                    return self.declaration_name(child, source_bytes)
        return None


__all__ = ["ParsedSource", "SyntaxIndex", "node_text"]
