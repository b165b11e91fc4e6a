"""Tree-sitter powered C# method declaration extractor."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional

import tree_sitter_c_sharp
from tree_sitter import Language, Parser

from .base import FactExtractor
from ..models import DeclaredCallableFact, FileMeta, SourceLocation

_CSHARP_SUFFIXES = (".cs", ".csx")


class CSharpExtractor(FactExtractor):
    """Yields a fact for every C# method declaration, nested types included."""

    name = "csharp"

    def __init__(self) -> None:
        self._language = Language(tree_sitter_c_sharp.language())

    def supports(self, meta: FileMeta) -> bool:
        if meta.language == "C#":
            return True
        return meta.path.lower().endswith(_CSHARP_SUFFIXES)

    def extract(self, root: Path, meta: FileMeta) -> List[DeclaredCallableFact]:
        source = (Path(root) / meta.path).read_text(encoding="utf-8-sig")
        return self.extract_source(source, meta.path)

    def extract_source(self, source: str, path: str = "<memory>") -> List[DeclaredCallableFact]:
        """Parse ``source`` and return its method declarations as facts."""
        source_bytes = source.encode("utf-8")
        # Parsers are not shared between threads.
        parser = Parser(self._language)
        tree = parser.parse(source_bytes)
        return list(self._collect_methods(tree.root_node, source_bytes, path))

    def _collect_methods(self, node, source_bytes: bytes, path: str) -> Iterator[DeclaredCallableFact]:  # type: ignore[no-untyped-def]
        for child in node.children:
            if child.type == "method_declaration":
                fact = self._method_fact(child, source_bytes, path)
                if fact is not None:
                    yield fact
            yield from self._collect_methods(child, source_bytes, path)

    def _method_fact(self, node, source_bytes: bytes, path: str) -> Optional[DeclaredCallableFact]:  # type: ignore[no-untyped-def]
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        parameters = node.child_by_field_name("parameters")
        types = self._parameter_types(parameters, source_bytes) if parameters is not None else []
        row, column = name_node.start_point
        return DeclaredCallableFact(
            name=self._node_text(name_node, source_bytes),
            parameter_type_texts=tuple(types),
            location=SourceLocation(path=path, line=row + 1, column=column + 1),
        )

    def _parameter_types(self, parameter_list, source_bytes: bytes) -> List[str]:  # type: ignore[no-untyped-def]
        types: List[str] = []
        # `params T[] name` is not wrapped in a parameter node: the grammar emits
        # the `params` token, the type and the identifier directly in the list.
        in_params = False
        for child in parameter_list.children:
            if child.type == "parameter":
                type_node = child.child_by_field_name("type")
                types.append(self._node_text(type_node, source_bytes) if type_node is not None else "")
            elif child.type == "params":
                in_params = True
            elif in_params and child.is_named and child.type != "attribute_list":
                types.append("" if child.type == "identifier" else self._node_text(child, source_bytes))
                in_params = False
        return types

    @staticmethod
    def _node_text(node, source_bytes: bytes) -> str:  # type: ignore[no-untyped-def]
        return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


__all__ = ["CSharpExtractor"]
