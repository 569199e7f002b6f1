"""Tree-sitter parser wrapper for Go sources.

Provides the parse/query surface the extractor needs on top of the
tree-sitter bindings and the tree-sitter-go grammar.

Usage:
    if TREE_SITTER_AVAILABLE:
        parser = GoParser()
        tree = parser.parse(code_bytes)
        captures = parser.query(tree.root_node, query_str)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import ParserUnavailableError

TREE_SITTER_AVAILABLE = False
_tree_sitter_module: Any = None
_go_module: Any = None
_IMPORT_ERROR = ""

try:
    import tree_sitter as _tree_sitter_module  # type: ignore[no-redef]
    import tree_sitter_go as _go_module  # type: ignore[no-redef]

    TREE_SITTER_AVAILABLE = True
except ImportError as e:
    _IMPORT_ERROR = str(e)
    TREE_SITTER_AVAILABLE = False


if TYPE_CHECKING:
    # Type stubs for tree-sitter objects used below
    class Node:
        text: bytes | None
        type: str
        start_byte: int
        start_point: tuple[int, int]
        end_point: tuple[int, int]
        has_error: bool
        is_missing: bool
        parent: Node | None
        children: list[Node]
        named_children: list[Node]

        def child_by_field_name(self, name: str) -> Node | None: ...

        def children_by_field_name(self, name: str) -> list[Node]: ...

    class Tree:
        root_node: Node

    Capture = tuple[Node, str]

_go_language: Any = None


def _load_language() -> Any:
    global _go_language
    if not TREE_SITTER_AVAILABLE:
        raise ParserUnavailableError(_IMPORT_ERROR or "tree-sitter is not installed")
    if _go_language is None:
        # tree-sitter >= 0.23 grammars return a PyCapsule; wrap in Language()
        _go_language = _tree_sitter_module.Language(_go_module.language())
    return _go_language


def node_text(node: Node | None) -> str:
    """Decoded source text of a node, or an empty string."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


class GoParser:
    """Wrapper around a tree-sitter Parser configured for Go.

    Parser objects are not thread-safe; give each worker its own GoParser.
    """

    def __init__(self) -> None:
        self._language = _load_language()
        self._parser = _tree_sitter_module.Parser(self._language)
        self._queries: dict[str, Any] = {}

    def parse(self, code: bytes) -> Tree:
        """Parse Go source bytes into a syntax tree.

        The returned tree may contain error nodes; callers decide whether
        ``tree.root_node.has_error`` is fatal.
        """
        tree: Tree = self._parser.parse(code)
        return tree

    def query(self, node: Node, query_str: str) -> list[Capture]:
        """Run a query below ``node``.

        Returns:
            List of (node, capture_name) tuples in source order
        """
        query = self._queries.get(query_str)
        if query is None:
            query = _tree_sitter_module.Query(self._language, query_str)
            self._queries[query_str] = query

        # tree-sitter 0.25+: use QueryCursor for execution
        cursor = _tree_sitter_module.QueryCursor(query)
        captures_dict = cursor.captures(node)
        result: list[Capture] = []
        for capture_name, nodes in captures_dict.items():
            for captured in nodes:
                result.append((captured, capture_name))
        result.sort(key=lambda item: item[0].start_byte)
        return result
