"""Tree-sitter parsers for TypeScript and JavaScript sources."""

from __future__ import annotations

from pathlib import PurePath
from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser, Tree
from tree_sitter_typescript import language_tsx, language_typescript

if TYPE_CHECKING:
    from collections.abc import Iterator

# Plain JavaScript may contain JSX, so it goes through the TSX grammar.
# TypeScript proper must not: ``<T>expr`` assertions are invalid in TSX.
_TYPESCRIPT_SUFFIXES = frozenset({".ts", ".mts", ".cts"})

_PARSERS: dict[str, Parser] = {}


def _get_parser(dialect: str) -> Parser:
    """Initialize and return the Tree-sitter parser for a grammar dialect."""
    parser = _PARSERS.get(dialect)
    if parser is None:
        if dialect == "typescript":
            lang = Language(language_typescript())
        else:
            lang = Language(language_tsx())
        parser = Parser(lang)
        _PARSERS[dialect] = parser
    return parser


def dialect_for(file_name: str | PurePath) -> str:
    suffix = PurePath(file_name).suffix.lower()
    return "typescript" if suffix in _TYPESCRIPT_SUFFIXES else "tsx"


def parse_source(source_bytes: bytes, file_name: str | PurePath) -> Tree:
    """Parse source bytes with the grammar matching the file extension.

    Tree-sitter never raises on malformed input; syntax errors surface as
    ``ERROR`` nodes which callers simply do not match.
    """
    return _get_parser(dialect_for(file_name)).parse(source_bytes)


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield ``root`` and all of its descendants in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def node_text(node: Node) -> str:
    return (node.text or b"").decode("utf8", errors="replace")


def string_value(node: Node) -> str:
    """Return the contents of a string literal node without its quotes."""
    text = node_text(node)
    if len(text) >= 2 and text[0] in "\"'" and text[-1] == text[0]:
        return text[1:-1]
    return text


def argument_nodes(call_node: Node) -> list[Node]:
    """Return the argument expressions of a ``call_expression``.

    Comments between arguments are named nodes too and are dropped.
    """
    arguments = call_node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return [child for child in arguments.named_children if child.type != "comment"]
