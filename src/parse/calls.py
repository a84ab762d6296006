"""Discovery of scheduling call expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from parse.treesitter_ts import argument_nodes, iter_nodes, node_text

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node


@dataclass(frozen=True)
class ScheduleCall:
    """A ``call_name(fn, ...)`` expression whose first argument is an identifier."""

    node: Node
    function_name: str
    arguments: tuple[Node, ...]

    @property
    def start_byte(self) -> int:
        return self.node.start_byte

    @property
    def end_byte(self) -> int:
        return self.node.end_byte


def iter_schedule_calls(root: Node, call_name: str) -> Iterator[ScheduleCall]:
    """Yield scheduling calls in document order.

    Only direct calls of the bare identifier qualify, with at least two
    arguments of which the first is an identifier. Anything else
    (member calls, spread arguments, inline functions) is not a
    scheduling request this tool can wrap.
    """
    for node in iter_nodes(root):
        if node.type != "call_expression":
            continue

        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "identifier":
            continue
        if node_text(callee) != call_name:
            continue

        arguments = argument_nodes(node)
        if len(arguments) < 2 or arguments[0].type != "identifier":
            continue

        yield ScheduleCall(
            node=node,
            function_name=node_text(arguments[0]),
            arguments=tuple(arguments),
        )
