"""ES module import analysis."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from parse.treesitter_ts import node_text, string_value

if TYPE_CHECKING:
    from tree_sitter import Node

DEFAULT_EXPORT = "default"


@dataclass(frozen=True)
class ImportBinding:
    """A local name bound by an import declaration."""

    local_name: str
    imported_name: str
    source: str


@lru_cache(maxsize=32)
def _schedule_import_regex(call_name: str, call_module: str) -> re.Pattern[str]:
    return re.compile(
        r"\bimport\s*(?:type\s+)?(?:[\w$]+\s*,\s*)?\{[^}]*\b"
        + re.escape(call_name)
        + r"\b[^}]*\}\s*from\s*[\"']"
        + re.escape(call_module)
        + r"[\"']"
    )


def mentions_schedule_import(source: str, call_name: str, call_module: str) -> bool:
    """Cheap textual check that a file may import ``call_name`` from ``call_module``.

    Used to skip files before parsing; a positive answer is confirmed on the
    syntax tree with ``imports_name``.
    """
    if call_name not in source:
        return False
    return _schedule_import_regex(call_name, call_module).search(source) is not None


def top_level_imports(root: Node) -> list[Node]:
    return [child for child in root.children if child.type == "import_statement"]


def import_source(statement: Node) -> str | None:
    source = statement.child_by_field_name("source")
    if source is None:
        return None
    return string_value(source)


def import_clause(statement: Node) -> Node | None:
    for child in statement.named_children:
        if child.type == "import_clause":
            return child
    return None


def named_imports(statement: Node) -> Node | None:
    clause = import_clause(statement)
    if clause is None:
        return None
    for child in clause.named_children:
        if child.type == "named_imports":
            return child
    return None


def default_import(statement: Node) -> Node | None:
    clause = import_clause(statement)
    if clause is None:
        return None
    for child in clause.named_children:
        if child.type == "identifier":
            return child
    return None


def specifier_names(specifier: Node) -> tuple[str, str]:
    """Return ``(imported_name, local_name)`` for an ``import_specifier``."""
    name_node = specifier.child_by_field_name("name")
    alias_node = specifier.child_by_field_name("alias")
    if name_node is None:
        text = node_text(specifier).strip()
        return text, text
    imported = (
        string_value(name_node) if name_node.type == "string" else node_text(name_node)
    )
    local = node_text(alias_node) if alias_node is not None else imported
    return imported, local


def import_specifiers(statement: Node) -> list[Node]:
    named = named_imports(statement)
    if named is None:
        return []
    return [child for child in named.named_children if child.type == "import_specifier"]


def import_bindings(statement: Node) -> list[ImportBinding]:
    """Extract default, named and renamed bindings from one import statement."""
    source = import_source(statement)
    if source is None:
        return []

    bindings: list[ImportBinding] = []
    default = default_import(statement)
    if default is not None:
        bindings.append(
            ImportBinding(
                local_name=node_text(default),
                imported_name=DEFAULT_EXPORT,
                source=source,
            )
        )

    for specifier in import_specifiers(statement):
        imported, local = specifier_names(specifier)
        bindings.append(
            ImportBinding(local_name=local, imported_name=imported, source=source)
        )

    return bindings


def build_import_map(root: Node) -> dict[str, ImportBinding]:
    """Map each locally bound identifier to the import that bound it.

    A later declaration of the same local name replaces an earlier one.
    """
    import_map: dict[str, ImportBinding] = {}
    for statement in top_level_imports(root):
        for binding in import_bindings(statement):
            import_map[binding.local_name] = binding
    return import_map


def imports_name(root: Node, name: str, module: str) -> bool:
    """Return True when a top-level import binds export ``name`` from ``module``."""
    return any(
        binding.imported_name == name and binding.source == module
        for statement in top_level_imports(root)
        for binding in import_bindings(statement)
    )
