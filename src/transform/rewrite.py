"""In-place rewrite of scheduling calls into start-primitive invocations.

Given ``cronStart(fn, [a, b], { cron: "0 9 * * *" })`` imported from the
scheduling module, the call becomes
``start(__cron__fn, [{ args: [a, b], cron: "0 9 * * *" }])``, the
scheduling import is dropped, and imports for ``start`` and the wrapper are
added. All edits are byte ranges on the syntax tree, so nested literals in
the arguments are carried over untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.imports import render_function_import
from contract.artifacts import (
    get_container_dir,
    scheduler_module_specifier,
    wrapper_name,
)
from parse.calls import ScheduleCall, iter_schedule_calls
from parse.imports import (
    default_import,
    import_bindings,
    import_source,
    import_specifiers,
    imports_name,
    mentions_schedule_import,
    named_imports,
    specifier_names,
    top_level_imports,
)
from parse.treesitter_ts import node_text, parse_source
from settings.config import CronStartConfig, load_config
from utils import relative_specifier

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

ARGS_KEY = "args"

_ARGS_NODE_TYPES = frozenset({"array", "identifier"})
_OPTIONS_NODE_TYPES = frozenset({"object", "identifier"})


@dataclass(frozen=True)
class TransformResult:
    code: str
    changed: bool


@dataclass(frozen=True)
class _Edit:
    start: int
    end: int
    text: str


def _is_rewritable(call: ScheduleCall) -> bool:
    if len(call.arguments) != 3:
        return False
    _, args_node, options_node = call.arguments
    return (
        args_node.type in _ARGS_NODE_TYPES
        and options_node.type in _OPTIONS_NODE_TYPES
    )


def _outermost(calls: list[ScheduleCall]) -> list[ScheduleCall]:
    """Drop calls nested inside an earlier call's range."""
    kept: list[ScheduleCall] = []
    for call in calls:
        if kept and call.start_byte < kept[-1].end_byte:
            continue
        kept.append(call)
    return kept


def merge_config(args_node: Node, options_node: Node) -> str:
    """Fold the positional arguments into the options under ``args``.

    Examples (source text of the two nodes on the left):
        ``[a], { cron: c }``  ->  ``{ args: [a], cron: c }``
        ``[a], {}``           ->  ``{ args: [a] }``
        ``[a], opts``         ->  ``{ args: [a], ...opts }``
    """
    args_text = node_text(args_node)
    if options_node.type == "identifier":
        return f"{{ {ARGS_KEY}: {args_text}, ...{node_text(options_node)} }}"

    body = node_text(options_node)[1:-1]
    if not body.strip():
        return f"{{ {ARGS_KEY}: {args_text} }}"
    if not body[:1].isspace():
        body = f" {body}"
    return f"{{ {ARGS_KEY}: {args_text},{body}}}"


def _statement_removal_end(source_bytes: bytes, statement: Node) -> int:
    """End offset of a removed statement, including its line break."""
    end = statement.end_byte
    while source_bytes[end : end + 1] in (b" ", b"\t"):
        end += 1
    if source_bytes[end : end + 1] == b";":
        end += 1
    if source_bytes[end : end + 2] == b"\r\n":
        end += 2
    elif source_bytes[end : end + 1] == b"\n":
        end += 1
    return end


def _import_removal_edits(
    source_bytes: bytes,
    root: Node,
    config: CronStartConfig,
) -> tuple[list[_Edit], list[Node]]:
    """Edits removing the scheduling identifier from its imports.

    Returns the edits and the statements that disappear entirely.
    """
    edits: list[_Edit] = []
    removed: list[Node] = []

    for statement in top_level_imports(root):
        if import_source(statement) != config.call_module:
            continue

        specifiers = import_specifiers(statement)
        remaining = [
            s for s in specifiers if specifier_names(s)[1] != config.call_name
        ]
        if len(remaining) == len(specifiers):
            continue

        named = named_imports(statement)
        default = default_import(statement)
        if remaining:
            joined = ", ".join(node_text(s) for s in remaining)
            edits.append(_Edit(named.start_byte, named.end_byte, f"{{ {joined} }}"))
        elif default is not None:
            edits.append(_Edit(default.end_byte, named.end_byte, ""))
        else:
            end = _statement_removal_end(source_bytes, statement)
            edits.append(_Edit(statement.start_byte, end, ""))
            removed.append(statement)

    return edits, removed


def _has_start_import(root: Node, config: CronStartConfig) -> bool:
    return any(
        binding.source == config.start_module
        and binding.imported_name == config.start_name
        and binding.local_name == config.start_name
        for statement in top_level_imports(root)
        for binding in import_bindings(statement)
    )


def _new_import_lines(
    root: Node,
    calls: list[ScheduleCall],
    source_file: Path,
    project_root: Path,
    config: CronStartConfig,
) -> list[str]:
    lines: list[str] = []
    if not _has_start_import(root, config):
        lines.append(
            render_function_import(config.start_name, None, config.start_module)
        )

    container = get_container_dir(project_root)
    seen: set[str] = set()
    for call in calls:
        name = call.function_name
        if name in seen:
            continue
        seen.add(name)
        specifier = relative_specifier(
            container / scheduler_module_specifier(name),
            source_file.parent,
        )
        lines.append(render_function_import(wrapper_name(name), None, specifier))
    return lines


def _apply_edits(source_bytes: bytes, edits: list[_Edit]) -> bytes:
    """Apply non-overlapping edits from the end of the buffer backwards."""
    result = source_bytes
    for edit in sorted(edits, key=lambda e: (e.start, e.end), reverse=True):
        result = result[: edit.start] + edit.text.encode("utf8") + result[edit.end :]
    return result


def transform_source(
    source: str,
    source_file: Path,
    *,
    project_root: Path | None = None,
    config: CronStartConfig | None = None,
) -> TransformResult:
    """Rewrite every scheduling call in one module's source text.

    Args:
        source: Module source text
        source_file: Absolute path of the module, used to locate the wrappers
        project_root: Project root (defaults to the current directory)
        config: Optional configuration naming the scheduling call and the
            start primitive

    Returns:
        TransformResult with the new code and whether anything changed. The
        source is returned untouched unless it imports the scheduling call
        from its module and contains at least one rewritable call.
    """
    if config is None:
        config = CronStartConfig()
    if project_root is None:
        project_root = Path.cwd()
    unchanged = TransformResult(code=source, changed=False)

    if not mentions_schedule_import(source, config.call_name, config.call_module):
        return unchanged

    source_bytes = source.encode("utf8")
    root = parse_source(source_bytes, source_file).root_node
    if not imports_name(root, config.call_name, config.call_module):
        return unchanged

    found = list(iter_schedule_calls(root, config.call_name))
    calls = _outermost([call for call in found if _is_rewritable(call)])
    if not calls:
        return unchanged

    edits = [
        _Edit(
            call.start_byte,
            call.end_byte,
            f"{config.start_name}({wrapper_name(call.function_name)}, "
            f"[{merge_config(call.arguments[1], call.arguments[2])}])",
        )
        for call in calls
    ]

    removed: list[Node] = []
    if len(calls) == len(found):
        removal_edits, removed = _import_removal_edits(source_bytes, root, config)
        edits.extend(removal_edits)
    else:
        # Calls of another shape still need the scheduling import.
        logger.debug(
            "%s: keeping %s import for %d call(s) of another shape",
            source_file,
            config.call_name,
            len(found) - len(calls),
        )

    import_block = "\n".join(
        _new_import_lines(root, calls, source_file, project_root, config)
    )
    removed_starts = {statement.start_byte for statement in removed}
    surviving = [
        s for s in top_level_imports(root) if s.start_byte not in removed_starts
    ]
    if surviving:
        anchor = surviving[-1].end_byte
        edits.append(_Edit(anchor, anchor, f"\n{import_block}"))
    else:
        first = removed[0]
        for index, edit in enumerate(edits):
            if edit.start == first.start_byte and edit.text == "":
                edits[index] = _Edit(edit.start, edit.end, f"{import_block}\n")
                break

    code = _apply_edits(source_bytes, edits).decode("utf8")
    logger.debug(
        "Rewrote %d %s() call(s) in %s", len(calls), config.call_name, source_file
    )
    return TransformResult(code=code, changed=code != source)


def transform_file(
    path: Path,
    *,
    project_root: Path | None = None,
    config: CronStartConfig | None = None,
    write: bool = False,
) -> TransformResult:
    """Transform one file, optionally writing the result back."""
    path = Path(path)
    if project_root is None:
        project_root = Path.cwd()
    if config is None:
        config = load_config(project_root)

    source = path.read_text(encoding="utf-8")
    result = transform_source(source, path, project_root=project_root, config=config)
    if write and result.changed:
        path.write_text(result.code, encoding="utf-8", newline="")
    return result


__all__ = ["TransformResult", "merge_config", "transform_file", "transform_source"]
