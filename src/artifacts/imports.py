"""Import-path selection for generated scheduler modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

from parse.imports import DEFAULT_EXPORT
from paths.aliases import is_alias_form, resolve_alias, to_alias
from utils import is_relative_specifier, normalize_path, relative_specifier

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.call_sites import CallSite
    from paths.aliases import AliasTable


def select_import_path(
    call_site: CallSite,
    module_dir: Path,
    table: AliasTable,
) -> str:
    """Choose the specifier a wrapper in ``module_dir`` uses to import the function.

    Evaluated in order:

    1. An alias-form origin is kept verbatim.
    2. A relative origin is resolved against the calling file's directory and
       re-expressed as an alias when a configured pattern covers it.
    3. Otherwise the resolved target is made relative to ``module_dir``.
    4. Anything else (a package name) passes through unchanged.
    """
    origin = call_site.origin

    if is_alias_form(origin, table):
        return origin

    if is_relative_specifier(origin):
        target = normalize_path(call_site.source_file.parent / origin)
        alias = to_alias(target, table)
        if alias is not None:
            return alias
        return relative_specifier(target, module_dir)

    return origin


def resolve_import_target(call_site: CallSite, table: AliasTable) -> str:
    """Identity of the module a call site imports from.

    Aliases and relative specifiers reaching the same file map to the same
    absolute path; package names stay as written.
    """
    origin = call_site.origin
    if is_relative_specifier(origin):
        return normalize_path(call_site.source_file.parent / origin).as_posix()
    if is_alias_form(origin, table):
        resolved = resolve_alias(origin, table)
        if resolved is not None:
            return resolved.as_posix()
    return origin


def js_string(value: str) -> str:
    """Quote ``value`` as a double-quoted JavaScript string literal."""
    return orjson.dumps(value).decode("utf8")


def render_function_import(
    function_name: str,
    imported_name: str | None,
    import_path: str,
) -> str:
    """Render the import statement binding ``function_name`` inside a wrapper.

    Examples:
        >>> render_function_import("sendReport", None, "@/lib/jobs")
        'import { sendReport } from "@/lib/jobs"'
        >>> render_function_import("purge", "cleanup", "./jobs")
        'import { cleanup as purge } from "./jobs"'
        >>> render_function_import("nightly", "default", "./nightly")
        'import nightly from "./nightly"'
    """
    source = js_string(import_path)
    if imported_name == DEFAULT_EXPORT:
        return f"import {function_name} from {source}"
    if imported_name and imported_name != function_name:
        return f"import {{ {imported_name} as {function_name} }} from {source}"
    return f"import {{ {function_name} }} from {source}"
