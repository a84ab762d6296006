"""Scheduling call-site discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.models.call_sites import CallSite
from parse.calls import iter_schedule_calls
from parse.imports import build_import_map, imports_name, mentions_schedule_import
from parse.treesitter_ts import parse_source
from settings.config import CronStartConfig
from utils import strip_source_extension

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def _display_path(path: Path, project_root: Path) -> str:
    try:
        return path.relative_to(project_root).as_posix()
    except ValueError:
        return str(path)


def extract_call_sites(
    source: str,
    source_file: Path,
    *,
    config: CronStartConfig | None = None,
) -> list[CallSite]:
    """Extract scheduling call sites from one file's text, duplicates included."""
    if config is None:
        config = CronStartConfig()

    if not mentions_schedule_import(source, config.call_name, config.call_module):
        return []

    tree = parse_source(source.encode("utf8"), source_file)
    root = tree.root_node
    if not imports_name(root, config.call_name, config.call_module):
        return []

    import_map = build_import_map(root)
    same_file_origin = f"./{strip_source_extension(source_file.name)}"

    call_sites: list[CallSite] = []
    for call in iter_schedule_calls(root, config.call_name):
        binding = import_map.get(call.function_name)
        if binding is None:
            logger.debug(
                "%s: %s is not imported; assuming it is defined in this file",
                source_file,
                call.function_name,
            )
            call_sites.append(
                CallSite(
                    function_name=call.function_name,
                    origin=same_file_origin,
                    source_file=source_file,
                )
            )
            continue

        imported_name = binding.imported_name
        call_sites.append(
            CallSite(
                function_name=call.function_name,
                origin=binding.source,
                source_file=source_file,
                imported_name=(
                    None if imported_name == call.function_name else imported_name
                ),
            )
        )

    return call_sites


def deduplicate_call_sites(call_sites: Iterable[CallSite]) -> list[CallSite]:
    """Keep the first call site per (function name, origin), preserving order."""
    seen: set[tuple[str, str]] = set()
    unique: list[CallSite] = []
    for call_site in call_sites:
        if call_site.key in seen:
            continue
        seen.add(call_site.key)
        unique.append(call_site)
    return unique


def scan_call_sites(
    files: Iterable[Path],
    project_root: Path,
    *,
    config: CronStartConfig | None = None,
) -> list[CallSite]:
    """Scan files for scheduling calls and return unique call sites.

    Files that cannot be read or decoded are skipped; a malformed call shape
    simply yields no call site.

    Args:
        files: Absolute paths of the files to scan
        project_root: Project root, used for diagnostics
        config: Optional configuration naming the scheduling call

    Returns:
        Call sites unique by (function name, origin), in discovery order.
    """
    if config is None:
        config = CronStartConfig()

    discovered: list[CallSite] = []
    for file_path in files:
        path = Path(file_path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug(
                "Skipping unreadable file %s: %s",
                _display_path(path, project_root),
                exc,
            )
            continue
        discovered.extend(extract_call_sites(source, path, config=config))

    unique = deduplicate_call_sites(discovered)
    if unique:
        logger.info(
            "Found %d %s() call(s): %s",
            len(unique),
            config.call_name,
            ", ".join(call_site.function_name for call_site in unique),
        )
    return unique


__all__ = [
    "deduplicate_call_sites",
    "extract_call_sites",
    "scan_call_sites",
]
