"""Compiler path-alias resolution (``compilerOptions.paths``).

Aliases are resolved in both directions: an alias specifier can be turned
into an absolute path, and an absolute path can be re-expressed as an alias
specifier. The generator uses the second direction to keep wrapper imports
stable when the generated tree sits at a different depth than the file that
made the scheduling call.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field

from paths.jsonc import loads_jsonc
from utils import is_relative_specifier, normalize_path, to_posix

logger = logging.getLogger(__name__)

CONFIG_CANDIDATES = ("tsconfig.json", "jsconfig.json")

# Prefixes treated as aliases even when the project does not configure them.
CONVENTIONAL_ALIAS_PREFIXES = ("@/", "~/", "#/", "src/")


class AliasTable(BaseModel):
    """Resolved path-alias configuration for one project."""

    model_config = ConfigDict(frozen=True)

    base_dir: Path
    paths: dict[str, list[str]] = Field(default_factory=dict)


class AliasTableCache:
    """Single-entry alias table cache keyed by project directory.

    The caller owns the cache and decides when it goes stale; nothing is
    re-read until ``invalidate`` is called or a different directory is
    requested.
    """

    def __init__(self) -> None:
        self._root: Path | None = None
        self._table: AliasTable | None = None

    def get(self, project_root: Path) -> AliasTable:
        root = Path(project_root)
        if self._table is None or self._root != root:
            self._table = _read_alias_table(root)
            self._root = root
        return self._table

    def invalidate(self) -> None:
        self._root = None
        self._table = None


def load_alias_table(
    project_root: Path,
    *,
    cache: AliasTableCache | None = None,
) -> AliasTable:
    """Load the project's alias table, through ``cache`` when given.

    A missing or unparsable config yields an empty table, never an error.
    """
    if cache is not None:
        return cache.get(project_root)
    return _read_alias_table(Path(project_root))


def _read_config(path: Path) -> dict[str, Any] | None:
    try:
        data = loads_jsonc(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, orjson.JSONDecodeError) as exc:
        logger.debug("Ignoring unreadable compiler config %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        logger.debug("Ignoring compiler config %s: not an object", path)
        return None
    return data


def _compiler_options(
    config: dict[str, Any],
) -> tuple[str | None, dict[str, list[str]]]:
    options = config.get("compilerOptions")
    if not isinstance(options, dict):
        return None, {}

    base_url = options.get("baseUrl")
    if not isinstance(base_url, str):
        base_url = None

    paths: dict[str, list[str]] = {}
    raw_paths = options.get("paths")
    if isinstance(raw_paths, dict):
        for pattern, targets in raw_paths.items():
            if isinstance(targets, list):
                paths[pattern] = [t for t in targets if isinstance(t, str)]
    return base_url, paths


def _parent_config_path(project_root: Path, extends: str) -> Path:
    parent = normalize_path(project_root / extends)
    if parent.suffix != ".json":
        parent = parent.with_name(f"{parent.name}.json")
    return parent


def _read_alias_table(project_root: Path) -> AliasTable:
    for candidate in CONFIG_CANDIDATES:
        config_path = project_root / candidate
        if not config_path.is_file():
            continue

        config = _read_config(config_path)
        if config is None:
            continue

        base_url, paths = _compiler_options(config)
        base_dir = normalize_path(project_root / base_url) if base_url else None

        extends = config.get("extends")
        if isinstance(extends, str):
            parent_path = _parent_config_path(project_root, extends)
            parent = _read_config(parent_path) if parent_path.is_file() else None
            if parent is not None:
                parent_base_url, parent_paths = _compiler_options(parent)
                if base_dir is None and parent_base_url:
                    base_dir = normalize_path(parent_path.parent / parent_base_url)
                paths = {**parent_paths, **paths}

        logger.debug(
            "Loaded %d path alias(es) from %s", len(paths), config_path.name
        )
        return AliasTable(
            base_dir=base_dir or normalize_path(project_root),
            paths=paths,
        )

    return AliasTable(base_dir=normalize_path(project_root))


@lru_cache(maxsize=256)
def _pattern_regex(pattern: str) -> re.Pattern[str]:
    """Anchored matcher for a one-wildcard alias pattern."""
    head, star, tail = pattern.partition("*")
    if not star:
        return re.compile(f"^{re.escape(pattern)}()$")
    return re.compile(f"^{re.escape(head)}(.*){re.escape(tail)}$")


def resolve_alias(specifier: str, table: AliasTable) -> Path | None:
    """Resolve an alias specifier to an absolute path.

    The first pattern that matches wins and only its first target is used.

    Examples:
        >>> table = AliasTable(base_dir=Path("/app"), paths={"@/*": ["./src/*"]})
        >>> resolve_alias("@/lib/jobs", table).as_posix()
        '/app/src/lib/jobs'
        >>> resolve_alias("lodash", table) is None
        True
    """
    for pattern, targets in table.paths.items():
        match = _pattern_regex(pattern).match(specifier)
        if match is None:
            continue
        if not targets:
            continue
        resolved = targets[0].replace("*", match.group(1), 1)
        return normalize_path(table.base_dir / resolved)
    return None


def to_alias(absolute_path: str | Path, table: AliasTable) -> str | None:
    """Re-express an absolute path as an alias specifier, if any pattern covers it."""
    path = to_posix(normalize_path(absolute_path))

    for pattern, targets in table.paths.items():
        if not targets:
            continue
        target_head, star, target_tail = targets[0].partition("*")
        base = to_posix(normalize_path(table.base_dir / target_head))

        if not star:
            if path == base:
                return pattern
            continue

        if path == base:
            remainder = ""
        elif path.startswith(base.rstrip("/") + "/"):
            remainder = path[len(base.rstrip("/")) + 1 :]
        else:
            continue

        if target_tail:
            if not remainder.endswith(target_tail):
                continue
            remainder = remainder[: -len(target_tail)]

        return pattern.replace("*", remainder, 1)

    return None


def is_alias_form(specifier: str, table: AliasTable) -> bool:
    """Return True for a path alias, as opposed to a relative path or a package."""
    if is_relative_specifier(specifier):
        return False

    if any(_pattern_regex(pattern).match(specifier) for pattern in table.paths):
        return True

    return specifier.startswith(CONVENTIONAL_ALIAS_PREFIXES)
