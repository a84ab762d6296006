"""Shared path utilities for import specifiers."""

from __future__ import annotations

import os
from pathlib import Path

SOURCE_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts", ".js", ".jsx", ".mjs", ".cjs")


def to_posix(path: str | Path) -> str:
    """Return a path string with forward-slash separators."""
    return str(path).replace("\\", "/")


def normalize_path(path: str | Path) -> Path:
    """Collapse ``.`` and ``..`` segments without touching the filesystem."""
    return Path(os.path.normpath(path))


def strip_source_extension(name: str) -> str:
    """Drop a JavaScript/TypeScript source extension from a file name.

    Examples:
        >>> strip_source_extension("page.tsx")
        'page'
        >>> strip_source_extension("data.json")
        'data.json'
    """
    for extension in SOURCE_EXTENSIONS:
        if name.endswith(extension):
            return name[: -len(extension)]
    return name


def is_relative_specifier(specifier: str) -> bool:
    """Return True for same-directory or parent-directory specifiers."""
    return specifier in {".", ".."} or specifier.startswith(("./", "../"))


def relative_specifier(target: str | Path, from_dir: str | Path) -> str:
    """Express ``target`` as an import specifier relative to ``from_dir``.

    The result always uses forward slashes and always starts with ``./``
    or ``../`` so it cannot be mistaken for a package name.

    Examples:
        >>> relative_specifier("/app/src/lib/jobs", "/app/src/app/cron")
        '../../lib/jobs'
        >>> relative_specifier("/app/src/lib/jobs", "/app/src/lib")
        './jobs'
    """
    relative = to_posix(os.path.relpath(target, from_dir))
    if not is_relative_specifier(relative):
        relative = f"./{relative}"
    return relative
