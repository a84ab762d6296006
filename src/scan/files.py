"""Source file discovery for scheduling-call scans."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from utils import SOURCE_EXTENSIONS

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

# Directories never worth scanning: dependencies, VCS data, build output.
SKIPPED_DIR_NAMES = frozenset({"node_modules", ".git", ".next", ".well-known"})


def _should_include_file(
    path: Path,
    directory: Path,
    output_dir: Path | None,
    gitignore_matches: Callable[[str], bool] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if path.suffix not in SOURCE_EXTENSIONS:
        return False

    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, directory):
        return False

    try:
        rel_path = path.relative_to(directory)
    except ValueError:
        return False

    if any(part in SKIPPED_DIR_NAMES for part in rel_path.parts[:-1]):
        return False

    if output_dir is not None and path.is_relative_to(output_dir):
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    rel_path_str = rel_path.as_posix()
    has_excluded_match = exclude_patterns and any(
        fnmatch(rel_path_str, pat) for pat in exclude_patterns
    )
    return not has_excluded_match


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _iter_gitignore_files(root: Path) -> list[Path]:
    """Return sorted list of .gitignore files under root (including root)."""
    gitignore_paths = [root / ".gitignore"]
    gitignore_paths.extend(
        path
        for path in root.rglob(".gitignore")
        if not any(part in SKIPPED_DIR_NAMES for part in path.relative_to(root).parts)
    )
    unique_paths = {
        path for path in gitignore_paths if path.is_file() and not path.is_symlink()
    }
    return sorted(unique_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = _iter_gitignore_files(root)
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def find_source_files(
    root: Path,
    *,
    dirs: list[str],
    output_dir: Path | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find JavaScript/TypeScript sources beneath ``dirs``, respecting .gitignore.

    Args:
        root: Project root; ``dirs`` and exclude patterns are relative to it
        dirs: Directories to search; missing ones are skipped
        output_dir: Generated tree to leave out of the scan
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded
        nested_gitignore: Compose every .gitignore under root instead of
            only the root one

    Yields:
        Path objects for each source file found, sorted lexicographically
        by relative path, each at most once even when ``dirs`` overlap.
    """
    gitignore_matches = _build_gitignore_matcher(
        root,
        nested_gitignore=nested_gitignore,
    )

    matched_files: set[Path] = set()
    for directory in dirs:
        search_root = root / directory
        if not search_root.is_dir() or search_root.is_symlink():
            continue
        matched_files.update(
            path
            for path in search_root.rglob("*")
            if _should_include_file(
                path,
                root,
                output_dir,
                gitignore_matches,
                exclude_patterns,
            )
        )

    yield from sorted(matched_files, key=lambda p: p.relative_to(root).as_posix())


__all__ = ["_should_include_file", "find_source_files"]
