"""Scheduler wrapper generation entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from artifacts.models.call_sites import CallSite
    from artifacts.models.wrappers import GenerationResult
    from paths.aliases import AliasTableCache
    from settings.config import CronStartConfig


def generate_wrappers(
    call_sites: Iterable[CallSite],
    project_root: Path,
    *,
    config: CronStartConfig | None = None,
    alias_cache: AliasTableCache | None = None,
) -> GenerationResult:
    """Generate wrappers via lazy import to avoid package import cycles."""
    from artifacts.write import generate_wrappers as _generate_wrappers

    return _generate_wrappers(
        call_sites, project_root, config=config, alias_cache=alias_cache
    )


def pregenerate_wrappers(
    project_root: Path,
    *,
    config: CronStartConfig | None = None,
    alias_cache: AliasTableCache | None = None,
) -> GenerationResult | None:
    """Scan and generate via lazy import to avoid package import cycles."""
    from artifacts.write import pregenerate_wrappers as _pregenerate_wrappers

    return _pregenerate_wrappers(project_root, config=config, alias_cache=alias_cache)


__all__ = ["generate_wrappers", "pregenerate_wrappers"]
