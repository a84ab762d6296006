"""Scheduler wrapper generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from artifacts.imports import resolve_import_target, select_import_path
from artifacts.models.wrappers import (
    GenerationResult,
    Manifest,
    ManifestEntry,
    WrapperDescriptor,
)
from artifacts.render import render_discovery_module, render_scheduler_module
from artifacts.utils import _write_json, _write_text, staged_directory
from contract.artifacts import (
    DISCOVERY_MODULE,
    GITIGNORE_CONTENT,
    GITIGNORE_FILE,
    MANIFEST_JSON,
    MODULE_EXTENSION,
    SCHEDULER_MODULE,
    container_dir_name,
    get_container_dir,
    wrapper_name,
)
from paths.aliases import load_alias_table
from scan.call_sites import deduplicate_call_sites, scan_call_sites
from scan.files import find_source_files
from settings.config import CronStartConfig, load_config

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from artifacts.models.call_sites import CallSite
    from paths.aliases import AliasTable, AliasTableCache

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the call-site set cannot be turned into a consistent tree."""


class WrapperCollisionError(GenerationError):
    """Two call sites need the same wrapper name for different functions."""


def plan_wrappers(
    call_sites: Iterable[CallSite],
    container: Path,
    table: AliasTable,
) -> list[WrapperDescriptor]:
    """Plan one wrapper per unique (function name, origin) pair.

    Wrapper and directory names depend only on the function name, so pairs
    sharing a name collapse into one wrapper when they resolve to the same
    import and are rejected otherwise.
    """
    planned: dict[str, WrapperDescriptor] = {}
    identities: dict[str, tuple[str, str | None]] = {}

    for call_site in deduplicate_call_sites(call_sites):
        name = call_site.function_name
        identity = (
            resolve_import_target(call_site, table),
            call_site.imported_name,
        )

        existing = identities.get(name)
        if existing is not None:
            if existing != identity:
                msg = (
                    f"Scheduled functions named '{name}' come from different "
                    f"modules ('{existing[0]}' and '{identity[0]}'); wrapper "
                    f"'{wrapper_name(name)}' can only wrap one of them"
                )
                raise WrapperCollisionError(msg)
            continue

        directory = container_dir_name(name)
        module_path = container / directory / f"{SCHEDULER_MODULE}{MODULE_EXTENSION}"
        identities[name] = identity
        planned[name] = WrapperDescriptor(
            function_name=name,
            wrapper_name=wrapper_name(name),
            container_dir=directory,
            module_path=module_path,
            import_path=select_import_path(call_site, module_path.parent, table),
            imported_name=call_site.imported_name,
        )

    return list(planned.values())


def generate_wrappers(
    call_sites: Iterable[CallSite],
    project_root: Path,
    *,
    config: CronStartConfig | None = None,
    alias_cache: AliasTableCache | None = None,
) -> GenerationResult:
    """Regenerate the scheduler wrapper tree for a project.

    The container directory is rebuilt from scratch on every call: the new
    tree is written to a staging directory and swapped in, so the previous
    tree survives any failure.

    Args:
        call_sites: Discovered call sites (duplicates are tolerated)
        project_root: Root directory of the project
        config: Optional configuration naming the runtime primitives
        alias_cache: Optional caller-owned alias table cache

    Returns:
        GenerationResult with the container path, the written scheduler
        modules and the function-name to wrapper-name mapping.

    Raises:
        WrapperCollisionError: If two different functions share a name.
        OSError: If the tree cannot be written.
    """
    if config is None:
        config = CronStartConfig()

    container = get_container_dir(project_root)
    table = load_alias_table(project_root, cache=alias_cache)
    descriptors = plan_wrappers(call_sites, container, table)

    with staged_directory(container) as staging:
        _write_text(staging / GITIGNORE_FILE, GITIGNORE_CONTENT)

        for descriptor in descriptors:
            wrapper_dir = staging / descriptor.container_dir
            wrapper_dir.mkdir()
            _write_text(
                wrapper_dir / descriptor.module_path.name,
                render_scheduler_module(descriptor, config),
            )

        _write_json(staging / MANIFEST_JSON, Manifest.from_descriptors(descriptors))
        _write_text(
            staging / f"{DISCOVERY_MODULE}{MODULE_EXTENSION}",
            render_discovery_module(descriptors),
        )

    logger.info("Generated %d wrapper file(s) in %s", len(descriptors), container)

    return GenerationResult(
        container=container,
        files_written=[d.module_path for d in descriptors],
        name_map={d.function_name: d.wrapper_name for d in descriptors},
    )


def pregenerate_wrappers(
    project_root: Path,
    *,
    config: CronStartConfig | None = None,
    alias_cache: AliasTableCache | None = None,
) -> GenerationResult | None:
    """Scan the project's source directories and regenerate wrappers.

    Returns None when no call site exists and there is no previous tree to
    clear; otherwise the tree is rebuilt so stale wrappers disappear.
    """
    if config is None:
        config = load_config(project_root)

    container = get_container_dir(project_root)
    files = find_source_files(
        project_root,
        dirs=config.scan_dirs,
        output_dir=container,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    )
    call_sites = scan_call_sites(files, project_root, config=config)

    if not call_sites and not container.exists():
        logger.info("No %s() calls found", config.call_name)
        return None

    return generate_wrappers(
        call_sites,
        project_root,
        config=config,
        alias_cache=alias_cache,
    )


def get_manifest_path(project_root: Path) -> Path:
    return get_container_dir(project_root) / MANIFEST_JSON


def load_manifest(project_root: Path) -> dict[str, ManifestEntry] | None:
    """Load the manifest of the last generation pass, if there is a valid one."""
    manifest_path = get_manifest_path(project_root)
    try:
        data = manifest_path.read_bytes()
    except OSError:
        return None

    try:
        return Manifest.model_validate(orjson.loads(data)).root
    except (orjson.JSONDecodeError, ValidationError) as exc:
        logger.debug("Ignoring invalid manifest %s: %s", manifest_path, exc)
        return None
