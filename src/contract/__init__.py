"""Stable generator↔transformer contract surface.

Treat these exports as the authoritative description of the generated tree.
"""

from contract.artifacts import (
    CONTAINER_DIR_NAME,
    CONTAINER_PREFIX,
    DISCOVERY_MODULE,
    GITIGNORE_CONTENT,
    GITIGNORE_FILE,
    MANIFEST_JSON,
    MODULE_EXTENSION,
    SCHEDULER_MODULE,
    WRAPPER_PREFIX,
    container_dir_name,
    get_container_dir,
    scheduler_module_specifier,
    wrapper_name,
)


def __getattr__(name: str) -> object:
    if name in {"ManifestEntry", "Manifest", "load_manifest"}:
        from artifacts.models.wrappers import Manifest, ManifestEntry
        from artifacts.write import load_manifest

        return {
            "Manifest": Manifest,
            "ManifestEntry": ManifestEntry,
            "load_manifest": load_manifest,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "CONTAINER_DIR_NAME",
    "CONTAINER_PREFIX",
    "DISCOVERY_MODULE",
    "GITIGNORE_CONTENT",
    "GITIGNORE_FILE",
    "MANIFEST_JSON",
    "MODULE_EXTENSION",
    "SCHEDULER_MODULE",
    "WRAPPER_PREFIX",
    "Manifest",
    "ManifestEntry",
    "container_dir_name",
    "get_container_dir",
    "load_manifest",
    "scheduler_module_specifier",
    "wrapper_name",
]
