"""Generated-tree contract shared by the generator and the transformer.

Both sides must agree on where wrappers live and what they are called
without either knowing how the other is invoked. Everything here is a
constant or a pure function of its inputs, apart from
``get_container_dir`` which inspects the project layout.
"""

from __future__ import annotations

from pathlib import Path

# Directory name of the generated tree. No leading underscore: the
# framework treats ``_folders`` as private and would not route them.
CONTAINER_DIR_NAME = "cron-wrappers"

# Candidate routable source roots, in priority order.
ROUTABLE_ROOTS: tuple[tuple[str, ...], ...] = (("src", "app"), ("app",))

GITIGNORE_FILE = ".gitignore"
GITIGNORE_CONTENT = "*\n"
MANIFEST_JSON = "manifest.json"
DISCOVERY_MODULE = "route"
SCHEDULER_MODULE = "workflow"
MODULE_EXTENSION = ".ts"

WRAPPER_PREFIX = "__cron__"
CONTAINER_PREFIX = "trigger-"

LOG_PREFIX = "[cronstart]"


def wrapper_name(function_name: str) -> str:
    """Exported identifier of the scheduler wrapper for ``function_name``."""
    return f"{WRAPPER_PREFIX}{function_name}"


def container_dir_name(function_name: str) -> str:
    """Subdirectory holding the scheduler wrapper for ``function_name``."""
    return f"{CONTAINER_PREFIX}{function_name}"


def step_name(function_name: str) -> str:
    return f"__start_{function_name}__"


def get_container_dir(project_root: Path) -> Path:
    """Return the generated tree's location for a project.

    The first routable root that exists wins; when none exists the first
    candidate is returned so a later generation pass can create it.
    """
    for parts in ROUTABLE_ROOTS:
        candidate = project_root.joinpath(*parts)
        if candidate.is_dir():
            return candidate / CONTAINER_DIR_NAME
    return project_root.joinpath(*ROUTABLE_ROOTS[0]) / CONTAINER_DIR_NAME


def scheduler_module_specifier(function_name: str) -> str:
    """Extensionless path of a wrapper module relative to the container."""
    return f"{container_dir_name(function_name)}/{SCHEDULER_MODULE}"
