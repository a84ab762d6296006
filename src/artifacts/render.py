"""Jinja2 rendering of generated TypeScript modules."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from artifacts.imports import js_string, render_function_import
from contract.artifacts import LOG_PREFIX, SCHEDULER_MODULE, step_name

if TYPE_CHECKING:
    from artifacts.models.wrappers import WrapperDescriptor
    from settings.config import CronStartConfig

TEMPLATE_DIR = Path(__file__).parent / "templates"

_ENV: Environment | None = None


def _get_environment() -> Environment:
    """Initialize and return the shared template environment."""
    global _ENV
    if _ENV is None:
        _ENV = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        _ENV.filters["js_string"] = js_string
    return _ENV


def render_scheduler_module(
    descriptor: WrapperDescriptor,
    config: CronStartConfig,
) -> str:
    """Render the scheduler module (sleep-then-start loop) for one wrapper."""
    template = _get_environment().get_template("workflow.ts.j2")
    return template.render(
        function_name=descriptor.function_name,
        wrapper_name=descriptor.wrapper_name,
        step_name=step_name(descriptor.function_name),
        function_import=render_function_import(
            descriptor.function_name,
            descriptor.imported_name,
            descriptor.import_path,
        ),
        start_name=config.start_name,
        start_module=config.start_module,
        sleep_name=config.sleep_name,
        sleep_module=config.sleep_module,
        log_prefix=LOG_PREFIX,
    )


def render_discovery_module(descriptors: list[WrapperDescriptor]) -> str:
    """Render the aggregator that re-exports every wrapper."""
    template = _get_environment().get_template("route.ts.j2")
    return template.render(wrappers=descriptors, scheduler_module=SCHEDULER_MODULE)
