"""Discovered scheduling call sites."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class CallSite(BaseModel):
    """One discovered request to run a function on a cron schedule.

    ``origin`` is the module specifier exactly as written at the import, or
    ``./<file stem>`` when the function is not imported (defined in the same
    file, or bound by a form the import map does not recognize).
    ``imported_name`` is the export the local binding refers to: ``"default"``
    for default imports, the original name for renamed imports, ``None``
    when it equals ``function_name``.
    """

    model_config = ConfigDict(frozen=True)

    function_name: str
    origin: str
    source_file: Path
    imported_name: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.function_name, self.origin)


__all__ = ["CallSite"]
