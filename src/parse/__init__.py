"""Parsing utilities for TypeScript and JavaScript sources."""

from parse.calls import ScheduleCall, iter_schedule_calls
from parse.imports import (
    ImportBinding,
    build_import_map,
    imports_name,
    mentions_schedule_import,
)
from parse.treesitter_ts import parse_source

__all__ = [
    "ImportBinding",
    "ScheduleCall",
    "build_import_map",
    "imports_name",
    "iter_schedule_calls",
    "mentions_schedule_import",
    "parse_source",
]
