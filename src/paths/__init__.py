"""Path-alias resolution from compiler configs."""

from paths.aliases import (
    AliasTable,
    AliasTableCache,
    is_alias_form,
    load_alias_table,
    resolve_alias,
    to_alias,
)
from paths.jsonc import loads_jsonc

__all__ = [
    "AliasTable",
    "AliasTableCache",
    "is_alias_form",
    "load_alias_table",
    "loads_jsonc",
    "resolve_alias",
    "to_alias",
]
