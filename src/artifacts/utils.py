"""Utility functions for writing the generated tree."""

from __future__ import annotations

import logging
import shutil
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json", by_alias=True)
    return obj


def _write_json(path: Path, obj: object) -> None:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE
    path.write_bytes(orjson.dumps(payload, option=opts))


def _write_text(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8", newline="\n")


def _swap_directory(staging: Path, target: Path) -> None:
    """Move ``staging`` into place as ``target``, replacing any previous tree.

    The previous tree is renamed aside first and restored if the final
    rename fails, so ``target`` is never left half-written.
    A previous tree that cannot be deleted is left for the next run to sweep.
    """
    if not target.exists():
        staging.rename(target)
        return

    retired = target.with_name(f".{target.name}-retired-{uuid.uuid4().hex[:8]}")
    target.rename(retired)
    try:
        staging.rename(target)
    except OSError:
        retired.rename(target)
        raise
    try:
        shutil.rmtree(retired)
    except OSError as exc:
        logger.warning("Could not remove previous tree %s: %s", retired, exc)


@contextmanager
def staged_directory(target: Path) -> Iterator[Path]:
    """Yield an empty staging directory that replaces ``target`` on success.

    The staging directory is a sibling of ``target`` so the final swap is a
    same-filesystem rename. On error it is removed and ``target`` is left
    untouched.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    for leftover in target.parent.glob(f".{target.name}-retired-*"):
        shutil.rmtree(leftover, ignore_errors=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{target.name}-", dir=target.parent))
    staging.chmod(0o755)
    try:
        yield staging
        _swap_directory(staging, target)
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise
