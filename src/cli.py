"""Command-line interface for cronstart."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.write import GenerationError, pregenerate_wrappers
from settings.config import ConfigError, load_config
from transform.rewrite import transform_file

logger = logging.getLogger("cronstart")


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cronstart")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate cron scheduler wrappers"
    )
    _add_common_paths(generate_parser)

    transform_parser = subparsers.add_parser(
        "transform", help="Rewrite cronStart() calls in one file"
    )
    transform_parser.add_argument("file", help="Source file to rewrite")
    transform_parser.add_argument(
        "--root",
        default=".",
        help="Project root (default: .)",
    )
    transform_parser.add_argument(
        "--write",
        action="store_true",
        help="Write the result back instead of printing it",
    )

    return parser


def _handle_generate(root: Path) -> int:
    config = load_config(root)
    try:
        result = pregenerate_wrappers(root, config=config)
    except GenerationError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    if result is not None:
        for function_name, wrapper in sorted(result.name_map.items()):
            sys.stdout.write(f"{function_name} -> {wrapper}\n")
    return 0


def _handle_transform(root: Path, file: str, *, write: bool) -> int:
    path = Path(file).expanduser().resolve()
    config = load_config(root)
    try:
        result = transform_file(path, project_root=root, config=config, write=write)
    except (OSError, UnicodeDecodeError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    if not result.changed:
        logger.warning("No rewritable %s() calls in %s", config.call_name, path)
        return 1
    if not write:
        sys.stdout.write(result.code)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root)

        if args.command == "transform":
            return _handle_transform(root, args.file, write=args.write)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
