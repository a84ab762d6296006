from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from paths.aliases import (
    AliasTable,
    AliasTableCache,
    is_alias_form,
    load_alias_table,
    resolve_alias,
    to_alias,
)
from paths.jsonc import loads_jsonc

FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "next_app"


def _copy_fixture(tmp_path: Path) -> Path:
    project_root = tmp_path / "next_app"
    shutil.copytree(FIXTURE_ROOT, project_root)
    return project_root


def test_loads_jsonc_strips_comments_and_trailing_commas() -> None:
    text = """
    {
      // line comment
      "paths": { "@/*": ["./src/*"], /* block */ },
      "url": "http://example.com/*not-a-comment*/",
    }
    """

    data = loads_jsonc(text)

    assert data == {
        "paths": {"@/*": ["./src/*"]},
        "url": "http://example.com/*not-a-comment*/",
    }


def test_load_alias_table_merges_parent_beneath_child(tmp_path: Path) -> None:
    project_root = _copy_fixture(tmp_path)

    table = load_alias_table(project_root)

    assert table.base_dir == project_root
    assert table.paths == {"~/*": ["./src/lib/*"], "@/*": ["./src/*"]}


def test_load_alias_table_missing_config_is_empty(tmp_path: Path) -> None:
    table = load_alias_table(tmp_path)

    assert table.paths == {}
    assert table.base_dir == tmp_path


def test_load_alias_table_unparsable_config_is_empty(tmp_path: Path) -> None:
    (tmp_path / "tsconfig.json").write_text("{ not json", encoding="utf-8")

    table = load_alias_table(tmp_path)

    assert table.paths == {}


def test_load_alias_table_falls_back_to_jsconfig(tmp_path: Path) -> None:
    (tmp_path / "jsconfig.json").write_text(
        '{"compilerOptions": {"baseUrl": "src", "paths": {"#/*": ["./*"]}}}',
        encoding="utf-8",
    )

    table = load_alias_table(tmp_path)

    assert table.base_dir == tmp_path / "src"
    expected = tmp_path / "src" / "jobs" / "nightly"
    assert resolve_alias("#/jobs/nightly", table) == expected


def test_parent_base_url_resolves_against_parent_directory(tmp_path: Path) -> None:
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "base.json").write_text(
        '{"compilerOptions": {"baseUrl": "..", "paths": {"@/*": ["./src/*"]}}}',
        encoding="utf-8",
    )
    (tmp_path / "tsconfig.json").write_text(
        '{"extends": "./config/base"}',
        encoding="utf-8",
    )

    table = load_alias_table(tmp_path)

    assert table.base_dir == tmp_path
    assert table.paths == {"@/*": ["./src/*"]}


def test_alias_cache_is_caller_owned(tmp_path: Path) -> None:
    (tmp_path / "tsconfig.json").write_text(
        '{"compilerOptions": {"paths": {"@/*": ["./src/*"]}}}',
        encoding="utf-8",
    )
    cache = AliasTableCache()

    first = load_alias_table(tmp_path, cache=cache)
    (tmp_path / "tsconfig.json").write_text(
        '{"compilerOptions": {"paths": {"~/*": ["./lib/*"]}}}',
        encoding="utf-8",
    )

    assert load_alias_table(tmp_path, cache=cache) is first
    assert "~/*" in load_alias_table(tmp_path).paths

    cache.invalidate()

    assert load_alias_table(tmp_path, cache=cache).paths == {"~/*": ["./lib/*"]}


def test_resolve_alias_first_match_wins() -> None:
    table = AliasTable(
        base_dir=Path("/app"),
        paths={"@/lib/*": ["./shared/*"], "@/*": ["./src/*", "./fallback/*"]},
    )

    assert resolve_alias("@/lib/jobs", table) == Path("/app/shared/jobs")
    assert resolve_alias("@/app/page", table) == Path("/app/src/app/page")
    assert resolve_alias("lodash", table) is None


def test_resolve_alias_patterns_are_anchored() -> None:
    table = AliasTable(base_dir=Path("/app"), paths={"@/*": ["./src/*"]})

    assert resolve_alias("pkg/@/jobs", table) is None


@pytest.mark.parametrize(
    "specifier",
    ["@/lib/workflows", "@/app/admin/page", "config"],
)
def test_alias_round_trip(specifier: str) -> None:
    table = AliasTable(
        base_dir=Path("/app"),
        paths={"@/*": ["./src/*"], "config": ["./config/index"]},
    )

    resolved = resolve_alias(specifier, table)

    assert resolved is not None
    assert to_alias(resolved, table) == specifier


def test_to_alias_respects_segment_boundaries() -> None:
    table = AliasTable(base_dir=Path("/app"), paths={"@/*": ["./src/*"]})

    assert to_alias(Path("/app/src-legacy/jobs"), table) is None
    assert to_alias(Path("/elsewhere/jobs"), table) is None


def test_to_alias_uses_first_containing_pattern(tmp_path: Path) -> None:
    project_root = _copy_fixture(tmp_path)
    table = load_alias_table(project_root)

    assert to_alias(project_root / "src" / "lib" / "maintenance", table) == (
        "~/maintenance"
    )
    assert to_alias(project_root / "src" / "app" / "admin" / "page", table) == (
        "@/app/admin/page"
    )


@pytest.mark.parametrize(
    ("specifier", "expected"),
    [
        ("@/lib/jobs", True),
        ("~/jobs", True),
        ("#/jobs", True),
        ("src/lib/jobs", True),
        ("$jobs/nightly", True),
        ("./jobs", False),
        ("../lib/jobs", False),
        ("workflow/api", False),
        ("@scope/package", False),
    ],
)
def test_is_alias_form(specifier: str, expected: bool) -> None:
    table = AliasTable(base_dir=Path("/app"), paths={"$jobs/*": ["./jobs/*"]})

    assert is_alias_form(specifier, table) is expected
