from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from cli import main
from contract.artifacts import CONTAINER_DIR_NAME

FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "next_app"


def _copy_fixture(root: Path) -> None:
    shutil.copytree(FIXTURE_ROOT, root)


def test_cli_generate_from_fixture(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)

    exit_code = main(["generate", str(repo_root)])

    assert exit_code == 0
    container = repo_root / "src" / "app" / CONTAINER_DIR_NAME
    assert (container / "manifest.json").is_file()
    assert capsys.readouterr().out.splitlines() == [
        "heartbeat -> __cron__heartbeat",
        "purgeStale -> __cron__purgeStale",
        "sendReport -> __cron__sendReport",
    ]


def test_cli_generate_defaults_to_current_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)
    monkeypatch.chdir(repo_root)

    exit_code = main(["generate"])

    assert exit_code == 0
    assert (repo_root / "src" / "app" / CONTAINER_DIR_NAME / "route.ts").is_file()


def test_cli_generate_reports_collision(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    for name, origin in (("a", "./one"), ("b", "./two")):
        page = repo_root / "app" / name / "page.ts"
        page.parent.mkdir(parents=True)
        page.write_text(
            'import { cronStart } from "workflow-cron-start"\n'
            f'import {{ job }} from "{origin}"\n'
            'cronStart(job, [], { cron: "* * * * *" })\n',
            encoding="utf-8",
        )

    exit_code = main(["generate", str(repo_root)])

    assert exit_code == 1
    assert "__cron__job" in capsys.readouterr().err
    assert not (repo_root / "app" / CONTAINER_DIR_NAME).exists()


def test_cli_invalid_config_exits_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "cronstart.toml").write_text("bogus = 1\n", encoding="utf-8")

    exit_code = main(["generate", str(tmp_path)])

    assert exit_code == 2
    assert "cronstart.toml" in capsys.readouterr().err


def test_cli_transform_prints_rewritten_source(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)
    route = repo_root / "src" / "app" / "api" / "schedule" / "route.ts"
    original = route.read_text(encoding="utf-8")

    exit_code = main(["transform", str(route), "--root", str(repo_root)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "start(__cron__purgeStale" in out
    assert route.read_text(encoding="utf-8") == original


def test_cli_transform_write(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)
    page = repo_root / "src" / "app" / "admin" / "page.tsx"

    exit_code = main(["transform", str(page), "--root", str(repo_root), "--write"])

    assert exit_code == 0
    assert "start(__cron__sendReport" in page.read_text(encoding="utf-8")


def test_cli_transform_without_calls_exits_1(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    repo_root = tmp_path / "repo"
    _copy_fixture(repo_root)
    unrelated = repo_root / "src" / "app" / "unrelated.ts"

    exit_code = main(["transform", str(unrelated), "--root", str(repo_root)])

    assert exit_code == 1
    assert "No rewritable cronStart() calls" in caplog.text


def test_cli_transform_missing_file_exits_1(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    missing = tmp_path / "absent.ts"

    exit_code = main(["transform", str(missing), "--root", str(tmp_path)])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert err.startswith("error: ")
    assert "absent.ts" in err


def test_cli_transform_undecodable_file_exits_1(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = tmp_path / "binary.ts"
    source.write_bytes(b"\xff\xfe\x00cronStart")

    exit_code = main(["transform", str(source), "--root", str(tmp_path)])

    assert exit_code == 1
    assert capsys.readouterr().err.startswith("error: ")
