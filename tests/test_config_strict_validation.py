from __future__ import annotations

from pathlib import Path

import pytest

from settings.config import DEFAULT_SCAN_DIRS, ConfigError, CronStartConfig, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "cronstart.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == CronStartConfig()
    assert config.call_name == "cronStart"
    assert config.call_module == "workflow-cron-start"
    assert config.start_name == "start"
    assert config.start_module == "workflow/api"
    assert config.sleep_name == "cronSleep"
    assert config.sleep_module == "workflow-cron-sleep"
    assert config.scan_dirs == DEFAULT_SCAN_DIRS
    assert config.nested_gitignore is False


def test_empty_config_accepted(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    config = load_config(tmp_path)

    assert config.exclude == []


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
call_module = "@acme/cron"
scan_dirs = ["src/app"]
exclude = ["**/*.test.ts"]
nested_gitignore = true
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.call_module == "@acme/cron"
    assert config.scan_dirs == ["src/app"]
    assert config.exclude == ["**/*.test.ts"]
    assert config.nested_gitignore is True


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "call_name = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "toml_content",
    [
        'call_name = "cron-start"',
        'start_name = "2start"',
        'sleep_module = ""',
        "sleep_module = 'bad\"quote'",
        "scan_dirs = \"src/app\"",
    ],
)
def test_invalid_values_rejected(tmp_path: Path, toml_content: str) -> None:
    _write_config(tmp_path, toml_content)

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(tmp_path)
