"""Tests for boxplan.toml walk-up discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from boxplan.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME, find_config, load_config


class TestFindConfig:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert find_config(tmp_path) == tmp_path / CONFIG_FILENAME

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "plans" / "2023"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        explicit = tmp_path / "elsewhere.toml"
        explicit.write_text("")
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(explicit))
        assert find_config(tmp_path) == explicit

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path / "empty")
        assert config.board.layout == "layout.toml"
        assert config.schedule.transfer_id == "Transfer"

    def test_sparse_override(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text('[schedule]\nyears = ["2030-31"]\n')
        config = load_config(path)
        assert config.schedule.years == ["2030-31"]
        assert config.schedule.quarters == ["Fall", "Winter", "Spring"]
        assert "Fall 2030-31" in config.schedule.slot_ids()
