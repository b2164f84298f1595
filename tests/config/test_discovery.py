"""Tests for locating and reading frontiermetrix.toml."""

from pathlib import Path

import pytest

from frontiermetrix.config.discovery import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    ConfigError,
    find_config,
    read_config,
)


class TestFindConfig:
    def test_in_start_directory(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("")
        assert find_config(tmp_path) == config

    def test_nearest_ancestor_wins(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "project"
        (nested / "src" / "deep").mkdir(parents=True)
        (nested / CONFIG_FILENAME).write_text("")
        assert find_config(nested / "src" / "deep") == nested / CONFIG_FILENAME

    def test_none_without_config(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        assert find_config(empty) is None

    def test_env_var_names_the_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "elsewhere.toml"
        config.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        assert find_config(tmp_path / "unrelated") == config

    def test_env_var_to_missing_file_disables_search(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "gone.toml"))
        assert find_config(tmp_path) is None


class TestReadConfig:
    def test_sections(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("[arcs]\nmax_segments = 32\n[timeline]\nstep_minutes = 15\n")
        table = read_config(config)
        assert table["arcs"] == {"max_segments": 32}
        assert table["timeline"] == {"step_minutes": 15}

    def test_relative_data_dir_anchored_to_file(self, tmp_path: Path) -> None:
        config = tmp_path / "proj" / CONFIG_FILENAME
        config.parent.mkdir()
        config.write_text('[data]\ndata_dir = "seeds"\nsignals_file = "assets.json"\n')
        table = read_config(config)
        assert table["data"]["data_dir"] == str(config.parent.resolve() / "seeds")
        assert table["data"]["signals_file"] == "assets.json"

    def test_relative_plugin_dir_anchored_to_file(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text('[plugins]\nlocal_dir = "hooks"\n')
        assert read_config(config)["plugins"]["local_dir"] == str(tmp_path.resolve() / "hooks")

    def test_absolute_directory_untouched(self, tmp_path: Path) -> None:
        target = tmp_path / "shared" / "data"
        config = tmp_path / CONFIG_FILENAME
        config.write_text(f'[data]\ndata_dir = "{target.as_posix()}"\n')
        assert read_config(config)["data"]["data_dir"] == target.as_posix()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("[data\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            read_config(config)
