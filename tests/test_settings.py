from __future__ import annotations

from pathlib import Path

import pytest

from filekit.errors import ConfigError
from filekit.settings import Settings, init_settings, load_settings


def test_defaults_without_settings_file(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)
    assert settings.base_dir == tmp_path.resolve()
    assert settings.encoding == "utf-8"
    assert settings.indent == 2
    assert settings.debounce_ms == 30
    assert settings.debounce_window == pytest.approx(0.03)


def test_settings_file_found_upward(tmp_path: Path) -> None:
    (tmp_path / "filekit.toml").write_text('[filekit]\nbase_dir = "data"\nindent = 4\ndebounce_ms = 50\n')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    settings = load_settings(nested)

    assert settings.base_dir == tmp_path.resolve() / "data"
    assert settings.indent == 4
    assert settings.debounce_window == pytest.approx(0.05)


def test_invalid_toml_is_config_error(tmp_path: Path) -> None:
    (tmp_path / "filekit.toml").write_text("[filekit\nindent = ")
    with pytest.raises(ConfigError):
        load_settings(tmp_path)


def test_invalid_value_is_config_error(tmp_path: Path) -> None:
    (tmp_path / "filekit.toml").write_text('[filekit]\nindent = "wide"\n')
    with pytest.raises(ConfigError, match="invalid"):
        load_settings(tmp_path)


def test_non_table_section_is_config_error(tmp_path: Path) -> None:
    (tmp_path / "filekit.toml").write_text("filekit = 3\n")
    with pytest.raises(ConfigError, match="must be a table"):
        load_settings(tmp_path)


def test_init_settings_round_trips(tmp_path: Path) -> None:
    path = init_settings(tmp_path)
    assert path == tmp_path / "filekit.toml"
    assert load_settings(tmp_path).indent == 2
    with pytest.raises(FileExistsError):
        init_settings(tmp_path)


def test_resolve_relative_and_absolute(tmp_path: Path) -> None:
    settings = Settings(base_dir=tmp_path)
    assert settings.resolve("x/y.json") == tmp_path / "x" / "y.json"
    assert settings.resolve(tmp_path / "abs.json") == tmp_path / "abs.json"
    assert Settings().resolve("rel.json") == Path("rel.json")
