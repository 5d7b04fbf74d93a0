"""CLI smoke tests via click's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from filekit.cli import cli


def _invoke(tmp_path: Path, *args: str, input: str | None = None):  # noqa: A002, ANN202
    return CliRunner().invoke(cli, ["--config-dir", str(tmp_path), *args], input=input)


def test_write_read_append_roundtrip(tmp_path: Path) -> None:
    assert _invoke(tmp_path, "write", "notes/a.txt", "hello ").exit_code == 0
    assert _invoke(tmp_path, "append", "notes/a.txt", "world").exit_code == 0

    result = _invoke(tmp_path, "read", "notes/a.txt")

    assert result.exit_code == 0
    assert result.output == "hello world"
    assert (tmp_path / "notes" / "a.txt").read_text() == "hello world"


def test_write_from_stdin(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "write", "in.txt", "-", input="piped\n")
    assert result.exit_code == 0
    assert (tmp_path / "in.txt").read_text() == "piped\n"


def test_exists_exit_status(tmp_path: Path) -> None:
    (tmp_path / "here.txt").write_text("x")
    present = _invoke(tmp_path, "exists", "here.txt")
    absent = _invoke(tmp_path, "exists", "gone.txt")
    assert (present.exit_code, present.output.strip()) == (0, "yes")
    assert (absent.exit_code, absent.output.strip()) == (1, "no")


def test_read_missing_file_is_an_error(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "read", "missing.txt")
    assert result.exit_code == 1
    assert "missing.txt" in result.output


def test_mkdir_and_rm(tmp_path: Path) -> None:
    assert _invoke(tmp_path, "mkdir", "x/y").exit_code == 0
    assert (tmp_path / "x" / "y").is_dir()
    assert _invoke(tmp_path, "rm", "x").exit_code == 0
    assert not (tmp_path / "x").exists()
    assert _invoke(tmp_path, "rm", "x").exit_code == 0


def test_read_or_create(tmp_path: Path) -> None:
    first = _invoke(tmp_path, "read-or-create", "f.txt", "--text", "seed")
    second = _invoke(tmp_path, "read-or-create", "f.txt", "--text", "other")
    assert first.output == "seed"
    assert second.output == "seed"


def test_config_with_scripted_answers(tmp_path: Path) -> None:
    result = _invoke(
        tmp_path,
        "config", "cfg.json",
        "--defaults", '{"path": "/default.txt"}',
        "-q", "editor=Editor?",
        "-q", "path=Path?",
        "--answer", "vim",
        "--answer", "",
    )

    assert result.exit_code == 0, result.output
    expected = {"path": "/default.txt", "editor": "vim"}
    assert json.loads(result.output) == expected
    assert json.loads((tmp_path / "cfg.json").read_text()) == expected


def test_config_interactive_from_stdin(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "config", "cfg.json", "-q", "editor=Editor?", input="nano\n")

    assert result.exit_code == 0, result.output
    assert "Editor?" in result.output
    assert json.loads((tmp_path / "cfg.json").read_text()) == {"editor": "nano"}


def test_config_defaults_from_file(tmp_path: Path) -> None:
    (tmp_path / "defaults.json").write_text('{"theme": "dark"}')
    result = _invoke(tmp_path, "config", "cfg.json", "--defaults", f"@{tmp_path / 'defaults.json'}")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"theme": "dark"}


def test_config_broken_file_reports_error(tmp_path: Path) -> None:
    (tmp_path / "cfg.json").write_text("{oops")
    result = _invoke(tmp_path, "config", "cfg.json")
    assert result.exit_code == 1
    assert "invalid JSON" in result.output
    assert (tmp_path / "cfg.json").read_text() == "{oops"


def test_config_bad_question_option(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "config", "cfg.json", "-q", "no-equals-sign")
    assert result.exit_code == 2


def test_init_writes_settings(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["init", "--dir", str(tmp_path)])
    assert result.exit_code == 0
    assert (tmp_path / "filekit.toml").exists()
