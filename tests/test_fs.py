"""Primitive I/O adapter tests."""

from __future__ import annotations

import asyncio
import stat
from pathlib import Path

import pytest

from filekit import fs
from filekit.errors import FileError, FileMissingError


def test_write_creates_parents_and_reads_back(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "notes.txt"
    returned = asyncio.run(fs.write(target, "hello\r\nworld\n"))
    assert returned == "hello\r\nworld\n"
    assert asyncio.run(fs.read(target)) == "hello\r\nworld\n"


def test_write_overwrites_and_leaves_no_temp_file(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("old content that is longer")
    asyncio.run(fs.write(target, "new"))
    assert target.read_text() == "new"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["notes.txt"]


def test_write_through_symlink_updates_target(tmp_path: Path) -> None:
    real = tmp_path / "real.txt"
    real.write_text("old")
    link = tmp_path / "link.txt"
    link.symlink_to(real)

    asyncio.run(fs.write(link, "new"))

    assert link.is_symlink()
    assert real.read_text() == "new"
    assert asyncio.run(fs.read(link)) == "new"


def test_write_keeps_existing_permissions(tmp_path: Path) -> None:
    target = tmp_path / "secret.json"
    target.write_text("{}")
    target.chmod(0o600)

    asyncio.run(fs.write(target, '{"token": "x"}'))

    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    assert target.read_text() == '{"token": "x"}'


def test_write_default_content_is_empty(tmp_path: Path) -> None:
    target = tmp_path / "empty.txt"
    assert asyncio.run(fs.write(target)) == ""
    assert target.exists()
    assert target.read_text() == ""


def test_write_onto_directory_is_file_error(tmp_path: Path) -> None:
    (tmp_path / "dir").mkdir()
    with pytest.raises(FileError) as info:
        asyncio.run(fs.write(tmp_path / "dir", "x"))
    assert info.value.op == "write"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["dir"]


def test_exists(tmp_path: Path) -> None:
    present = tmp_path / "present.txt"
    present.write_text("x")
    assert asyncio.run(fs.exists(present)) is True
    assert asyncio.run(fs.exists(tmp_path / "absent.txt")) is False
    # a regular file used as a directory component is "absent", not a failure
    assert asyncio.run(fs.exists(present / "child")) is False


def test_read_missing_raises_file_missing(tmp_path: Path) -> None:
    with pytest.raises(FileMissingError) as info:
        asyncio.run(fs.read(tmp_path / "nope.txt"))
    assert isinstance(info.value, FileError)
    assert info.value.op == "read"
    assert info.value.path == tmp_path / "nope.txt"


def test_read_undecodable_is_file_error(tmp_path: Path) -> None:
    target = tmp_path / "binary.bin"
    target.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(FileError):
        asyncio.run(fs.read(target))


def test_append_creates_then_appends(tmp_path: Path) -> None:
    target = tmp_path / "log.txt"
    asyncio.run(fs.append(target, "one\n"))
    asyncio.run(fs.append(target, "two\n"))
    assert target.read_text() == "one\ntwo\n"


def test_append_into_missing_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(FileMissingError):
        asyncio.run(fs.append(tmp_path / "missing" / "log.txt", "x"))


def test_remove_missing_path_succeeds(tmp_path: Path) -> None:
    assert asyncio.run(fs.remove(tmp_path / "never-existed")) is None


def test_remove_file_and_tree(tmp_path: Path) -> None:
    f = tmp_path / "file.txt"
    f.write_text("x")
    tree = tmp_path / "tree"
    (tree / "nested").mkdir(parents=True)
    (tree / "nested" / "leaf.txt").write_text("y")

    asyncio.run(fs.remove(f))
    asyncio.run(fs.remove(tree))

    assert not f.exists()
    assert not tree.exists()


def test_make_dirs_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "x" / "y" / "z"
    assert asyncio.run(fs.make_dirs(target)) == target
    assert asyncio.run(fs.make_dirs(target)) == target
    assert target.is_dir()


def test_make_dirs_over_file_fails(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(FileError) as info:
        asyncio.run(fs.make_dirs(blocker))
    assert info.value.op == "make_dirs"


@pytest.mark.parametrize("op", [fs.exists, fs.read, fs.write, fs.append, fs.remove, fs.make_dirs])
@pytest.mark.parametrize("path", ["", None])
def test_missing_path_fails_at_call_time(op, path) -> None:  # noqa: ANN001
    with pytest.raises(ValueError, match="path is required"):
        op(path)
