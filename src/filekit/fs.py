"""Primitive I/O adapter: single-shot filesystem operations as coroutines.

Every public function validates its path argument at call time (an empty or
missing path raises ValueError immediately, before anything is awaited) and
returns a coroutine that runs the blocking work in a worker thread:

    content = await fs.read("notes.txt")
    await fs.write("out/notes.txt", content)     # parents created as needed
    await fs.remove("out")                       # no error if already gone

OS failures surface as FileError; a missing target as FileMissingError.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import shutil
import stat
from pathlib import Path
from typing import TYPE_CHECKING, Any

from filekit.errors import FileError, FileMissingError

if TYPE_CHECKING:
    from collections.abc import Coroutine, Iterator

logger = logging.getLogger("filekit.fs")

PathLike = str | os.PathLike[str]

DEFAULT_ENCODING = "utf-8"


def require_path(path: PathLike | None, op: str) -> Path:
    """Return path as a Path, or raise ValueError if it is missing or empty."""
    if path is None or os.fspath(path) == "":
        msg = f"{op}: path is required"
        raise ValueError(msg)
    return Path(path)


@contextlib.contextmanager
def _translate(op: str, path: Path) -> Iterator[None]:
    try:
        yield
    except FileNotFoundError as exc:
        logger.debug("%s %s: not found", op, path)
        raise FileMissingError(op, path, exc.strerror or str(exc)) from exc
    except OSError as exc:
        logger.debug("%s %s failed: %s", op, path, exc)
        raise FileError(op, path, exc.strerror or str(exc)) from exc
    except UnicodeError as exc:
        logger.debug("%s %s: undecodable content", op, path)
        raise FileError(op, path, str(exc)) from exc


# ---------------------------------------------------------------------------
# Blocking implementations (run in a worker thread)
# ---------------------------------------------------------------------------

def _exists(path: Path) -> bool:
    try:
        path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        raise FileError("exists", path, exc.strerror or str(exc)) from exc
    return True


def _read(path: Path, encoding: str) -> str:
    with _translate("read", path), path.open("r", encoding=encoding, newline="") as f:
        content = f.read()
    logger.debug("read %s (%d chars)", path, len(content))
    return content


def _write(path: Path, content: str, encoding: str) -> str:
    # Symlinks are written through: the rename lands on the link's target.
    real = path.resolve()
    # Parent creation is best-effort; a real problem resurfaces on open().
    with contextlib.suppress(OSError):
        real.parent.mkdir(parents=True, exist_ok=True)
    tmp = real.with_name(f".{real.name}.tmp")
    with _translate("write", path):
        try:
            with tmp.open("w", encoding=encoding, newline="") as f:
                f.write(content)
            if real.is_file():
                shutil.copymode(real, tmp)
            tmp.replace(real)
        except BaseException:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise
    logger.debug("wrote %s (%d chars)", path, len(content))
    return content


def _append(path: Path, content: str, encoding: str) -> str:
    with _translate("append", path), path.open("a", encoding=encoding, newline="") as f:
        f.write(content)
    logger.debug("appended %s (%d chars)", path, len(content))
    return content


def _remove(path: Path) -> None:
    with _translate("remove", path):
        try:
            st = path.lstat()
        except FileNotFoundError:
            logger.debug("remove %s: already absent", path)
            return
        if stat.S_ISDIR(st.st_mode):
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    logger.debug("removed %s", path)


def _make_dirs(path: Path) -> Path:
    with _translate("make_dirs", path):
        path.mkdir(parents=True, exist_ok=True)
    return path


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def exists(path: PathLike) -> Coroutine[Any, Any, bool]:
    """True if path exists, False if it (or a parent) is absent.

    Any other failure of the underlying stat raises FileError.
    """
    return asyncio.to_thread(_exists, require_path(path, "exists"))


def read(path: PathLike, *, encoding: str = DEFAULT_ENCODING) -> Coroutine[Any, Any, str]:
    """Return the full text content of path."""
    return asyncio.to_thread(_read, require_path(path, "read"), encoding)


def write(path: PathLike, content: str = "", *, encoding: str = DEFAULT_ENCODING) -> Coroutine[Any, Any, str]:
    """Replace the content of path, creating parent directories. Returns content."""
    return asyncio.to_thread(_write, require_path(path, "write"), content or "", encoding)


def append(path: PathLike, content: str = "", *, encoding: str = DEFAULT_ENCODING) -> Coroutine[Any, Any, str]:
    """Append content to path, creating the file if absent. Returns content."""
    return asyncio.to_thread(_append, require_path(path, "append"), content or "", encoding)


def remove(path: PathLike) -> Coroutine[Any, Any, None]:
    """Delete a file or a whole directory tree. Absent targets are not an error."""
    return asyncio.to_thread(_remove, require_path(path, "remove"))


def make_dirs(path: PathLike) -> Coroutine[Any, Any, Path]:
    """Create path and any missing parents. Existing directories are fine."""
    return asyncio.to_thread(_make_dirs, require_path(path, "make_dirs"))
