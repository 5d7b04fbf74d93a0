"""Read-or-create: return a file's content, or generate and persist it first."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from filekit import fs
from filekit.generators import EMPTY, ContentGenerator, produce

if TYPE_CHECKING:
    from collections.abc import Coroutine

    from filekit.fs import PathLike

logger = logging.getLogger("filekit.orchestrator")


@dataclass(frozen=True)
class FileState:
    """Content of a file after ensure_file, and whether it was just created."""

    content: str
    created: bool


async def _ensure(path: PathLike, generator: ContentGenerator, encoding: str) -> FileState:
    if await fs.exists(path):
        content = await fs.read(path, encoding=encoding)
        return FileState(content=content, created=False)

    logger.info("creating %s", path)
    content = await produce(generator)
    await fs.write(path, content, encoding=encoding)
    return FileState(content=content, created=True)


def ensure_file(
    path: PathLike,
    generator: ContentGenerator = EMPTY,
    *,
    encoding: str = fs.DEFAULT_ENCODING,
) -> Coroutine[Any, Any, FileState]:
    """Like read_or_create, but also report whether the file was created."""
    return _ensure(fs.require_path(path, "read_or_create"), generator, encoding)


async def _read_or_create(path: PathLike, generator: ContentGenerator, encoding: str) -> str:
    state = await _ensure(path, generator, encoding)
    return state.content


def read_or_create(
    path: PathLike,
    generator: ContentGenerator = EMPTY,
    *,
    encoding: str = fs.DEFAULT_ENCODING,
) -> Coroutine[Any, Any, str]:
    """Return the content of path, writing generator output there first if absent.

    The generator is only run when the file does not exist. On success the
    file exists and holds exactly the returned text.
    """
    return _read_or_create(fs.require_path(path, "read_or_create"), generator, encoding)
