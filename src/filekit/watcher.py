"""Debounced change watcher for a file or directory.

    handle = watch("notes.txt", on_change)     # inside a running event loop
    ...
    handle.close()

Change notifications come from inotify (inotify_simple) on Linux and fall
back to stat polling elsewhere (macOS, Docker without inotify). A reader
thread waits for events and hands them to the event loop, where a Debouncer
coalesces each burst into a single on_change(path) call fired `window`
seconds after the first event of the burst.

Files are watched through their parent directory so that atomic
replace-by-rename writes (like fs.write) keep being seen.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from filekit.errors import FileMissingError
from filekit.fs import require_path

if TYPE_CHECKING:
    from collections.abc import Callable

    from filekit.fs import PathLike

logger = logging.getLogger("filekit.watcher")

DEFAULT_WINDOW = 0.03          # seconds of quiet before on_change fires
DEFAULT_POLL_INTERVAL = 0.25   # seconds between stat snapshots (polling backend)
_INOTIFY_TIMEOUT_MS = 200      # bounds how long the reader thread takes to notice close()


# ---------------------------------------------------------------------------
# Debounce
# ---------------------------------------------------------------------------

class Debouncer:
    """Collapse a burst of trigger() calls into one callback invocation.

    The first trigger schedules the callback after `window` seconds. Triggers
    arriving while that call is still pending are dropped; once it has fired
    the next trigger starts a new window. Must be used from the loop thread.
    """

    def __init__(
        self,
        callback: Callable[[], Any],
        window: float = DEFAULT_WINDOW,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._callback = callback
        self._window = window
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Future[Any]] = set()
        self.fired = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> bool:
        """Schedule the callback unless one is already pending. True if scheduled."""
        if self._handle is not None:
            return False
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self._window, self._fire)
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.fired += 1
        try:
            result = self._callback()
        except Exception:
            logger.exception("change callback failed")
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Future[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("change callback failed", exc_info=task.exception())


# ---------------------------------------------------------------------------
# Event sources (run on the reader thread)
# ---------------------------------------------------------------------------

class _InotifySource:
    """inotify on the directory (or on the file's parent, filtered by name)."""

    def __init__(self, path: Path) -> None:
        import inotify_simple  # type: ignore[import]  # raises ImportError on macOS/Docker

        flags = inotify_simple.flags  # type: ignore[attr-defined]
        mask = (
            flags.MODIFY | flags.CLOSE_WRITE | flags.ATTRIB | flags.CREATE
            | flags.DELETE | flags.MOVED_FROM | flags.MOVED_TO
        )
        if path.is_dir():
            target, self._name = path, None
            mask |= flags.DELETE_SELF | flags.MOVE_SELF
        else:
            target, self._name = path.parent, path.name
        self._inotify = inotify_simple.INotify()
        try:
            self._inotify.add_watch(str(target), mask)
        except OSError:
            self._inotify.close()
            raise

    def wait(self, stop: threading.Event) -> bool:  # noqa: ARG002
        events = self._inotify.read(timeout=_INOTIFY_TIMEOUT_MS)
        if self._name is None:
            return bool(events)
        return any(event.name == self._name for event in events)

    def close(self) -> None:
        self._inotify.close()


class _PollSource:
    """Compare stat snapshots every `interval` seconds."""

    def __init__(self, path: Path, interval: float) -> None:
        self._path = path
        self._interval = interval
        self._last = self._snapshot()

    def _snapshot(self) -> tuple[Any, ...] | None:
        try:
            st = self._path.stat()
        except OSError:
            return None
        snap: tuple[Any, ...] = (st.st_ino, st.st_mtime_ns, st.st_size)
        if self._path.is_dir():
            try:
                with os.scandir(self._path) as it:
                    entries = sorted(
                        (e.name, e.stat(follow_symlinks=False).st_mtime_ns) for e in it
                    )
            except OSError:
                entries = []
            snap = (*snap, tuple(entries))
        return snap

    def wait(self, stop: threading.Event) -> bool:
        if stop.wait(self._interval):
            return False
        snap = self._snapshot()
        changed = snap != self._last
        self._last = snap
        return changed

    def close(self) -> None:
        pass


def _open_source(path: Path, backend: str, poll_interval: float) -> _InotifySource | _PollSource:
    if backend not in ("auto", "inotify", "poll"):
        msg = f"unknown watch backend: {backend!r}"
        raise ValueError(msg)
    if backend == "poll":
        return _PollSource(path, poll_interval)
    try:
        return _InotifySource(path)
    except (ImportError, OSError):
        if backend == "inotify":
            raise
        logger.warning("inotify unavailable for %s, falling back to polling", path)
        return _PollSource(path, poll_interval)


# ---------------------------------------------------------------------------
# Watch handle
# ---------------------------------------------------------------------------

class Watch:
    """A live subscription. close() stops notifications and releases the source."""

    def __init__(
        self,
        path: Path,
        on_change: Callable[[Path], Any],
        *,
        window: float,
        poll_interval: float,
        backend: str,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self.path = path
        self._loop = loop
        self._debouncer = Debouncer(lambda: on_change(path), window, loop)
        self._source = _open_source(path, backend, poll_interval)
        self.backend = "poll" if isinstance(self._source, _PollSource) else "inotify"
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=f"filekit-watch:{path}", daemon=True)
        self._thread.start()
        logger.info("watching %s (%s)", path, self.backend)

    @property
    def closed(self) -> bool:
        return self._stop.is_set()

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    def _run(self) -> None:
        try:
            while not self._stop.is_set():
                if not self._source.wait(self._stop) or self._stop.is_set():
                    continue
                try:
                    self._loop.call_soon_threadsafe(self._notify)
                except RuntimeError:
                    # event loop closed underneath us
                    break
        except Exception:
            logger.exception("watch on %s stopped", self.path)
        finally:
            self._source.close()

    def _notify(self) -> None:
        if not self._stop.is_set():
            self._debouncer.trigger()

    def close(self) -> None:
        """Unsubscribe. Safe to call more than once."""
        if self._stop.is_set():
            return
        self._stop.set()
        self._debouncer.cancel()
        logger.info("stopped watching %s", self.path)

    async def __aenter__(self) -> Watch:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.close()


def watch(
    path: PathLike,
    on_change: Callable[[Path], Any],
    *,
    window: float = DEFAULT_WINDOW,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    backend: str = "auto",
) -> Watch:
    """Call on_change(path) once per burst of changes to path.

    Must be called from a running event loop. on_change may be a coroutine
    function. backend is "auto", "inotify" or "poll".
    """
    target = require_path(path, "watch")
    if not callable(on_change):
        msg = "watch: on_change must be callable"
        raise TypeError(msg)
    if not target.exists():
        raise FileMissingError("watch", target, "no such file or directory")
    loop = asyncio.get_running_loop()
    return Watch(
        target,
        on_change,
        window=window,
        poll_interval=poll_interval,
        backend=backend,
        loop=loop,
    )
