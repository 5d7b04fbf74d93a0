"""Small asyncio filesystem helpers and an interactive JSON config loader.

Modules:
    fs            exists / read / write / append / remove / make_dirs (coroutines)
    orchestrator  read_or_create: return content, or generate + persist it first
    config        resolve_config: load a JSON config or build it from defaults + prompts
    watcher       watch: debounced change notifications for a path
    prompt        Question and the console / scripted prompt sessions
    settings      filekit.toml settings

    import asyncio
    from filekit import resolve_config

    cfg = asyncio.run(resolve_config(
        "notes.json",
        defaults={"path": "/default.txt"},
        questions=[{"prop": "editor", "question": "Editor?"}],
    ))
"""

from filekit.config import ConfigResolver, resolve_config
from filekit.errors import (
    ConfigError,
    ConfigParseError,
    DefaultsError,
    FileError,
    FileMissingError,
    FilekitError,
    WorkflowError,
)
from filekit.fs import append, exists, make_dirs, read, remove, write
from filekit.generators import Compute, Empty, Fixed
from filekit.orchestrator import FileState, ensure_file, read_or_create
from filekit.prompt import ConsolePrompter, Question, ScriptedPrompter
from filekit.settings import Settings, load_settings
from filekit.watcher import Debouncer, Watch, watch

__all__ = [
    "Compute",
    "ConfigError",
    "ConfigParseError",
    "ConfigResolver",
    "ConsolePrompter",
    "Debouncer",
    "DefaultsError",
    "Empty",
    "FileError",
    "FileMissingError",
    "FileState",
    "FilekitError",
    "Fixed",
    "Question",
    "ScriptedPrompter",
    "Settings",
    "Watch",
    "WorkflowError",
    "append",
    "ensure_file",
    "exists",
    "load_settings",
    "make_dirs",
    "read",
    "read_or_create",
    "remove",
    "resolve_config",
    "watch",
    "write",
]
