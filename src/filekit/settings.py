"""Settings: explicit values passed to the config workflow and watcher.

Optional project file (searched upward from the start directory):

    filekit.toml

    [filekit]
    # base_dir = "."          # relative paths resolve against this
    # encoding = "utf-8"
    # indent = 2              # JSON indent for created config files
    # debounce_ms = 30        # watcher quiet window
    # poll_interval = 0.25    # seconds, polling watcher fallback
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from filekit.errors import ConfigError

_SETTINGS_FILENAME = "filekit.toml"
_DEFAULT_ENCODING = "utf-8"
_DEFAULT_INDENT = 2
_DEFAULT_DEBOUNCE_MS = 30
_DEFAULT_POLL_INTERVAL = 0.25


@dataclass
class Settings:
    """Resolved filekit settings."""

    base_dir: Path | None = None     # None = process working directory
    encoding: str = _DEFAULT_ENCODING
    indent: int = _DEFAULT_INDENT
    debounce_ms: int = _DEFAULT_DEBOUNCE_MS
    poll_interval: float = _DEFAULT_POLL_INTERVAL

    @property
    def debounce_window(self) -> float:
        """Debounce window in seconds."""
        return self.debounce_ms / 1000.0

    def resolve(self, path: str | Path) -> Path:
        """Resolve a relative path against base_dir (absolute paths pass through)."""
        p = Path(path)
        if self.base_dir is None or p.is_absolute():
            return p
        return self.base_dir / p


def _find_root(start: Path) -> Path | None:
    """Walk upward from start looking for filekit.toml."""
    for directory in (start, *start.parents):
        if (directory / _SETTINGS_FILENAME).is_file():
            return directory
    return None


def load_settings(root: Path | str | None = None) -> Settings:
    """Load filekit.toml from root (or search upward from cwd if root is None).

    No settings file means defaults with base_dir left unset.
    """
    start = Path(root).resolve() if root else Path.cwd()
    found = _find_root(start)
    if found is None:
        return Settings(base_dir=Path(root).resolve() if root else None)

    config_path = found / _SETTINGS_FILENAME
    try:
        with config_path.open("rb") as f:
            raw: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"{config_path}: {exc}"
        raise ConfigError(msg) from exc

    section = raw.get("filekit", {})
    if not isinstance(section, dict):
        msg = f"{config_path}: [filekit] must be a table, got {type(section).__name__}"
        raise ConfigError(msg)
    try:
        return Settings(
            base_dir=found / section.get("base_dir", "."),
            encoding=str(section.get("encoding", _DEFAULT_ENCODING)),
            indent=int(section.get("indent", _DEFAULT_INDENT)),
            debounce_ms=int(section.get("debounce_ms", _DEFAULT_DEBOUNCE_MS)),
            poll_interval=float(section.get("poll_interval", _DEFAULT_POLL_INTERVAL)),
        )
    except (TypeError, ValueError) as exc:
        msg = f"{config_path}: invalid [filekit] value: {exc}"
        raise ConfigError(msg) from exc


def init_settings(root: Path) -> Path:
    """Write a default filekit.toml at root. Raises if already exists."""
    config_path = root / _SETTINGS_FILENAME
    if config_path.exists():
        msg = f"filekit.toml already exists at {config_path}"
        raise FileExistsError(msg)

    content = f"""\
[filekit]
# base_dir = "."            # relative paths resolve against this directory
encoding = "{_DEFAULT_ENCODING}"
indent = {_DEFAULT_INDENT}
debounce_ms = {_DEFAULT_DEBOUNCE_MS}
poll_interval = {_DEFAULT_POLL_INTERVAL}
"""
    config_path.write_text(content)
    return config_path
