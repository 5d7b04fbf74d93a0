"""Exception hierarchy shared by the I/O adapter, orchestrator and config workflow."""

from __future__ import annotations

from pathlib import Path


class FilekitError(Exception):
    """Base for every error raised by filekit."""


class FileError(FilekitError):
    """A filesystem operation failed (permission, disk, platform fault)."""

    def __init__(self, op: str, path: Path | str, message: str) -> None:
        self.op = op
        self.path = Path(path)
        super().__init__(f"{op} {self.path}: {message}")


class FileMissingError(FileError):
    """The target path does not exist."""


class ConfigError(FilekitError):
    """Config resolution failed for a reason other than file I/O."""


class ConfigParseError(ConfigError):
    """A pre-existing config file does not hold a JSON object."""

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


class DefaultsError(ConfigError):
    """The defaults provider returned something that is not a JSON object."""


class WorkflowError(ConfigError):
    """The interactive question/answer session could not complete."""
