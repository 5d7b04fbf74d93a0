"""Resolve a JSON config file: load it if present, otherwise build and persist one.

Flow for a single resolve() call:

    CHECK_EXISTING --exists--> PARSE --ok--> RESOLVED
         |                       \\--bad JSON--> ConfigParseError
         \\--absent--> CREATE_NEW --questions--> INTERACTIVE --> MERGE --> PERSIST --> RESOLVED
                                  \\--no questions-------------/

Defaults can be a dict, a JSON string, or a (sync or async) callable returning
either. Answers override defaults; per-question defaults sit underneath both.

Example:

    cfg = await resolve_config(
        "~/.notes.json",
        defaults={"path": "/default.txt"},
        questions=[{"prop": "editor", "question": "Editor?"}],
    )
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from filekit.errors import ConfigParseError, DefaultsError, WorkflowError
from filekit.fs import require_path
from filekit.generators import Compute
from filekit.orchestrator import ensure_file
from filekit.prompt import ConsolePrompter, Question, ask_all
from filekit.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Coroutine

    from filekit.fs import PathLike
    from filekit.prompt import Prompter

logger = logging.getLogger("filekit.config")

DefaultsProvider = Mapping[str, Any] | str | Callable[[], Any] | None


def _as_mapping(value: Any, source: str) -> dict[str, Any]:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            msg = f"{source} is not valid JSON: {exc}"
            raise DefaultsError(msg) from exc
    if not isinstance(value, Mapping):
        msg = f"{source} must be a JSON object, got {type(value).__name__}"
        raise DefaultsError(msg)
    return dict(value)


async def load_defaults(provider: DefaultsProvider) -> dict[str, Any]:
    """Turn a defaults provider into a plain dict."""
    if provider is None:
        return {}
    if callable(provider):
        value = provider()
        if inspect.isawaitable(value):
            value = await value
        return _as_mapping(value, "defaults provider result")
    return _as_mapping(provider, "defaults")


def _snapshot_questions(questions: Iterable[Any] | None) -> tuple[Question, ...]:
    if questions is None:
        return ()
    if isinstance(questions, str | bytes | Mapping):
        msg = "questions must be a sequence of questions"
        raise WorkflowError(msg)
    return tuple(Question.coerce(q) for q in questions)


class ConfigResolver:
    """Runs the config workflow with explicit settings and an input session.

    prompter defaults to a ConsolePrompter on stdin/stdout. It is closed at
    the end of every interactive session.
    """

    def __init__(self, settings: Settings | None = None, prompter: Prompter | None = None) -> None:
        self.settings = settings or Settings()
        self._prompter = prompter

    def _open_session(self) -> Prompter:
        return self._prompter if self._prompter is not None else ConsolePrompter()

    def resolve(
        self,
        path: PathLike,
        defaults: DefaultsProvider = None,
        questions: Iterable[Any] | None = None,
    ) -> Coroutine[Any, Any, dict[str, Any]]:
        """Return the config stored at path, creating it if the file is absent.

        A missing path or a malformed question list is rejected here, before
        the returned coroutine is awaited.
        """
        target = self.settings.resolve(require_path(path, "resolve_config").expanduser())
        return self._resolve(target, defaults, _snapshot_questions(questions))

    async def _resolve(
        self,
        target: Path,
        defaults: DefaultsProvider,
        asked: tuple[Question, ...],
    ) -> dict[str, Any]:
        created: dict[str, Any] = {}

        async def create_new() -> str:
            answers: dict[str, str] = {}
            if asked:
                answers = await self._interactive(asked)
            merged = await self._merge(defaults, asked, answers)
            created.update(merged)
            try:
                return json.dumps(merged, indent=self.settings.indent, ensure_ascii=False)
            except (TypeError, ValueError) as exc:
                msg = f"defaults are not JSON serializable: {exc}"
                raise DefaultsError(msg) from exc

        state = await ensure_file(target, Compute(create_new), encoding=self.settings.encoding)
        if state.created:
            logger.info("created config %s (%d keys)", target, len(created))
            return created
        return self._parse(target, state.content)

    async def _interactive(self, questions: tuple[Question, ...]) -> dict[str, str]:
        prompter = self._open_session()
        try:
            return await ask_all(prompter, questions)
        finally:
            prompter.close()

    async def _merge(
        self,
        defaults: DefaultsProvider,
        questions: tuple[Question, ...],
        answers: dict[str, str],
    ) -> dict[str, Any]:
        question_defaults = {q.prop: q.default for q in questions if q.default is not None}
        base = await load_defaults(defaults)
        return {**question_defaults, **base, **answers}

    def _parse(self, path: Path, content: str) -> dict[str, Any]:
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.warning("config %s contains invalid JSON: %s", path, exc)
            raise ConfigParseError(path, f"invalid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            logger.warning("config %s is not a JSON object", path)
            raise ConfigParseError(path, f"expected a JSON object, got {type(parsed).__name__}")
        return parsed


def resolve_config(
    path: PathLike,
    defaults: DefaultsProvider = None,
    questions: Iterable[Any] | None = None,
    *,
    prompter: Prompter | None = None,
    settings: Settings | None = None,
) -> Coroutine[Any, Any, dict[str, Any]]:
    """Load the JSON config at path, or ask questions, merge defaults and write it."""
    return ConfigResolver(settings, prompter).resolve(path, defaults, questions)
