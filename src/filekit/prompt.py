"""Line-oriented question/answer sessions used when creating a new config.

A Prompter prints one prompt and reads one line per call to ask(). ask()
returns None once the input stream has ended.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import IO, Any, Protocol

import click

from filekit.errors import WorkflowError


@dataclass(frozen=True)
class Question:
    """One config property to ask for."""

    prop: str
    text: str
    default: Any = None    # stored as-is when the answer is empty

    @property
    def prompt(self) -> str:
        if self.default not in (None, ""):
            return f"{self.text} [{self.default}]"
        return self.text

    @classmethod
    def coerce(cls, obj: Any) -> Question:
        """Accept a Question, a {prop, question[, def]} mapping or a (prop, text) pair."""
        if isinstance(obj, Question):
            return obj
        if isinstance(obj, Mapping):
            prop = obj.get("prop")
            text = obj.get("question", obj.get("text"))
            default = obj.get("default", obj.get("def"))
        elif isinstance(obj, Sequence) and not isinstance(obj, str) and len(obj) == 2:
            prop, text = obj
            default = None
        else:
            msg = f"malformed question: {obj!r}"
            raise WorkflowError(msg)
        if not isinstance(prop, str) or not prop:
            msg = f"question has no property key: {obj!r}"
            raise WorkflowError(msg)
        if not isinstance(text, str):
            msg = f"question {prop!r} has no prompt text"
            raise WorkflowError(msg)
        return cls(prop=prop, text=text, default=default)


class Prompter(Protocol):
    async def ask(self, text: str) -> str | None: ...

    def close(self) -> None: ...


class ConsolePrompter:
    """Prompt on a text stream (stdout by default) and read lines from stdin."""

    def __init__(self, input: IO[str] | None = None, output: IO[str] | None = None) -> None:  # noqa: A002
        self._input = input if input is not None else sys.stdin
        self._output = output

    async def ask(self, text: str) -> str | None:
        click.echo(text, file=self._output)
        line = await asyncio.to_thread(self._input.readline)
        if not line:
            return None
        return line.rstrip("\r\n")

    def close(self) -> None:
        if self._output is not None:
            self._output.flush()


class ScriptedPrompter:
    """Replay a fixed list of answers; records the prompts it was shown."""

    def __init__(self, answers: Sequence[str]) -> None:
        self._answers = list(answers)
        self.prompts: list[str] = []
        self.closed = False

    async def ask(self, text: str) -> str | None:
        self.prompts.append(text)
        if not self._answers:
            return None
        return self._answers.pop(0)

    def close(self) -> None:
        self.closed = True


async def ask_all(prompter: Prompter, questions: Sequence[Question]) -> dict[str, str]:
    """Ask every question in order; keep only non-empty (stripped) answers.

    Raises WorkflowError if the input ends before all questions are answered.
    """
    answers: dict[str, str] = {}
    for question in questions:
        reply = await prompter.ask(question.prompt)
        if reply is None:
            msg = f"input ended before question {question.prop!r} was answered"
            raise WorkflowError(msg)
        reply = reply.strip()
        if reply:
            answers[question.prop] = reply
    return answers
