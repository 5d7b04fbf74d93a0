"""Content generators for the create branch of read_or_create.

    Fixed("hello\\n")          # write this literal text
    Compute(make_content)      # call a function (sync or async) for the text
    Empty()                    # write an empty file
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass(frozen=True)
class Fixed:
    text: str


@dataclass(frozen=True)
class Compute:
    fn: Callable[[], str | Awaitable[str]]


@dataclass(frozen=True)
class Empty:
    pass


ContentGenerator = Fixed | Compute | Empty

EMPTY = Empty()


def as_generator(value: Any) -> ContentGenerator:
    """Wrap a loose value: None -> Empty, str -> Fixed, callable -> Compute."""
    if isinstance(value, Fixed | Compute | Empty):
        return value
    if value is None:
        return EMPTY
    if isinstance(value, str):
        return Fixed(value)
    if callable(value):
        return Compute(value)
    msg = f"cannot build a content generator from {type(value).__name__}"
    raise TypeError(msg)


async def produce(generator: ContentGenerator) -> str:
    """Run the generator and return the text it yields."""
    match generator:
        case Fixed(text=text):
            return text
        case Empty():
            return ""
        case Compute(fn=fn):
            result = fn()
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, str):
                msg = f"content generator returned {type(result).__name__}, expected str"
                raise TypeError(msg)
            return result
    msg = f"unknown content generator: {generator!r}"
    raise TypeError(msg)
