"""Explicit success/failure values for fallible resolution steps.

Collaborators at the subprocess and HTTP boundary convert exceptions into
``Err`` values so that a failure for one library never unwinds a batch.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(Enum):
    """Failure categories reported by resolution and rewrite steps."""
    IO = "io"
    NO_SEMVER_TAGS = "no-semver-tags"
    NOT_FOUND = "not-found"
    PRE_RELEASE = "pre-release"
    NOT_GITHUB_LIB = "not-github-lib"
    PARSE = "parse"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome tagged with a kind and diagnostic context."""
    kind: ErrorKind
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        """Render ``kind`` plus context as a single diagnostic line."""
        details = ", ".join(f"{k}={v}" for k, v in sorted(self.context.items()))
        return f"{self.kind.value} ({details})" if details else self.kind.value


Result = Union[Ok[T], Err]


def bind(result: "Result[T]", fn: Callable[[T], "Result[U]"]) -> "Result[U]":
    """Feed the value of an ``Ok`` into ``fn``; pass an ``Err`` through."""
    if isinstance(result, Ok):
        return fn(result.value)
    return result


def first_success(
    steps: Iterable[Callable[[], Optional["Result[T]"]]],
    default: Err,
) -> "Result[T]":
    """Evaluate ``steps`` in order and return the first decisive result.

    A step returns ``None`` to defer to the next step, or a ``Result`` to
    settle the chain (an ``Err`` from a step that had an answer, such as a
    source listing tags none of which are versions, is decisive too).
    Returns ``default`` when every step defers.
    """
    for step in steps:
        outcome = step()
        if outcome is not None:
            return outcome
    return default
