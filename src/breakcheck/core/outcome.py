"""Explicit success/failure values for fallible pipeline steps.

Steps that are allowed to degrade (manifest parsing, catalog lookups,
content fetches) return an ``Outcome`` instead of raising, and the caller
decides the fallback with ``unwrap_or`` / ``unwrap_or_else``.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful step carrying its value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def unwrap_or_else(self, fallback: Callable[[Any], Any]) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed step carrying the error that caused it."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, fallback: Callable[[E], T]) -> T:
        return fallback(self.error)


Outcome = Union[Ok[T], Err[Exception]]


def capture(
    func: Callable[..., T],
    *args: Any,
    errors: tuple[type[Exception], ...] = (Exception,),
) -> "Outcome[T]":
    """Call ``func`` and wrap its return value or one of ``errors``.

    Args:
        func: Callable to invoke.
        *args: Positional arguments for ``func``.
        errors: Exception types converted into ``Err``; others propagate.

    Returns:
        ``Ok`` with the result or ``Err`` with the raised exception.
    """
    try:
        return Ok(func(*args))
    except errors as e:
        return Err(e)


async def first_ok(
    *attempts: Callable[[], Awaitable["Outcome[T]"]],
) -> "Outcome[T]":
    """Run attempts in order and return the first ``Ok``.

    Later attempts are only started when every earlier one failed.

    Args:
        *attempts: Zero-argument coroutine factories producing outcomes.

    Returns:
        The first ``Ok``, or the last ``Err`` when every attempt failed.
    """
    if not attempts:
        raise ValueError("first_ok() needs at least one attempt")

    outcome: Outcome[T] = Err(RuntimeError("no attempt ran"))
    for attempt in attempts:
        outcome = await attempt()
        if outcome.is_ok:
            return outcome
    return outcome
