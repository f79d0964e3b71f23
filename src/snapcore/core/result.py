"""Typed Result container returned by snapshot comparators.

A comparator answers "does the current value match the baseline?" without
raising: it returns ``Ok(None)`` on a match or ``Err(message)`` carrying a
human-readable explanation. Raising is left to the raiser hook, which decides
what a failed comparison means for the test run.

Example
-------
>>> from snapcore.core.result import ok, err, Result
>>> def same_length(a: str, b: str) -> Result[None, str]:
...     return ok(None) if len(a) == len(b) else err(f"{len(a)} != {len(b)}")
>>> same_length("ab", "cd").is_ok()
True
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, cast

T = TypeVar("T")
E = TypeVar("E")


class Result(Generic[T, E]):
    """Sum type representing either success (`Ok[T]`) or failure (`Err[E]`)."""

    def is_ok(self) -> bool:
        """Return ``True`` if this is an :class:`Ok` value."""
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` if this is an :class:`Err` value."""
        return isinstance(self, Err)

    def unwrap(self) -> T:
        """Return the success value or raise ``RuntimeError`` on ``Err``."""
        if isinstance(self, Ok):
            return cast(Ok[T, E], self).value
        raise RuntimeError(f"Attempted to unwrap Err: {self!r}")

    def unwrap_err(self) -> E:
        """Return the error value if ``Err``, else raise."""
        if isinstance(self, Err):
            return cast(Err[T, E], self).error
        raise RuntimeError(f"Attempted to unwrap_err on Ok: {self!r}")

    def __repr__(self) -> str:  # pragma: no cover - trivial representation
        if isinstance(self, Ok):
            return f"Ok({cast(Ok[T, E], self).value!r})"
        if isinstance(self, Err):
            return f"Err({cast(Err[T, E], self).error!r})"
        return "Result(?)"


@dataclass(frozen=True, repr=False)
class Ok(Result[T, E]):
    """Successful comparison, optionally carrying a value."""

    value: T


@dataclass(frozen=True, repr=False)
class Err(Result[T, E]):
    """Failed comparison carrying a diagnostic payload."""

    error: E


def ok(value: T) -> Result[T, E]:
    """Construct :class:`Ok` with better type inference at call sites."""
    return Ok(value)


def err(error: E) -> Result[T, E]:
    """Construct :class:`Err` with better type inference at call sites."""
    return Err(error)


__all__ = ["Err", "Ok", "Result", "err", "ok"]
