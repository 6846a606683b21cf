"""Result type for explicit error handling.

Operations that can fail return ``Ok(value)`` or ``Err(error)`` instead of
raising, so the CLI layer decides what becomes console output and what
becomes an exit code.

Usage:
    match parse_version("15.2.5"):
        case Ok(version):
            print(version.major)
        case Err(error):
            print(f"Error: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result carrying ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]
