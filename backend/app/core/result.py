"""Minimal success/failure container used between pipeline steps."""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful step outcome."""

    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed step outcome carrying a typed error."""

    error: E


Result = Union[Ok[T], Err[E]]
