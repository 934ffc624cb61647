"""
Result type for price lookups.

Every fetch returns either ``Ok(value)`` or ``Err(error)`` instead of raising,
so a batch of lookups can hold successes and failures side by side.

Usage:
    from core.result import Result, Ok, Err

    result = manager.get_item("Operation Breakout Weapon Case")
    if result.is_ok():
        print(f"Lowest: {result.unwrap().lowest_price}")
    else:
        print(f"Error: {result.error}")

    price = result.map(lambda q: q.lowest_price).unwrap_or(None)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Generic,
    NoReturn,
    TypeVar,
    Union,
)

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped success type
F = TypeVar("F")  # Mapped error type


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful lookup carrying its value.

    Example:
        >>> Ok(42).unwrap()
        42
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, func: Callable[[T], U]) -> Ok[U]:
        """Transform the success value.

        Example:
            >>> Ok(5).map(lambda x: x * 2)
            Ok(10)
        """
        return Ok(func(self.value))

    def map_err(self, func: Callable[[Any], F]) -> Ok[T]:
        return self

    @property
    def error(self) -> None:
        """Ok has no error."""
        return None

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed lookup carrying the error (usually a ``MarketError``).

    Example:
        >>> Err("Not found").is_err()
        True
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise the contained exception, or ValueError for non-exception errors."""
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable[[Any], U]) -> "Err[E]":
        return self

    def map_err(self, func: Callable[[E], F]) -> "Err[F]":
        """Transform the error value.

        Example:
            >>> Err("fail").map_err(lambda e: f"Error: {e}")
            Err('Error: fail')
        """
        return Err(func(self.error))

    @property
    def value(self) -> None:
        """Err has no value."""
        return None

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]
