"""
Optional Result for Cursor Positions
Distinguishes "row present" from "no more rows" without a falsy sentinel
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Present(Generic[T]):
    """
    A row was available and produced a value.

    Attributes:
        value: The hydrated instance (may itself be falsy)
    """

    value: T

    def is_present(self) -> bool:
        """Always returns True for Present."""
        return True

    def is_absent(self) -> bool:
        """Always returns False for Present."""
        return False

    def map(self, func: Callable[[T], Any]) -> Present[Any]:
        """
        Transform the value using the provided function.

        Exceptions raised by func propagate to the caller.

        Args:
            func: Function to transform the value

        Returns:
            New Present with transformed value
        """
        return Present(func(self.value))

    def or_else(self, default: Any) -> T:
        """Return the value (ignores default)."""
        return self.value

    def unwrap(self) -> T:
        """Return the value."""
        return self.value

    def __iter__(self) -> Iterator[T]:
        yield self.value

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Absent:
    """
    The cursor was not on a valid row; nothing was constructed.
    """

    def is_present(self) -> bool:
        """Always returns False for Absent."""
        return False

    def is_absent(self) -> bool:
        """Always returns True for Absent."""
        return True

    def map(self, func: Callable[[Any], Any]) -> Absent:
        """
        Does nothing for Absent.

        Args:
            func: Ignored function

        Returns:
            Self (unchanged)
        """
        return self

    def or_else(self, default: Any) -> Any:
        """Return the default value."""
        return default

    def unwrap(self) -> None:
        """
        Raise because there is no value.

        Raises:
            LookupError: Always
        """
        raise LookupError("Attempted to unwrap an Absent row")

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent()

# Type alias for a maybe-hydrated row
Maybe = Present[T] | Absent
