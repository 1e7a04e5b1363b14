"""Result type for explicit error handling.

Every stage of the extraction pipeline can fail on a single release (bad
base64, truncated gzip stream, malformed JSON, unwritable directory). Stages
return ``Result`` values instead of raising, so the caller decides whether a
failure stops the run or is reported and skipped.

Usage:
    match decode(secret.payload).flat_map(parse):
        case Ok(release):
            print(release.name)
        case Err(error):
            print(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def unwrap(self) -> T:
        return self.value

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain a fallible step onto this value.

        Args:
            f: Function that takes the value and returns a Result.

        Returns:
            The Result returned by f.
        """
        return f(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def unwrap(self) -> None:
        """Raise with the contained error.

        Raises:
            ValueError: Always.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Err[E]:
        """Short-circuit: later steps never run once a step has failed."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
