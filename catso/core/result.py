"""
Result pattern for operations whose failure is an expected outcome.

Used where a miss is part of normal control flow (e.g. reading the cache
record) and raising would force every caller into try/except.

Example:
    result = await store.get_json(key)
    match result:
        case Success(payload):
            ...
        case Failure(error):
            logger.info("miss: %s", error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Represents a successful operation result."""

    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, _default: T) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


@dataclass(frozen=True, slots=True)
class Failure(Generic[E]):
    """Represents a failed operation result."""

    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raises the error when trying to extract value."""
        if isinstance(self.error, Exception):
            raise self.error
        raise RuntimeError(f"Operation failed: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"


Result = Union[Success[T], Failure[E]]


def success(value: T) -> Success[T]:
    return Success(value)


def failure(error: E) -> Failure[E]:
    return Failure(error)


@dataclass(frozen=True, slots=True)
class StorageError:
    """Object storage read/parse error."""

    operation: str
    message: str
    not_found: bool = False
    original_exception: Exception | None = None

    def __str__(self) -> str:
        return f"Storage error during {self.operation}: {self.message}"


__all__ = ["Failure", "Result", "StorageError", "Success", "failure", "success"]
