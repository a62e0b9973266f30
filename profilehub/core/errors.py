"""Error kinds shared by the store boundary and the handlers."""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    CONSTRAINT = "constraint_violation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a store mutation: a value, or the kind of failure."""

    value: T | None = None
    error: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind) -> "Result[T]":
        return cls(error=error)


class StoreError(Exception):
    """Unexpected persistence failure (I/O, broken connection, ...)."""


class LoginRequired(Exception):
    """Raised by the auth gate when a protected route is hit anonymously."""
