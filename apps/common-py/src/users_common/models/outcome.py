"""Typed results returned by the user resource handlers."""

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """The externally observable failure classes."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass(frozen=True)
class UserError:
    """A classified handler failure with a caller-safe message."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Outcome[T]:
    """Either a value or a ``UserError``, never both."""

    value: T | None = None
    error: UserError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Outcome[T]":
        return cls(error=UserError(kind=kind, message=message))
