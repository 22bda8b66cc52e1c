"""Terminal result of one request invocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .exceptions import RestError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a success value or a ``RestError``, never both.

    Endpoints without output succeed with ``value=None``.
    """

    value: T | None = None
    error: RestError | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.value is not None:
            raise ValueError("Outcome cannot carry both a value and an error")

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: RestError) -> Outcome[T]:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        """Return the value or raise the error."""
        if self.error is not None:
            raise self.error
        return self.value
