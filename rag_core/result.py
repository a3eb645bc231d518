"""
Tagged operation results.

A ``Result`` holds either a success payload or one of the core errors,
for callers that prefer branching on ``result.kind`` to catching exceptions.
"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from .exceptions import ErrorKind, RAGError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success payload or a ``RAGError``, never both."""

    value: Optional[T] = None
    error: Optional[RAGError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RAGError) -> "Result[T]":
        return cls(error=error)

    @classmethod
    def capture(cls, fn: Callable[..., T], *args, **kwargs) -> "Result[T]":
        """Call ``fn`` and wrap its return value or the ``RAGError`` it raised."""
        try:
            return cls.success(fn(*args, **kwargs))
        except RAGError as e:
            return cls.failure(e)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the payload, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value
