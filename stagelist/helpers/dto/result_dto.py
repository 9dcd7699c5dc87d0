"""
Operation result DTO.

Every public service operation returns an OperationResult instead of raising:
either a value or one of the SetListError kinds.

Rules:
- Pure data structures only
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Success value or error of a service operation."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> str | None:
        """Kind tag of the error ("validation", "forbidden", ...) or None on success."""
        if self.error is None:
            return None
        return getattr(self.error, "kind", "error")

    @classmethod
    def success(cls, value: T) -> OperationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> OperationResult[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
