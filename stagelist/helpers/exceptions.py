"""Custom exceptions used across multiple layers.

Rules:
- Only put exceptions here if they need to be raised in one layer and caught in another.
- Keep exceptions simple and focused.
- No I/O, no config loading, no complex logic.
"""

from __future__ import annotations


class SetListError(Exception):
    """Base class for every recoverable setlist engine error."""

    kind = "error"


class ValidationError(SetListError):
    """Raised when input is malformed (index out of bounds, missing slot fields, ...)."""

    kind = "validation"


class Forbidden(SetListError):
    """Raised when the acting user may not perform the requested mutation."""

    kind = "forbidden"


class NotFound(SetListError):
    """Raised when a referenced setlist, unit, card or slot no longer exists."""

    kind = "not_found"


class ConflictError(SetListError):
    """Raised by the store when a write's expected version does not match."""

    kind = "conflict"


class PersistenceError(SetListError):
    """Raised when the underlying store or transport fails."""

    kind = "persistence"
