"""
Helpers package.
"""

from .exceptions import (
    ConflictError,
    Forbidden,
    NotFound,
    PersistenceError,
    SetListError,
    ValidationError,
)
from .logging_helper import sanitize_exception_message
from .sanitize_helper import strip_absent
from .time_helper import now_ms

__all__ = [
    "ConflictError",
    "Forbidden",
    "NotFound",
    "PersistenceError",
    "SetListError",
    "ValidationError",
    "now_ms",
    "sanitize_exception_message",
    "strip_absent",
]
