"""Map service OperationResults onto HTTP responses."""

from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException

from stagelist.helpers.dto.result_dto import OperationResult
from stagelist.helpers.logging_helper import sanitize_exception_message

T = TypeVar("T")

STATUS_FOR_KIND: dict[str, int] = {
    "validation": 400,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
    "persistence": 503,
}


def unwrap_or_raise(result: OperationResult[T]) -> T:
    """Return the result value, or raise HTTPException with a sanitized message."""
    if result.ok:
        return result.value  # type: ignore[return-value]
    assert result.error is not None
    status = STATUS_FOR_KIND.get(result.error_kind or "", 500)
    raise HTTPException(
        status_code=status,
        detail=sanitize_exception_message(result.error, "Setlist operation failed"),
    )
