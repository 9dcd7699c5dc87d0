"""
Logging helpers for safe error handling and message sanitization.

This module provides utilities to prevent information leakage through
error messages while preserving detailed logging for debugging.
"""

from __future__ import annotations

import logging

from stagelist.helpers.exceptions import PersistenceError, SetListError

logger = logging.getLogger(__name__)


def sanitize_exception_message(e: Exception, safe_message: str = "An error occurred") -> str:
    """
    Sanitize exception message for user display.

    Domain errors (validation, authorization, missing units) are written for
    the user and pass through unchanged. Store failures and anything unexpected
    are logged in full and replaced by the generic message.

    Args:
        e: The exception to sanitize
        safe_message: Generic message to return to users

    Returns:
        Safe error message for user display

    Example:
        >>> try:
        ...     raise RuntimeError("arango://10.0.0.3 refused connection")
        ... except Exception as e:
        ...     user_msg = sanitize_exception_message(e, "Store unavailable")
        ...     return {"error": user_msg}  # Returns generic message
    """
    if isinstance(e, SetListError) and not isinstance(e, PersistenceError):
        return str(e) or safe_message

    logger.error(f"[security] Exception sanitized: {e}", exc_info=e)
    return safe_message
