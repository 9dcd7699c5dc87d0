"""Absent-field stripping for documents headed to the store.

The document store rejects absent values, so every unit is passed through
strip_absent() before serialization. The function is pure and idempotent:
running it twice gives the same result as running it once, and empty lists
or dicts are kept as they are (an empty member list is meaningful).
"""

from __future__ import annotations

from typing import Any


def strip_absent(obj: Any) -> Any:
    """Recursively drop None values from dicts and lists.

    Args:
        obj: Any JSON-like value (dict, list, tuple or primitive)

    Returns:
        A new value with every None dict value and None list item removed.
        Tuples come back as lists. Primitives are returned unchanged.
    """
    if isinstance(obj, dict):
        return {k: strip_absent(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list | tuple):
        return [strip_absent(v) for v in obj if v is not None]
    return obj
