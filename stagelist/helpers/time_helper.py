"""Millisecond clock used for aggregate timestamps and broker events."""

from __future__ import annotations

import time
from collections.abc import Callable

# Any zero-argument callable returning epoch milliseconds; tests inject a fixed sequence
Clock = Callable[[], int]


def now_ms() -> int:
    """Wall-clock epoch milliseconds (createdAt, updatedAt, completedAt, savedAt)."""
    return time.time_ns() // 1_000_000
