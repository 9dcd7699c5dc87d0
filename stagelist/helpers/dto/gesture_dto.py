"""
Gesture DTOs.

Pointer/touch input records and the plans the reorder engine derives from them.

Rules:
- Import only stdlib and typing (no stagelist.* imports)
- Pure data structures only
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SwipeAction = Literal["complete", "delete", "next", "previous", "none"]


@dataclass(frozen=True)
class Point:
    """Screen position of a pointer or touch."""

    x: float
    y: float


@dataclass(frozen=True)
class ReorderPlan:
    """A committed drag: move unit_key from source_index to target_index."""

    unit_key: str
    source_index: int
    target_index: int


@dataclass(frozen=True)
class GestureThresholds:
    """Distances (in pixels) used by swipe classification and drag start."""

    min_swipe_distance: float = 80.0
    complete_threshold: float = 60.0
    delete_threshold: float = 60.0
    drag_start_distance: float = 10.0
    drop_margin: float = 50.0


@dataclass(frozen=True)
class SwipeState:
    """Live swipe feedback while the finger is still down."""

    is_dragging: bool
    ready_to_complete: bool
    ready_to_delete: bool
