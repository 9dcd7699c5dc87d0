"""Reorder engine - gesture-to-index math and queue moves.

Pointer and touch input share one index computation
(gesture_target_index). Everything here is pure: the engine only produces a
ReorderPlan, and apply_reorder() turns a plan plus a freshly read aggregate
into the new aggregate. Nothing is written until the service commits it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TypeVar

from stagelist.components.setlist.queue_composer_comp import compose, find_in_queue, recompose
from stagelist.components.setlist.unit_model_comp import unit_key
from stagelist.helpers.dto.gesture_dto import ReorderPlan
from stagelist.helpers.dto.setlist_dto import PerformanceUnit, SetList
from stagelist.helpers.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _round_half_up(value: float) -> int:
    # Math.round semantics: 0.5 -> 1, -0.5 -> 0, -1.5 -> -1
    return math.floor(value + 0.5)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def validate_index(index: int, length: int, what: str = "index") -> None:
    """Raise ValidationError unless 0 <= index < length."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValidationError(f"{what} must be an integer")
    if not 0 <= index < length:
        raise ValidationError(f"{what} {index} out of bounds for queue of {length}")


def gesture_target_index(delta_position: float, item_height: float, source_index: int, bound_count: int) -> int:
    """
    Translate a continuous press-and-move gesture into a target index.

    offset = round(delta_position / item_height); the result is
    source_index + offset clamped to [0, bound_count - 1].

    Args:
        delta_position: Current position minus start position along the queue axis
        item_height: Fixed size of one queue item along that axis
        source_index: Index of the dragged unit
        bound_count: Number of placed units

    Returns:
        Target index inside the queue

    Raises:
        ValidationError: On a non-positive item height, an empty queue or a bad source index
    """
    if item_height <= 0:
        raise ValidationError("item_height must be positive")
    if bound_count <= 0:
        raise ValidationError("Cannot compute a target in an empty queue")
    validate_index(source_index, bound_count, "source index")
    offset = _round_half_up(delta_position / item_height)
    return clamp(source_index + offset, 0, bound_count - 1)


def pointer_target_index(source_index: int, hover_index: int, length: int) -> int:
    """Validate a pointer drag's source and hover index; the hover index is the target."""
    validate_index(source_index, length, "source index")
    validate_index(hover_index, length, "target index")
    return hover_index


def insert_index_from_position(
    x: float,
    y: float,
    area_left: float,
    area_top: float,
    area_width: float,
    area_height: float,
    count: int,
    margin: float = 50.0,
) -> int:
    """
    Insert position for a pooled unit dropped over the horizontal queue strip.

    The strip is split into count + 1 equal bands; a drop in band k inserts at
    k. Drops further than `margin` outside the strip return -1 (no drop). An
    empty queue accepts any drop inside the margin at 0.

    Returns:
        Insert index in [0, count], or -1 when outside the drop area
    """
    if area_width <= 0:
        return -1
    right = area_left + area_width
    bottom = area_top + area_height
    if x < area_left - margin or x > right + margin or y < area_top - margin or y > bottom + margin:
        return -1
    if count <= 0:
        return 0
    progress = min(1.0, max(0.0, x - area_left) / area_width)
    return clamp(math.floor(progress * (count + 1)), 0, count)


def move(sequence: Sequence[T], source_index: int, target_index: int) -> list[T]:
    """Remove the element at source_index and insert it at target_index."""
    validate_index(source_index, len(sequence), "source index")
    validate_index(target_index, len(sequence), "target index")
    items = list(sequence)
    item = items.pop(source_index)
    items.insert(target_index, item)
    return items


def plan_reorder(queue: Sequence[PerformanceUnit], source_index: int, target_index: int) -> ReorderPlan | None:
    """
    Build a reorder plan against the locally rendered queue.

    Returns None for the no-op cases (0 or 1 placed units, or source equals
    target) so callers skip the write entirely.
    """
    if len(queue) <= 1:
        return None
    validate_index(source_index, len(queue), "source index")
    validate_index(target_index, len(queue), "target index")
    if source_index == target_index:
        return None
    return ReorderPlan(unit_key=unit_key(queue[source_index]), source_index=source_index, target_index=target_index)


def apply_reorder(setlist: SetList, plan: ReorderPlan) -> SetList:
    """
    Apply a plan to a freshly read aggregate.

    The dragged unit is located by key, not by the plan's source index, so a
    queue shifted by another client still moves the right unit. A unit that is
    no longer placed (completed, deleted or un-placed elsewhere) fails closed.

    Raises:
        NotFound: If the unit is no longer in the queue
        ValidationError: If the target index is outside the fresh queue
    """
    queue = compose(setlist)
    source = find_in_queue(queue, plan.unit_key)
    if source < 0:
        raise NotFound(f"Unit {plan.unit_key} is no longer in the queue")
    validate_index(plan.target_index, len(queue), "target index")
    if source == plan.target_index:
        return recompose(setlist, queue)
    return recompose(setlist, move(queue, source, plan.target_index))
