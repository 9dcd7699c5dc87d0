"""Gesture tracking - drag sessions and swipe classification.

A DragSession follows one drag from press to release. Intermediate target
indexes are purely local; release() returns a ReorderPlan (or None for a
no-op) and cancel() abandons the gesture without producing anything.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from stagelist.components.setlist.reorder_comp import (
    gesture_target_index,
    plan_reorder,
    pointer_target_index,
    validate_index,
)
from stagelist.helpers.dto.gesture_dto import GestureThresholds, Point, ReorderPlan, SwipeAction, SwipeState
from stagelist.helpers.dto.setlist_dto import PerformanceUnit
from stagelist.helpers.exceptions import ValidationError

logger = logging.getLogger(__name__)


class DragSession:
    """
    One drag of a placed unit, from press to release.

    Pointer mode: the UI reports hover indexes directly via hover().
    Continuous mode: the UI reports positions via move_to(); the target is
    derived from the vertical travel and a fixed item height.
    """

    def __init__(
        self,
        queue: Sequence[PerformanceUnit],
        source_index: int,
        start: Point | None = None,
        item_height: float | None = None,
    ) -> None:
        validate_index(source_index, len(queue), "source index")
        if start is not None and (item_height is None or item_height <= 0):
            raise ValidationError("Continuous drags need a positive item_height")
        self._queue = list(queue)
        self.source_index = source_index
        self.start = start
        self.item_height = item_height
        self.target_index = source_index
        self.active = True

    def hover(self, hover_index: int) -> int:
        """Pointer mode: the hovered drop target becomes the current target."""
        self._ensure_active()
        self.target_index = pointer_target_index(self.source_index, hover_index, len(self._queue))
        return self.target_index

    def move_to(self, position: Point) -> int:
        """Continuous mode: recompute the target from the travelled distance."""
        self._ensure_active()
        if self.start is None or self.item_height is None:
            raise ValidationError("move_to() needs a drag started with a position")
        self.target_index = gesture_target_index(
            position.y - self.start.y, self.item_height, self.source_index, len(self._queue)
        )
        return self.target_index

    def release(self) -> ReorderPlan | None:
        """End the drag; return the plan to commit, or None when nothing moved."""
        self._ensure_active()
        self.active = False
        return plan_reorder(self._queue, self.source_index, self.target_index)

    def cancel(self) -> None:
        """Abandon the drag (released outside a target or touch cancelled)."""
        self.active = False
        logger.debug(f"Drag of index {self.source_index} cancelled")

    def _ensure_active(self) -> None:
        if not self.active:
            raise ValidationError("Drag session already ended")


def is_scroll_intent(start: Point, current: Point, thresholds: GestureThresholds = GestureThresholds()) -> bool:
    """True when a touch moved far enough before the long-press fired to count as scrolling."""
    dx = abs(current.x - start.x)
    dy = abs(current.y - start.y)
    return max(dx, dy) > thresholds.drag_start_distance


def swipe_state(
    start: Point,
    current: Point,
    is_elevated: bool,
    is_current_card: bool,
    thresholds: GestureThresholds = GestureThresholds(),
) -> SwipeState:
    """Live feedback while swiping: is it a drag, and would release complete or delete."""
    dx = start.x - current.x
    dy = start.y - current.y
    dragging = abs(dx) > thresholds.drag_start_distance or abs(dy) > thresholds.drag_start_distance
    vertical = abs(dx) < abs(dy)
    if is_elevated and is_current_card and dy > 0 and vertical:
        return SwipeState(dragging, dy >= thresholds.complete_threshold, False)
    if is_elevated and dy < 0 and vertical:
        return SwipeState(dragging, False, -dy >= thresholds.delete_threshold)
    return SwipeState(dragging, False, False)


def classify_swipe(
    start: Point,
    end: Point,
    is_elevated: bool,
    is_current_card: bool,
    thresholds: GestureThresholds = GestureThresholds(),
) -> SwipeAction:
    """
    Classify a finished swipe on a queue card.

    Up completes the current card and down deletes any card (both elevated
    only); left and right navigate. Diagonal swipes beyond the threshold on
    both axes do nothing.
    """
    dx = start.x - end.x
    dy = start.y - end.y
    limit = thresholds.min_swipe_distance
    if dy > limit and is_elevated and is_current_card and abs(dx) < limit:
        return "complete"
    if dy < -limit and is_elevated and abs(dx) < limit:
        return "delete"
    if dx > limit and abs(dy) < limit:
        return "next"
    if dx < -limit and abs(dy) < limit:
        return "previous"
    return "none"


def step_card_index(current: int, action: SwipeAction, count: int) -> int:
    """Apply a navigation swipe to the carousel position, staying in bounds."""
    if action == "next" and current < count - 1:
        return current + 1
    if action == "previous" and current > 0:
        return current - 1
    return current
