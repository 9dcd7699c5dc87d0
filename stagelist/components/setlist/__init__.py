"""
Setlist package.
"""

from .catalog_comp import available_songs
from .gesture_comp import DragSession, classify_swipe, step_card_index, swipe_state
from .lifecycle_comp import (
    add_pooled_unit,
    add_song,
    complete_unit,
    delete_unit,
    locate_unit,
    new_flexible_card,
    new_request_card,
    place_unit,
    unplace_unit,
)
from .queue_composer_comp import compose, decompose, has_total_order, recompose
from .reorder_comp import apply_reorder, gesture_target_index, insert_index_from_position, plan_reorder
from .slot_editor_comp import add_member, remove_member, reset_slot, update_slot
from .statistics_comp import build_summary, compute_stats
from .unit_model_comp import is_flexible_card, is_request_card, is_song, unit_key

__all__ = [
    "DragSession",
    "add_member",
    "add_pooled_unit",
    "add_song",
    "apply_reorder",
    "available_songs",
    "build_summary",
    "classify_swipe",
    "complete_unit",
    "compose",
    "compute_stats",
    "decompose",
    "delete_unit",
    "gesture_target_index",
    "has_total_order",
    "insert_index_from_position",
    "is_flexible_card",
    "is_request_card",
    "is_song",
    "locate_unit",
    "new_flexible_card",
    "new_request_card",
    "place_unit",
    "plan_reorder",
    "recompose",
    "remove_member",
    "reset_slot",
    "step_card_index",
    "swipe_state",
    "unit_key",
    "unplace_unit",
    "update_slot",
]
