"""Unit tests for gesture_comp: drag sessions and swipe classification."""

import pytest

from stagelist.components.setlist.gesture_comp import (
    DragSession,
    classify_swipe,
    is_scroll_intent,
    step_card_index,
    swipe_state,
)
from stagelist.helpers.dto.gesture_dto import GestureThresholds, Point, ReorderPlan
from stagelist.helpers.exceptions import ValidationError

pytestmark = pytest.mark.unit


@pytest.fixture
def queue(build):
    return [build.song(f"song_{k}", order=i) for i, k in enumerate("ABCDE")]


class TestDragSession:
    def test_pointer_drag_produces_plan(self, queue) -> None:
        session = DragSession(queue, source_index=0)

        session.hover(2)
        session.hover(3)
        plan = session.release()

        assert plan == ReorderPlan(unit_key="song_A", source_index=0, target_index=3)
        assert not session.active

    def test_continuous_drag_uses_travel_distance(self, queue) -> None:
        session = DragSession(queue, source_index=1, start=Point(0, 100), item_height=50)

        target = session.move_to(Point(5, 220))

        assert target == 3
        assert session.release() == ReorderPlan(unit_key="song_B", source_index=1, target_index=3)

    def test_release_at_source_is_no_op(self, queue) -> None:
        session = DragSession(queue, source_index=2)

        session.hover(2)

        assert session.release() is None

    def test_cancel_ends_session_without_plan(self, queue) -> None:
        session = DragSession(queue, source_index=0)
        session.hover(4)

        session.cancel()

        with pytest.raises(ValidationError, match="already ended"):
            session.release()

    def test_continuous_mode_requires_item_height(self, queue) -> None:
        with pytest.raises(ValidationError):
            DragSession(queue, source_index=0, start=Point(0, 0))


class TestSwipes:
    def test_up_on_current_card_completes_for_elevated(self) -> None:
        assert classify_swipe(Point(100, 300), Point(100, 150), is_elevated=True, is_current_card=True) == "complete"

    def test_up_by_member_does_nothing(self) -> None:
        assert classify_swipe(Point(100, 300), Point(100, 150), is_elevated=False, is_current_card=True) == "none"

    def test_down_deletes_for_elevated(self) -> None:
        assert classify_swipe(Point(100, 100), Point(100, 250), is_elevated=True, is_current_card=False) == "delete"

    def test_horizontal_swipes_navigate(self) -> None:
        assert classify_swipe(Point(300, 100), Point(100, 100), is_elevated=False, is_current_card=True) == "next"
        assert classify_swipe(Point(100, 100), Point(300, 100), is_elevated=False, is_current_card=True) == "previous"

    def test_diagonal_swipe_does_nothing(self) -> None:
        assert classify_swipe(Point(300, 300), Point(100, 100), is_elevated=True, is_current_card=True) == "none"

    def test_short_swipe_does_nothing(self) -> None:
        assert classify_swipe(Point(100, 100), Point(130, 100), is_elevated=True, is_current_card=True) == "none"

    def test_swipe_state_reports_ready_to_complete(self) -> None:
        state = swipe_state(Point(0, 200), Point(0, 120), is_elevated=True, is_current_card=True)

        assert state.is_dragging
        assert state.ready_to_complete
        assert not state.ready_to_delete

    def test_scroll_intent_threshold(self) -> None:
        thresholds = GestureThresholds(drag_start_distance=10)

        assert not is_scroll_intent(Point(0, 0), Point(5, 5), thresholds)
        assert is_scroll_intent(Point(0, 0), Point(0, 11), thresholds)

    def test_step_card_index_stays_in_bounds(self) -> None:
        assert step_card_index(0, "previous", 3) == 0
        assert step_card_index(0, "next", 3) == 1
        assert step_card_index(2, "next", 3) == 2
        assert step_card_index(1, "complete", 3) == 1
