"""Unit tests for queue_composer_comp: one total order over three arrays."""

import dataclasses

import pytest

from stagelist.components.setlist.lifecycle_comp import (
    add_pooled_unit,
    add_song,
    new_flexible_card,
    new_request_card,
    place_unit,
)
from stagelist.components.setlist.queue_composer_comp import (
    compose,
    decompose,
    find_in_queue,
    has_total_order,
    placed_count,
    recompose,
)
from stagelist.components.setlist.unit_model_comp import unit_key
from stagelist.helpers.dto.setlist_dto import CatalogSong
from stagelist.helpers.exceptions import ValidationError

pytestmark = pytest.mark.unit


class TestCompose:
    def test_merges_kinds_by_order_and_skips_pooled(self, build) -> None:
        # Arrange
        setlist = build.setlist(
            songs=[build.song("song_a", order=2), build.song("song_pooled")],
            cards=[build.card("card_c", order=0)],
            requests=[build.request("req_r", order=1)],
        )

        # Act
        queue = compose(setlist)

        # Assert
        assert [unit_key(u) for u in queue] == ["card_c", "req_r", "song_a"]

    def test_empty_setlist_composes_to_empty_queue(self, build) -> None:
        assert compose(build.setlist()) == []

    def test_ties_keep_kind_order(self, build) -> None:
        setlist = build.setlist(songs=[build.song("song_a", order=0)], cards=[build.card("card_c", order=0)])

        assert [unit_key(u) for u in compose(setlist)] == ["song_a", "card_c"]

    @pytest.mark.parametrize("bad_order", ["1", 1.5, True])
    def test_non_integer_order_is_rejected(self, build, bad_order) -> None:
        song = dataclasses.replace(build.song("song_a"), order=bad_order)

        with pytest.raises(ValidationError):
            compose(build.setlist(songs=[song]))


class TestDecompose:
    def test_renumbers_and_keeps_pooled_units_first(self, build) -> None:
        # Arrange
        pooled = build.song("song_pooled")
        setlist = build.setlist(
            songs=[build.song("song_a", order=5), pooled],
            cards=[build.card("card_c", order=9)],
        )
        queue = [setlist.flexible_cards[0], setlist.songs[0]]

        # Act
        arrays = decompose(queue, setlist)

        # Assert
        assert [(s.song_id, s.order) for s in arrays.songs] == [("song_pooled", -1), ("song_a", 1)]
        assert [(c.id, c.order) for c in arrays.flexible_cards] == [("card_c", 0)]
        assert arrays.request_song_cards == []

    def test_does_not_mutate_input_units(self, build) -> None:
        song = build.song("song_a", order=7)

        decompose([song])

        assert song.order == 7

    def test_duplicate_units_are_rejected(self, build) -> None:
        song = build.song("song_a", order=0)

        with pytest.raises(ValidationError, match="more than once"):
            decompose([song, song])


class TestRoundTrip:
    def test_compose_after_decompose_reproduces_the_sequence(self, build) -> None:
        units = [build.card("card_1"), build.song("song_1"), build.request("req_1"), build.song("song_2")]
        setlist = build.setlist()

        arrays = decompose(units)
        rebuilt = dataclasses.replace(
            setlist,
            songs=arrays.songs,
            flexible_cards=arrays.flexible_cards,
            request_song_cards=arrays.request_song_cards,
        )

        assert [unit_key(u) for u in compose(rebuilt)] == ["card_1", "song_1", "req_1", "song_2"]
        assert has_total_order(rebuilt)

    def test_decompose_after_compose_reproduces_the_arrays(self, build) -> None:
        # Arrange: a card created after another was placed, as the service does it
        first = new_flexible_card("alice", 1)
        second = new_flexible_card("bob", 1)
        setlist = add_pooled_unit(build.setlist(), first)
        setlist = place_unit(setlist, first.id)
        setlist = add_pooled_unit(setlist, second)
        setlist = add_pooled_unit(setlist, new_request_card())
        setlist = add_song(setlist, CatalogSong(id="song_x", title="Hold On", members=["alice"]), place=False)

        # Act
        arrays = decompose(compose(setlist), setlist)

        # Assert
        assert arrays.flexible_cards == setlist.flexible_cards
        assert arrays.songs == setlist.songs
        assert arrays.request_song_cards == setlist.request_song_cards
        assert [c.id for c in setlist.flexible_cards] == [second.id, first.id]

    def test_recompose_of_a_composed_aggregate_is_stable(self, build) -> None:
        setlist = add_pooled_unit(build.setlist(songs=[build.song("song_a", order=0)]), build.card("card_c"))

        assert recompose(setlist) == setlist


class TestTotalOrder:
    def test_gap_is_detected_and_repaired_by_recompose(self, build) -> None:
        setlist = build.setlist(songs=[build.song("song_a", order=0), build.song("song_b", order=4)])

        assert not has_total_order(setlist)
        repaired = recompose(setlist)

        assert has_total_order(repaired)
        assert [s.order for s in repaired.songs] == [0, 1]
        assert placed_count(repaired) == 2

    def test_find_in_queue(self, build) -> None:
        queue = [build.song("song_a", order=0), build.card("card_c", order=1)]

        assert find_in_queue(queue, "card_c") == 1
        assert find_in_queue(queue, "missing") == -1
