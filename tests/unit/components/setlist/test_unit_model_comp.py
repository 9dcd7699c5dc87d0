"""Unit tests for unit_model_comp: predicates, identity and authorization."""

import pytest

from stagelist.components.setlist.unit_model_comp import (
    can_act_on,
    derive_all_participants,
    is_flexible_card,
    is_placed,
    is_pooled,
    is_request_card,
    is_song,
    normalize_nicknames,
    owner_of,
    unit_key,
)
from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.setlist_dto import FlexibleSlot
from stagelist.helpers.exceptions import ValidationError

pytestmark = pytest.mark.unit


class TestPredicates:
    def test_each_kind_matches_exactly_one_predicate(self, build) -> None:
        units = [build.song("s1"), build.card("c1"), build.request("r1")]

        matches = [(is_song(u), is_flexible_card(u), is_request_card(u)) for u in units]

        assert matches == [(True, False, False), (False, True, False), (False, False, True)]

    def test_placed_and_pooled_follow_order(self, build) -> None:
        assert is_placed(build.song("s1", order=0))
        assert not is_pooled(build.song("s1", order=0))
        assert is_pooled(build.card("c1", order=-1))


class TestUnitKey:
    def test_song_key_is_song_id(self, build) -> None:
        assert unit_key(build.song("song_42")) == "song_42"

    def test_card_key_is_card_id(self, build) -> None:
        assert unit_key(build.card("flexible_abc")) == "flexible_abc"
        assert unit_key(build.request("request_abc")) == "request_abc"

    def test_non_unit_raises(self) -> None:
        with pytest.raises(ValidationError):
            unit_key("not a unit")  # type: ignore[arg-type]


class TestNicknames:
    def test_normalize_trims_and_dedupes_in_first_seen_order(self) -> None:
        assert normalize_nicknames([" bob", "alice", "bob ", "", "  "]) == ["bob", "alice"]

    def test_normalize_rejects_non_strings(self) -> None:
        with pytest.raises(ValidationError):
            normalize_nicknames(["alice", 3])  # type: ignore[list-item]

    def test_derive_all_participants_unions_slot_members(self) -> None:
        slots = [
            FlexibleSlot(id="s0", kind="duet", members=["x", "y"]),
            FlexibleSlot(id="s1", kind="solo", members=["y"]),
            FlexibleSlot(id="s2"),
        ]

        assert derive_all_participants(slots) == ["x", "y"]


class TestAuthorization:
    def test_elevated_actor_may_act_on_anything(self, build, leader) -> None:
        assert can_act_on(leader, build.song("s1"), {"leader"})
        assert can_act_on(leader, build.card("c1", owner="alice"), {"leader"})

    def test_owner_may_act_on_own_card(self, build, alice) -> None:
        assert can_act_on(alice, build.card("c1", owner="alice"), {"leader"})

    def test_member_may_not_act_on_others_or_ownerless_units(self, build, bob) -> None:
        assert not can_act_on(bob, build.card("c1", owner="alice"), {"leader"})
        assert not can_act_on(bob, build.song("s1"), {"leader"})
        assert not can_act_on(bob, build.request("r1"), {"leader"})

    def test_roles_come_from_the_given_set(self, build) -> None:
        host = Actor(nickname="host", role="host")

        assert not can_act_on(host, build.song("s1"), {"leader"})
        assert can_act_on(host, build.song("s1"), {"leader", "host"})

    def test_owner_of(self, build) -> None:
        assert owner_of(build.card("c1", owner="bob")) == "bob"
        assert owner_of(build.song("s1")) is None
