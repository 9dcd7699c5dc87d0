"""Unit tests for unit_codec_comp: document encoding of aggregates."""

import pytest

from stagelist.components.setlist.lifecycle_comp import complete_unit
from stagelist.components.setlist.unit_codec_comp import (
    encode_fields,
    setlist_from_document,
    setlist_to_document,
    slot_from_document,
    snapshot_from_document,
    snapshot_to_document,
    unit_to_document,
)
from stagelist.helpers.dto.setlist_dto import SetListSummary, StoredSetList
from stagelist.helpers.exceptions import ValidationError

pytestmark = pytest.mark.unit


class TestEncoding:
    def test_units_carry_kind_and_camel_case_fields(self, build) -> None:
        doc = unit_to_document(build.card("card_c", order=0, slot_members=[["alice"]]))

        assert doc["kind"] == "flexible"
        assert doc["ownerNickname"] == "alice"
        assert doc["slots"][0] == {
            "id": "card_c_slot_0",
            "kind": "solo",
            "members": ["alice"],
            "isCompleted": False,
        }

    def test_absent_values_are_never_written(self, build) -> None:
        doc = unit_to_document(build.song("song_a"))

        assert "completedAt" not in doc
        assert "artist" not in doc
        assert None not in doc.values()

    def test_encode_fields_only_accepts_writable_attributes(self, build) -> None:
        setlist = build.setlist(songs=[build.song("song_a", order=0)])

        assert set(encode_fields(setlist, ["songs", "updated_at"])) == {"songs", "updatedAt"}
        with pytest.raises(ValidationError):
            encode_fields(setlist, ["version"])


class TestDecoding:
    def test_whole_aggregate_survives_the_codec(self, build) -> None:
        setlist = build.setlist(
            songs=[build.song("song_a", order=1, members=["bob"])],
            cards=[build.card("card_c", order=0, slot_members=[["x", "y"], ["y"]])],
            requests=[build.request("req_r")],
        )
        setlist = complete_unit(setlist, "card_c", completed_at=9)

        assert setlist_from_document(setlist_to_document(setlist)) == setlist

    def test_missing_arrays_decode_as_empty(self) -> None:
        setlist = setlist_from_document({"id": "setlist_1", "name": "Old", "participants": ["a"]})

        assert setlist.songs == [] and setlist.completed_request_song_cards == []
        assert setlist.status == "draft"

    def test_missing_required_field_raises(self) -> None:
        with pytest.raises(ValidationError, match="songId"):
            setlist_from_document({"id": "setlist_1", "songs": [{"title": "No id"}]})

    def test_unknown_slot_kind_raises(self) -> None:
        with pytest.raises(ValidationError):
            slot_from_document({"id": "s", "kind": "quartet"})

    def test_snapshot_document_shape(self) -> None:
        snapshot = StoredSetList(
            id="stored_1",
            name="Friday",
            original_setlist_id="setlist_1",
            saved_at=3,
            summary=SetListSummary(total_songs=2, total_slots=1, total_cards=1, participant_stats=[]),
            document={"id": "setlist_1"},
        )

        doc = snapshot_to_document(snapshot)

        assert doc["originalSetListId"] == "setlist_1"
        assert doc["statistics"]["totalSongs"] == 2
        assert snapshot_from_document(doc) == snapshot
