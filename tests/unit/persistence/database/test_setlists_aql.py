"""Unit tests for SetListOperations, StoredSetListOperations and ApprovedSongsOperations."""

from unittest.mock import MagicMock

import pytest

from stagelist.persistence.database.approved_songs_aql import ApprovedSongsOperations
from stagelist.persistence.database.setlists_aql import SetListOperations, strip_meta
from stagelist.persistence.database.stored_setlists_aql import StoredSetListOperations

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_db() -> MagicMock:
    return MagicMock()


def last_query(mock_db: MagicMock) -> tuple[str, dict]:
    call = mock_db.aql.execute.call_args
    return call.args[0], call.kwargs.get("bind_vars", {})


class TestSetListOperations:
    def test_get_setlist_strips_system_attributes(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([{"_key": "s1", "_id": "setlists/s1", "_rev": "x", "id": "s1"}])
        ops = SetListOperations(mock_db)

        assert ops.get_setlist("s1") == {"id": "s1"}
        _query, bind_vars = last_query(mock_db)
        assert bind_vars == {"key": "s1"}

    def test_get_missing_setlist_returns_none(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([])

        assert SetListOperations(mock_db).get_setlist("nope") is None

    def test_update_filters_on_expected_version_and_bumps_it(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([{"_key": "s1", "id": "s1", "version": 4}])
        ops = SetListOperations(mock_db)

        updated = ops.update_if_version("s1", {"songs": []}, expected_version=3)

        query, bind_vars = last_query(mock_db)
        assert "s.version == @expected_version" in query
        assert "version: s.version + 1" in query
        assert "mergeObjects: false" in query
        assert bind_vars == {"key": "s1", "fields": {"songs": []}, "expected_version": 3}
        assert updated == {"id": "s1", "version": 4}

    def test_stale_update_returns_none(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([])

        assert SetListOperations(mock_db).update_if_version("s1", {}, expected_version=1) is None

    def test_list_by_status_binds_filter(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([{"_key": "s1", "id": "s1"}])

        docs = SetListOperations(mock_db).list_setlists("active")

        query, bind_vars = last_query(mock_db)
        assert "FILTER s.status == @status" in query
        assert bind_vars == {"status": "active"}
        assert docs == [{"id": "s1"}]

    def test_list_without_status_has_no_filter(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([])

        SetListOperations(mock_db).list_setlists()

        query, bind_vars = last_query(mock_db)
        assert "FILTER" not in query
        assert bind_vars == {}

    def test_delete_reports_whether_a_document_was_removed(self, mock_db) -> None:
        ops = SetListOperations(mock_db)
        mock_db.aql.execute.return_value = iter(["s1"])
        assert ops.delete_setlist("s1") is True

        mock_db.aql.execute.return_value = iter([])
        assert ops.delete_setlist("s1") is False


class TestStoredAndCatalogOperations:
    def test_snapshots_filter_by_original(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([])

        StoredSetListOperations(mock_db).list_snapshots("s1")

        query, bind_vars = last_query(mock_db)
        assert "originalSetListId == @original" in query
        assert bind_vars == {"original": "s1"}

    def test_catalog_song_id_is_its_key(self, mock_db) -> None:
        mock_db.aql.execute.return_value = iter([{"_key": "song_x", "id": "song_x", "title": "X"}])

        songs = ApprovedSongsOperations(mock_db).list_songs()

        assert songs == [{"id": "song_x", "title": "X"}]
        assert "id: s._key" in last_query(mock_db)[0]

    def test_strip_meta(self) -> None:
        assert strip_meta({"_key": "a", "_id": "c/a", "_rev": "1", "name": "n"}) == {"name": "n"}
