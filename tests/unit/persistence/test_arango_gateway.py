"""Unit tests for ArangoSetListGateway with mocked operations classes."""

from unittest.mock import MagicMock

import pytest
from arango.exceptions import ArangoError

from stagelist.components.events.event_broker_comp import SetListBroker
from stagelist.helpers.exceptions import ConflictError, NotFound, PersistenceError
from stagelist.persistence.arango_gateway import ArangoSetListGateway, ArangoSongCatalog


@pytest.fixture
def gateway() -> ArangoSetListGateway:
    gw = ArangoSetListGateway(MagicMock(), SetListBroker())
    gw.setlists = MagicMock()
    gw.stored = MagicMock()
    return gw


class DriverError(ArangoError):
    """Stand-in for any python-arango failure."""


def doc(version: int = 1) -> dict:
    return {"id": "s1", "name": "Friday", "participants": ["alice"], "status": "draft", "version": version}


class TestArangoSetListGateway:
    @pytest.mark.asyncio
    async def test_get_decodes_document(self, gateway) -> None:
        gateway.setlists.get_setlist.return_value = doc(3)

        setlist = await gateway.get("s1")

        assert (setlist.id, setlist.version) == ("s1", 3)

    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self, gateway) -> None:
        gateway.setlists.get_setlist.return_value = None

        with pytest.raises(NotFound):
            await gateway.get("s1")

    @pytest.mark.asyncio
    async def test_put_publishes_change(self, gateway) -> None:
        gateway.setlists.update_if_version.return_value = doc(2)
        seen: list[int] = []
        gateway.subscribe("s1", lambda s: seen.append(s.version))

        updated = await gateway.put("s1", {"name": "Friday"}, expected_version=1)

        assert updated.version == 2
        assert seen == [2]
        gateway.setlists.update_if_version.assert_called_once_with("s1", {"name": "Friday"}, 1)

    @pytest.mark.asyncio
    async def test_stale_put_is_conflict(self, gateway) -> None:
        gateway.setlists.update_if_version.return_value = None
        gateway.setlists.get_setlist.return_value = doc(5)

        with pytest.raises(ConflictError, match="version 5"):
            await gateway.put("s1", {"name": "x"}, expected_version=4)

    @pytest.mark.asyncio
    async def test_put_on_missing_setlist_is_not_found(self, gateway) -> None:
        gateway.setlists.update_if_version.return_value = None
        gateway.setlists.get_setlist.return_value = None

        with pytest.raises(NotFound):
            await gateway.put("s1", {"name": "x"}, expected_version=1)

    @pytest.mark.asyncio
    async def test_driver_errors_become_persistence_errors(self, gateway) -> None:
        gateway.setlists.get_setlist.side_effect = DriverError("connection refused")
        gateway.setlists.get_setlist.__name__ = "get_setlist"

        with pytest.raises(PersistenceError):
            await gateway.get("s1")

    @pytest.mark.asyncio
    async def test_create_inserts_version_one(self, gateway, build) -> None:
        gateway.setlists.insert_setlist.side_effect = lambda d: d

        created = await gateway.create(build.setlist())

        assert created.version == 1
        inserted = gateway.setlists.insert_setlist.call_args.args[0]
        assert inserted["id"] == "setlist_test"


class TestArangoSongCatalog:
    @pytest.mark.asyncio
    async def test_get_song(self) -> None:
        catalog = ArangoSongCatalog(MagicMock())
        catalog.songs = MagicMock()
        catalog.songs.get_song.return_value = {"id": "song_x", "title": "X", "members": ["alice"]}

        song = await catalog.get_song("song_x")

        assert (song.id, song.members) == ("song_x", ["alice"])
