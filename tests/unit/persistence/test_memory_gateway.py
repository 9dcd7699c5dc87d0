"""Unit tests for the in-memory gateway, catalog and actor directory."""

import pytest

from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.setlist_dto import CatalogSong, SetListSummary, StoredSetList
from stagelist.helpers.exceptions import ConflictError, NotFound, ValidationError
from stagelist.persistence.memory_gateway import InMemorySetListGateway, InMemorySongCatalog, StaticActorDirectory


def snapshot(snapshot_id: str, original: str, saved_at: int) -> StoredSetList:
    return StoredSetList(
        id=snapshot_id,
        name="Friday",
        original_setlist_id=original,
        saved_at=saved_at,
        summary=SetListSummary(total_songs=0, total_slots=0, total_cards=0, participant_stats=[]),
    )


class TestInMemorySetListGateway:
    @pytest.mark.asyncio
    async def test_create_starts_at_version_one(self, build) -> None:
        gateway = InMemorySetListGateway()

        created = await gateway.create(build.setlist())

        assert created.version == 1
        assert (await gateway.get("setlist_test")).version == 1

    @pytest.mark.asyncio
    async def test_create_twice_conflicts(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())

        with pytest.raises(ConflictError):
            await gateway.create(build.setlist())

    @pytest.mark.asyncio
    async def test_put_with_current_version_bumps_it(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())

        updated = await gateway.put("setlist_test", {"name": "Saturday"}, expected_version=1)

        assert (updated.name, updated.version) == ("Saturday", 2)
        assert gateway.write_count == 1

    @pytest.mark.asyncio
    async def test_put_with_stale_version_conflicts(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())
        await gateway.put("setlist_test", {"name": "Saturday"}, expected_version=1)

        with pytest.raises(ConflictError):
            await gateway.put("setlist_test", {"name": "Sunday"}, expected_version=1)

    @pytest.mark.asyncio
    async def test_put_rejects_unwritable_fields(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())

        with pytest.raises(ValidationError):
            await gateway.put("setlist_test", {"version": 99}, expected_version=1)

    @pytest.mark.asyncio
    async def test_missing_setlist_is_not_found(self) -> None:
        gateway = InMemorySetListGateway()

        with pytest.raises(NotFound):
            await gateway.get("nope")
        with pytest.raises(NotFound):
            await gateway.put("nope", {}, expected_version=1)
        with pytest.raises(NotFound):
            await gateway.delete("nope")

    @pytest.mark.asyncio
    async def test_reads_are_isolated_copies(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist(songs=[build.song("song_a", order=0)]))

        first = await gateway.get("setlist_test")
        first.songs[0].order = 99

        assert (await gateway.get("setlist_test")).songs[0].order == 0

    @pytest.mark.asyncio
    async def test_subscribers_receive_every_write(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())
        seen: list[int] = []
        unsubscribe = gateway.subscribe("setlist_test", lambda s: seen.append(s.version))

        await gateway.put("setlist_test", {"name": "A"}, expected_version=1)
        unsubscribe()
        await gateway.put("setlist_test", {"name": "B"}, expected_version=2)

        assert seen == [2]

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist(setlist_id="s1"))
        await gateway.create(build.setlist(setlist_id="s2"))
        await gateway.put("s2", {"status": "active"}, expected_version=1)

        assert [s.id for s in await gateway.list_setlists("active")] == ["s2"]
        assert {s.id for s in await gateway.list_setlists()} == {"s1", "s2"}

    @pytest.mark.asyncio
    async def test_snapshots_newest_first_and_deletable(self) -> None:
        gateway = InMemorySetListGateway()
        await gateway.save_snapshot(snapshot("stored_1", "s1", saved_at=1))
        await gateway.save_snapshot(snapshot("stored_2", "s1", saved_at=2))
        await gateway.save_snapshot(snapshot("stored_3", "s2", saved_at=3))

        assert [s.id for s in await gateway.list_snapshots("s1")] == ["stored_2", "stored_1"]
        await gateway.delete_snapshot("stored_2")
        assert [s.id for s in await gateway.list_snapshots()] == ["stored_3", "stored_1"]
        with pytest.raises(NotFound):
            await gateway.delete_snapshot("stored_2")


class TestCatalogAndDirectory:
    @pytest.mark.asyncio
    async def test_catalog_lists_by_title(self) -> None:
        catalog = InMemorySongCatalog([CatalogSong(id="2", title="B"), CatalogSong(id="1", title="A")])

        assert [s.id for s in await catalog.list_songs()] == ["1", "2"]
        assert (await catalog.get_song("2")).title == "B"
        assert await catalog.get_song("3") is None

    @pytest.mark.unit
    def test_directory_from_config(self) -> None:
        directory = StaticActorDirectory.from_config(
            {"tok-lead": {"nickname": "lead", "role": "leader"}, "tok-a": {"nickname": "alice"}}
        )

        assert directory.resolve("tok-lead") == Actor(nickname="lead", role="leader")
        assert directory.resolve("tok-a") == Actor(nickname="alice", role="member")
        assert directory.resolve("unknown") is None
