"""Unit tests for AggregateWriter: versioned read-modify-write and retries."""

import asyncio
import dataclasses

import pytest

from stagelist.helpers.exceptions import ConflictError, NotFound, PersistenceError, ValidationError
from stagelist.persistence.memory_gateway import InMemorySetListGateway
from stagelist.services.aggregate_writer_svc import AggregateWriter, run_operation
from stagelist.services.setlist_admin_svc import SetListAdminService
from stagelist.services.setlist_svc import SetListService


class FlakyGateway(InMemorySetListGateway):
    """Lets another writer slip in before the first `conflicts` puts."""

    def __init__(self, conflicts: int) -> None:
        super().__init__()
        self.conflicts = conflicts
        self.put_attempts = 0

    async def put(self, setlist_id, fields, expected_version):
        self.put_attempts += 1
        if self.conflicts > 0:
            self.conflicts -= 1
            # concurrent write from another client
            await super().put(setlist_id, {"name": f"other-{self.put_attempts}"}, expected_version)
        return await super().put(setlist_id, fields, expected_version)


class YieldingGateway(InMemorySetListGateway):
    """Gives up the event loop inside every read and write, like a networked store."""

    def __init__(self) -> None:
        super().__init__()
        self.put_attempts = 0

    async def get(self, setlist_id):
        await asyncio.sleep(0)
        return await super().get(setlist_id)

    async def put(self, setlist_id, fields, expected_version):
        self.put_attempts += 1
        await asyncio.sleep(0)
        return await super().put(setlist_id, fields, expected_version)


def rename(name: str):
    return lambda s: dataclasses.replace(s, name=name)


class TestMutate:
    @pytest.mark.asyncio
    async def test_writes_fields_and_updated_at(self, build, clock) -> None:
        # Arrange
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())
        writer = AggregateWriter(gateway, clock=clock)

        # Act
        updated = await writer.mutate("setlist_test", rename("Saturday"), ["name"])

        # Assert
        assert updated.name == "Saturday"
        assert updated.version == 2
        assert updated.updated_at == 10_000

    @pytest.mark.asyncio
    async def test_identity_transform_writes_nothing(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())
        writer = AggregateWriter(gateway)

        result = await writer.mutate("setlist_test", lambda s: s, ["name"])

        assert result.version == 1
        assert gateway.write_count == 0

    @pytest.mark.asyncio
    async def test_conflict_is_retried_on_fresh_read(self, build) -> None:
        gateway = FlakyGateway(conflicts=1)
        await gateway.create(build.setlist())
        writer = AggregateWriter(gateway, max_conflict_retries=3)

        updated = await writer.mutate("setlist_test", rename("Saturday"), ["name"])

        assert updated.name == "Saturday"
        assert gateway.put_attempts == 2
        assert updated.version == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self, build) -> None:
        gateway = FlakyGateway(conflicts=10)
        await gateway.create(build.setlist())
        writer = AggregateWriter(gateway, max_conflict_retries=2)

        with pytest.raises(ConflictError):
            await writer.mutate("setlist_test", rename("Saturday"), ["name"])
        assert gateway.put_attempts == 3

    @pytest.mark.asyncio
    async def test_transform_errors_propagate_without_write(self, build) -> None:
        gateway = InMemorySetListGateway()
        await gateway.create(build.setlist())
        writer = AggregateWriter(gateway)

        def fail(_s):
            raise ValidationError("bad")

        with pytest.raises(ValidationError):
            await writer.mutate("setlist_test", fail, ["name"])
        assert gateway.write_count == 0


class TestRunOperation:
    @pytest.mark.asyncio
    async def test_domain_error_becomes_failure(self) -> None:
        async def missing():
            raise NotFound("gone")

        result = await run_operation("Test", missing())

        assert result.error_kind == "not_found"

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_persistence_failure(self) -> None:
        async def broken():
            raise RuntimeError("socket closed")

        result = await run_operation("Test", broken())

        assert isinstance(result.error, PersistenceError)

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        async def value():
            return 5

        assert (await run_operation("Test", value())).unwrap() == 5


class TestSerialization:
    @pytest.mark.asyncio
    async def test_concurrent_member_adds_land_without_retries(self, clock, settings, catalog, leader) -> None:
        # Arrange
        gateway = YieldingGateway()
        writer = AggregateWriter(gateway, max_conflict_retries=3, clock=clock)
        setlists = SetListService(writer, settings, catalog)
        admin = SetListAdminService(writer, settings)
        setlist_id = (await admin.create_setlist("Friday Jam", ["alice", "bob", "carol"], leader)).unwrap().id
        card = (await setlists.create_flexible_card(setlist_id, leader, 1)).unwrap()
        writes, attempts = gateway.write_count, gateway.put_attempts
        nicknames = ["alice", "bob", "carol"]

        # Act
        results = await asyncio.gather(
            *(setlists.add_member(setlist_id, card.id, 0, name, leader) for name in nicknames)
        )

        # Assert
        assert all(r.ok for r in results)
        stored = await gateway.get(setlist_id)
        assert sorted(stored.flexible_cards[0].slots[0].members) == nicknames
        assert gateway.write_count - writes == len(nicknames)
        assert gateway.put_attempts - attempts == len(nicknames)
