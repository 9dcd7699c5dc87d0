"""
Pytest fixtures and configuration for the test suite.

Strategy:
- Components are pure, so unit tests build SetList aggregates directly
- Services run against the in-memory gateway (same codec and version rules as ArangoDB)
- The API is exercised through FastAPI's TestClient with an injected Application
"""

from __future__ import annotations

import itertools
import sys
from pathlib import Path

import pytest

# Add project root to path so tests can import the stagelist package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from stagelist.helpers.dto.actor_dto import Actor  # noqa: E402
from stagelist.helpers.dto.config_dto import SetListSettings  # noqa: E402
from stagelist.helpers.dto.setlist_dto import (  # noqa: E402
    CatalogSong,
    FlexibleCard,
    FlexibleSlot,
    RequestCard,
    SetList,
    SongUnit,
)
from stagelist.helpers.time_helper import Clock  # noqa: E402
from stagelist.persistence.memory_gateway import InMemorySetListGateway, InMemorySongCatalog  # noqa: E402
from stagelist.services.aggregate_writer_svc import AggregateWriter  # noqa: E402
from stagelist.services.setlist_admin_svc import SetListAdminService  # noqa: E402
from stagelist.services.setlist_svc import SetListService  # noqa: E402

# === ACTORS ===


@pytest.fixture
def leader() -> Actor:
    """Elevated actor."""
    return Actor(nickname="leader", role="leader")


@pytest.fixture
def alice() -> Actor:
    return Actor(nickname="alice", role="member")


@pytest.fixture
def bob() -> Actor:
    return Actor(nickname="bob", role="member")


# === AGGREGATE BUILDERS ===


class Builders:
    """Small constructors for aggregates used across the unit tests."""

    @staticmethod
    def song(song_id: str, order: int = -1, members: list[str] | None = None, title: str | None = None) -> SongUnit:
        return SongUnit(song_id=song_id, title=title or f"Song {song_id}", members=members or [], order=order)

    @staticmethod
    def card(
        card_id: str,
        owner: str = "alice",
        order: int = -1,
        slot_members: list[list[str]] | None = None,
    ) -> FlexibleCard:
        slot_members = slot_members if slot_members is not None else [[]]
        slots = [
            FlexibleSlot(id=f"{card_id}_slot_{i}", kind="solo" if members else "empty", members=list(members))
            for i, members in enumerate(slot_members)
        ]
        return FlexibleCard(id=card_id, owner_nickname=owner, total_slots=len(slots), slots=slots, order=order)

    @staticmethod
    def request(card_id: str, order: int = -1) -> RequestCard:
        return RequestCard(id=card_id, songs=[], order=order)

    @staticmethod
    def setlist(
        songs: list[SongUnit] | None = None,
        cards: list[FlexibleCard] | None = None,
        requests: list[RequestCard] | None = None,
        participants: list[str] | None = None,
        setlist_id: str = "setlist_test",
    ) -> SetList:
        return SetList(
            id=setlist_id,
            name="Friday Jam",
            participants=participants if participants is not None else ["alice", "bob"],
            created_by="leader",
            created_at=1_000,
            updated_at=1_000,
            status="draft",
            version=1,
            songs=songs or [],
            flexible_cards=cards or [],
            request_song_cards=requests or [],
        )


@pytest.fixture
def build() -> type[Builders]:
    return Builders


# === SERVICES ===


@pytest.fixture
def clock() -> Clock:
    """Deterministic millisecond clock."""
    counter = itertools.count(start=10_000, step=1_000)
    return lambda: next(counter)


@pytest.fixture
def settings() -> SetListSettings:
    return SetListSettings(max_conflict_retries=3, max_flexible_slots=10, elevated_roles=frozenset({"leader"}))


@pytest.fixture
def catalog() -> InMemorySongCatalog:
    return InMemorySongCatalog(
        [
            CatalogSong(id="song_x", title="Song X", members=["alice", "bob"]),
            CatalogSong(id="song_y", title="Song Y", members=["alice"]),
            CatalogSong(id="song_z", title="Song Z", members=["carol"]),
        ]
    )


@pytest.fixture
def gateway() -> InMemorySetListGateway:
    return InMemorySetListGateway()


@pytest.fixture
def writer(gateway: InMemorySetListGateway, clock: Clock) -> AggregateWriter:
    return AggregateWriter(gateway, max_conflict_retries=3, clock=clock)


@pytest.fixture
def setlist_service(
    writer: AggregateWriter, settings: SetListSettings, catalog: InMemorySongCatalog
) -> SetListService:
    return SetListService(writer, settings, catalog)


@pytest.fixture
def admin_service(writer: AggregateWriter, settings: SetListSettings) -> SetListAdminService:
    return SetListAdminService(writer, settings)
