"""Persistence gateway contract.

The queue engine talks to its document store only through these protocols.
Concrete adapters: ArangoSetListGateway (python-arango) and
InMemorySetListGateway (dict-backed, for tests and local runs).

Gateway error contract:
- get/put/delete on a missing aggregate raise NotFound
- put with a stale expected_version raises ConflictError
- driver or connection failures raise PersistenceError
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.setlist_dto import CatalogSong, SetList, StoredSetList

ChangeListener = Callable[[SetList], None]
Unsubscribe = Callable[[], None]


class SetListGateway(Protocol):
    """Read/write of SetList aggregates plus realtime change delivery."""

    async def get(self, setlist_id: str) -> SetList: ...

    async def put(self, setlist_id: str, fields: Mapping[str, Any], expected_version: int) -> SetList:
        """
        Write a subset of document fields if the stored version matches.

        `fields` uses document field names (see unit_codec_comp.WRITABLE_FIELDS).
        On success the stored version is incremented and the new aggregate is
        returned and pushed to subscribers.
        """
        ...

    def subscribe(self, setlist_id: str, on_change: ChangeListener) -> Unsubscribe: ...

    async def create(self, setlist: SetList) -> SetList: ...

    async def delete(self, setlist_id: str) -> None: ...

    async def list_setlists(self, status: str | None = None) -> list[SetList]: ...

    async def save_snapshot(self, snapshot: StoredSetList) -> StoredSetList: ...

    async def list_snapshots(self, original_setlist_id: str | None = None) -> list[StoredSetList]: ...

    async def delete_snapshot(self, snapshot_id: str) -> None: ...


class SongCatalog(Protocol):
    """Read access to the approved-song catalog."""

    async def list_songs(self) -> list[CatalogSong]: ...

    async def get_song(self, song_id: str) -> CatalogSong | None: ...


class ActorDirectory(Protocol):
    """
    Resolves an API bearer token to an Actor (None when unknown).

    This is the external authorization query; services receive the resolved
    Actor as an argument on every mutating call.
    """

    def resolve(self, token: str) -> Actor | None: ...
