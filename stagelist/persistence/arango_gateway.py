"""ArangoDB adapters for the gateway protocols.

python-arango is synchronous; every driver call runs in a worker thread via
asyncio.to_thread so the event loop is never blocked. Driver errors surface
as PersistenceError. Change notification is in-process through the
SetListBroker, published after each successful write.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from arango.exceptions import ArangoError

from stagelist.components.events.event_broker_comp import SetListBroker
from stagelist.components.setlist.unit_codec_comp import (
    catalog_song_from_document,
    setlist_from_document,
    setlist_to_document,
    snapshot_from_document,
    snapshot_to_document,
)
from stagelist.helpers.dto.setlist_dto import CatalogSong, SetList, StoredSetList
from stagelist.helpers.exceptions import ConflictError, NotFound, PersistenceError
from stagelist.persistence.arango_client import DatabaseLike
from stagelist.persistence.database import ApprovedSongsOperations, SetListOperations, StoredSetListOperations
from stagelist.persistence.gateway import ChangeListener, Unsubscribe
from stagelist.persistence.memory_gateway import check_writable, subscribe_via_broker

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _run(func: Callable[..., T], *args: Any) -> T:
    try:
        return await asyncio.to_thread(func, *args)
    except ArangoError as e:
        logger.exception(f"[ArangoSetListGateway] {func.__name__} failed")
        raise PersistenceError(f"Store operation {func.__name__} failed: {e}") from e


class ArangoSetListGateway:
    """SetListGateway over the `setlists` and `stored_setlists` collections."""

    def __init__(self, db: DatabaseLike, broker: SetListBroker | None = None) -> None:
        self.setlists = SetListOperations(db)
        self.stored = StoredSetListOperations(db)
        self.broker = broker or SetListBroker()

    async def get(self, setlist_id: str) -> SetList:
        doc = await _run(self.setlists.get_setlist, setlist_id)
        if doc is None:
            raise NotFound(f"Setlist {setlist_id} not found")
        return setlist_from_document(doc)

    async def put(self, setlist_id: str, fields: Mapping[str, Any], expected_version: int) -> SetList:
        check_writable(fields)
        doc = await _run(self.setlists.update_if_version, setlist_id, dict(fields), expected_version)
        if doc is None:
            current = await _run(self.setlists.get_setlist, setlist_id)
            if current is None:
                raise NotFound(f"Setlist {setlist_id} not found")
            raise ConflictError(
                f"Setlist {setlist_id} is at version {current.get('version')}, expected {expected_version}"
            )
        self.broker.publish_change(setlist_id, doc)
        return setlist_from_document(doc)

    def subscribe(self, setlist_id: str, on_change: ChangeListener) -> Unsubscribe:
        return subscribe_via_broker(self.broker, setlist_id, on_change)

    async def create(self, setlist: SetList) -> SetList:
        document = setlist_to_document(setlist)
        document["version"] = 1
        doc = await _run(self.setlists.insert_setlist, document)
        return setlist_from_document(doc)

    async def delete(self, setlist_id: str) -> None:
        removed = await _run(self.setlists.delete_setlist, setlist_id)
        if not removed:
            raise NotFound(f"Setlist {setlist_id} not found")
        self.broker.publish_removed(setlist_id)

    async def list_setlists(self, status: str | None = None) -> list[SetList]:
        docs = await _run(self.setlists.list_setlists, status)
        return [setlist_from_document(d) for d in docs]

    async def save_snapshot(self, snapshot: StoredSetList) -> StoredSetList:
        doc = await _run(self.stored.insert_snapshot, snapshot_to_document(snapshot))
        return snapshot_from_document(doc)

    async def list_snapshots(self, original_setlist_id: str | None = None) -> list[StoredSetList]:
        docs = await _run(self.stored.list_snapshots, original_setlist_id)
        return [snapshot_from_document(d) for d in docs]

    async def delete_snapshot(self, snapshot_id: str) -> None:
        removed = await _run(self.stored.delete_snapshot, snapshot_id)
        if not removed:
            raise NotFound(f"Stored setlist {snapshot_id} not found")


class ArangoSongCatalog:
    """SongCatalog over the `approved_songs` collection."""

    def __init__(self, db: DatabaseLike) -> None:
        self.songs = ApprovedSongsOperations(db)

    async def list_songs(self) -> list[CatalogSong]:
        docs = await _run(self.songs.list_songs)
        return [catalog_song_from_document(d) for d in docs]

    async def get_song(self, song_id: str) -> CatalogSong | None:
        doc = await _run(self.songs.get_song, song_id)
        return catalog_song_from_document(doc) if doc is not None else None
