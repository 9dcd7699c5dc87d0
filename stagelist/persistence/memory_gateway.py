"""In-memory adapters for the gateway protocols.

Documents are stored encoded (plain dicts, deep-copied on the way in and out)
so the in-memory store exercises the same codec and version rules as the
ArangoDB adapter.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from stagelist.components.events.event_broker_comp import SetListBroker, setlist_topic
from stagelist.components.setlist.unit_codec_comp import (
    WRITABLE_FIELDS,
    setlist_from_document,
    setlist_to_document,
    snapshot_from_document,
    snapshot_to_document,
)
from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.setlist_dto import CatalogSong, SetList, StoredSetList
from stagelist.helpers.exceptions import ConflictError, NotFound, ValidationError
from stagelist.persistence.gateway import ChangeListener, Unsubscribe

logger = logging.getLogger(__name__)


def check_writable(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - WRITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Fields not writable: {', '.join(sorted(unknown))}")


def subscribe_via_broker(broker: SetListBroker, setlist_id: str, on_change: ChangeListener) -> Unsubscribe:
    """Bridge broker change events to a SetList listener."""

    def _on_event(event: dict[str, Any]) -> None:
        if event["type"] == "changed" and event["document"] is not None:
            on_change(setlist_from_document(event["document"]))

    return broker.subscribe(setlist_topic(setlist_id), _on_event)


class InMemorySetListGateway:
    """Dict-backed SetListGateway."""

    def __init__(self, broker: SetListBroker | None = None) -> None:
        self.broker = broker or SetListBroker()
        self._setlists: dict[str, dict[str, Any]] = {}
        self._snapshots: dict[str, dict[str, Any]] = {}
        self.write_count = 0

    async def get(self, setlist_id: str) -> SetList:
        doc = self._setlists.get(setlist_id)
        if doc is None:
            raise NotFound(f"Setlist {setlist_id} not found")
        return setlist_from_document(copy.deepcopy(doc))

    async def put(self, setlist_id: str, fields: Mapping[str, Any], expected_version: int) -> SetList:
        check_writable(fields)
        doc = self._setlists.get(setlist_id)
        if doc is None:
            raise NotFound(f"Setlist {setlist_id} not found")
        if doc.get("version", 0) != expected_version:
            raise ConflictError(
                f"Setlist {setlist_id} is at version {doc.get('version')}, expected {expected_version}"
            )
        updated = {**doc, **copy.deepcopy(dict(fields)), "version": expected_version + 1}
        self._setlists[setlist_id] = updated
        self.write_count += 1
        self.broker.publish_change(setlist_id, copy.deepcopy(updated))
        return setlist_from_document(copy.deepcopy(updated))

    def subscribe(self, setlist_id: str, on_change: ChangeListener) -> Unsubscribe:
        return subscribe_via_broker(self.broker, setlist_id, on_change)

    async def create(self, setlist: SetList) -> SetList:
        if setlist.id in self._setlists:
            raise ConflictError(f"Setlist {setlist.id} already exists")
        doc = setlist_to_document(setlist)
        doc["version"] = 1
        self._setlists[setlist.id] = doc
        return setlist_from_document(copy.deepcopy(doc))

    async def delete(self, setlist_id: str) -> None:
        if self._setlists.pop(setlist_id, None) is None:
            raise NotFound(f"Setlist {setlist_id} not found")
        self.broker.publish_removed(setlist_id)

    async def list_setlists(self, status: str | None = None) -> list[SetList]:
        docs = [d for d in self._setlists.values() if status is None or d.get("status") == status]
        docs.sort(key=lambda d: d.get("createdAt", 0), reverse=True)
        return [setlist_from_document(copy.deepcopy(d)) for d in docs]

    async def save_snapshot(self, snapshot: StoredSetList) -> StoredSetList:
        doc = snapshot_to_document(snapshot)
        self._snapshots[snapshot.id] = doc
        return snapshot_from_document(copy.deepcopy(doc))

    async def list_snapshots(self, original_setlist_id: str | None = None) -> list[StoredSetList]:
        docs = [
            d
            for d in self._snapshots.values()
            if original_setlist_id is None or d.get("originalSetListId") == original_setlist_id
        ]
        docs.sort(key=lambda d: d.get("savedAt", 0), reverse=True)
        return [snapshot_from_document(copy.deepcopy(d)) for d in docs]

    async def delete_snapshot(self, snapshot_id: str) -> None:
        if self._snapshots.pop(snapshot_id, None) is None:
            raise NotFound(f"Stored setlist {snapshot_id} not found")


class InMemorySongCatalog:
    """Fixed list of approved songs."""

    def __init__(self, songs: Iterable[CatalogSong] = ()) -> None:
        self._songs = {s.id: s for s in songs}

    def add(self, song: CatalogSong) -> None:
        self._songs[song.id] = song

    async def list_songs(self) -> list[CatalogSong]:
        return sorted(self._songs.values(), key=lambda s: s.title)

    async def get_song(self, song_id: str) -> CatalogSong | None:
        return self._songs.get(song_id)


class StaticActorDirectory:
    """Token -> Actor mapping loaded from configuration."""

    def __init__(self, tokens: Mapping[str, Actor] | None = None) -> None:
        self._tokens = dict(tokens or {})

    @classmethod
    def from_config(cls, entries: Mapping[str, Mapping[str, str]]) -> StaticActorDirectory:
        """Build from {token: {nickname, role}} as found under `api.tokens`."""
        tokens = {
            token: Actor(nickname=str(entry["nickname"]), role=str(entry.get("role", "member")))
            for token, entry in entries.items()
        }
        return cls(tokens)

    def resolve(self, token: str) -> Actor | None:
        return self._tokens.get(token)
