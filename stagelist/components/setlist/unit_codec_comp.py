"""Document codec for SetList aggregates and performance units.

Converts between the dataclass DTOs and the camelCase JSON documents kept in
the store. Every encoded unit passes through strip_absent() so no None value
ever reaches the store. Decoding is strict about required fields and lenient
about missing arrays (older documents omit empty ones).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from stagelist.helpers.dto.setlist_dto import (
    SETLIST_STATUSES,
    SLOT_KINDS,
    CatalogSong,
    FlexibleCard,
    FlexibleSlot,
    ParticipantSummary,
    PerformanceUnit,
    RequestCard,
    RequestSong,
    SetList,
    SetListSummary,
    SongUnit,
    StoredSetList,
)
from stagelist.helpers.exceptions import ValidationError
from stagelist.helpers.sanitize_helper import strip_absent

# SetList attribute -> document field. Only these fields may be written by put().
FIELD_NAMES: dict[str, str] = {
    "name": "name",
    "participants": "participants",
    "status": "status",
    "updated_at": "updatedAt",
    "songs": "songs",
    "flexible_cards": "flexibleCards",
    "request_song_cards": "requestSongCards",
    "completed_songs": "completedSongs",
    "completed_flexible_cards": "completedFlexibleCards",
    "completed_request_song_cards": "completedRequestSongCards",
}
WRITABLE_FIELDS: frozenset[str] = frozenset(FIELD_NAMES.values())

_UNIT_ARRAYS = {
    "songs",
    "flexible_cards",
    "request_song_cards",
    "completed_songs",
    "completed_flexible_cards",
    "completed_request_song_cards",
}


def _require(doc: dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(doc, dict):
        raise ValidationError(f"{where}: expected an object, got {type(doc).__name__}")
    if key not in doc or doc[key] is None:
        raise ValidationError(f"{where}: missing required field '{key}'")
    return doc[key]


def _members(doc: dict[str, Any]) -> list[str]:
    members = doc.get("members") or []
    if not isinstance(members, list):
        raise ValidationError("members must be a list")
    return [str(m) for m in members]


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------


def slot_to_document(slot: FlexibleSlot) -> dict[str, Any]:
    return strip_absent(
        {
            "id": slot.id,
            "kind": slot.kind,
            "songRef": slot.song_ref,
            "title": slot.title,
            "members": list(slot.members),
            "isCompleted": slot.is_completed,
        }
    )


def unit_to_document(unit: PerformanceUnit) -> dict[str, Any]:
    """Encode any unit kind to its stored document."""
    match unit:
        case SongUnit():
            doc: dict[str, Any] = {
                "kind": "song",
                "songId": unit.song_id,
                "title": unit.title,
                "artist": unit.artist,
                "members": list(unit.members),
                "order": unit.order,
                "completedAt": unit.completed_at,
            }
        case FlexibleCard():
            doc = {
                "kind": "flexible",
                "id": unit.id,
                "ownerNickname": unit.owner_nickname,
                "totalSlots": unit.total_slots,
                "slots": [slot_to_document(s) for s in unit.slots],
                "order": unit.order,
                "completedAt": unit.completed_at,
                "allParticipants": unit.all_participants,
                "totalSlotsCompleted": unit.total_slots_completed,
            }
        case RequestCard():
            doc = {
                "kind": "request",
                "id": unit.id,
                "songs": [
                    {"id": s.id, "title": s.title, "requestedBy": s.requested_by} for s in unit.songs
                ],
                "order": unit.order,
                "completedAt": unit.completed_at,
            }
        case _:
            raise ValidationError(f"Not a performance unit: {type(unit).__name__}")
    return strip_absent(doc)


def units_to_documents(units: Iterable[PerformanceUnit]) -> list[dict[str, Any]]:
    return [unit_to_document(u) for u in units]


def encode_fields(setlist: SetList, attrs: Iterable[str]) -> dict[str, Any]:
    """
    Encode the named SetList attributes as a partial document for put().

    Args:
        setlist: Aggregate holding the new values
        attrs: Attribute names (keys of FIELD_NAMES)

    Returns:
        Dict of document field -> encoded value
    """
    fields: dict[str, Any] = {}
    for attr in attrs:
        if attr not in FIELD_NAMES:
            raise ValidationError(f"Field '{attr}' is not writable")
        value = getattr(setlist, attr)
        if attr in _UNIT_ARRAYS:
            fields[FIELD_NAMES[attr]] = units_to_documents(value)
        elif attr == "participants":
            fields[FIELD_NAMES[attr]] = list(value)
        else:
            fields[FIELD_NAMES[attr]] = value
    return fields


def setlist_to_document(setlist: SetList) -> dict[str, Any]:
    """Encode a whole aggregate (used on create and for snapshots)."""
    doc = encode_fields(setlist, FIELD_NAMES.keys())
    doc.update(
        {
            "id": setlist.id,
            "createdBy": setlist.created_by,
            "createdAt": setlist.created_at,
            "version": setlist.version,
        }
    )
    return strip_absent(doc)


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------


def slot_from_document(doc: dict[str, Any]) -> FlexibleSlot:
    kind = doc.get("kind") or doc.get("type") or "empty"
    if kind not in SLOT_KINDS:
        raise ValidationError(f"Unknown slot kind: {kind}")
    return FlexibleSlot(
        id=str(_require(doc, "id", "slot")),
        kind=kind,
        members=_members(doc),
        is_completed=bool(doc.get("isCompleted", False)),
        song_ref=doc.get("songRef"),
        title=doc.get("title"),
    )


def song_from_document(doc: dict[str, Any]) -> SongUnit:
    return SongUnit(
        song_id=str(_require(doc, "songId", "song")),
        title=str(doc.get("title", "")),
        members=_members(doc),
        order=int(doc.get("order", -1)),
        artist=doc.get("artist"),
        completed_at=doc.get("completedAt"),
    )


def flexible_card_from_document(doc: dict[str, Any]) -> FlexibleCard:
    slots = [slot_from_document(s) for s in doc.get("slots") or []]
    return FlexibleCard(
        id=str(_require(doc, "id", "flexible card")),
        owner_nickname=str(_require(doc, "ownerNickname", "flexible card")),
        total_slots=int(doc.get("totalSlots", len(slots))),
        slots=slots,
        order=int(doc.get("order", -1)),
        completed_at=doc.get("completedAt"),
        all_participants=doc.get("allParticipants"),
        total_slots_completed=doc.get("totalSlotsCompleted"),
    )


def request_card_from_document(doc: dict[str, Any]) -> RequestCard:
    songs = [
        RequestSong(
            id=str(_require(s, "id", "request song")),
            title=str(_require(s, "title", "request song")),
            requested_by=str(s.get("requestedBy", "")),
        )
        for s in doc.get("songs") or []
    ]
    return RequestCard(
        id=str(_require(doc, "id", "request card")),
        songs=songs,
        order=int(doc.get("order", -1)),
        completed_at=doc.get("completedAt"),
    )


def setlist_from_document(doc: dict[str, Any]) -> SetList:
    """Decode a stored aggregate document."""
    status = doc.get("status", "draft")
    if status not in SETLIST_STATUSES:
        raise ValidationError(f"Unknown setlist status: {status}")
    return SetList(
        id=str(_require(doc, "id", "setlist")),
        name=str(doc.get("name", "")),
        participants=[str(p) for p in doc.get("participants") or []],
        created_by=str(doc.get("createdBy", "")),
        created_at=int(doc.get("createdAt", 0)),
        updated_at=int(doc.get("updatedAt", 0)),
        status=status,
        version=int(doc.get("version", 0)),
        songs=[song_from_document(d) for d in doc.get("songs") or []],
        flexible_cards=[flexible_card_from_document(d) for d in doc.get("flexibleCards") or []],
        request_song_cards=[request_card_from_document(d) for d in doc.get("requestSongCards") or []],
        completed_songs=[song_from_document(d) for d in doc.get("completedSongs") or []],
        completed_flexible_cards=[
            flexible_card_from_document(d) for d in doc.get("completedFlexibleCards") or []
        ],
        completed_request_song_cards=[
            request_card_from_document(d) for d in doc.get("completedRequestSongCards") or []
        ],
    )


# ----------------------------------------------------------------------
# Snapshots and catalog
# ----------------------------------------------------------------------


def summary_to_document(summary: SetListSummary) -> dict[str, Any]:
    return {
        "totalSongs": summary.total_songs,
        "totalSlots": summary.total_slots,
        "totalCards": summary.total_cards,
        "participantStats": [
            {
                "nickname": p.nickname,
                "songCount": p.song_count,
                "totalSongs": p.total_songs,
                "totalSlots": p.total_slots,
            }
            for p in summary.participant_stats
        ],
    }


def summary_from_document(doc: dict[str, Any]) -> SetListSummary:
    return SetListSummary(
        total_songs=int(doc.get("totalSongs", 0)),
        total_slots=int(doc.get("totalSlots", 0)),
        total_cards=int(doc.get("totalCards", 0)),
        participant_stats=[
            ParticipantSummary(
                nickname=str(_require(p, "nickname", "participant summary")),
                song_count=int(p.get("songCount", 0)),
                total_songs=int(p.get("totalSongs", 0)),
                total_slots=int(p.get("totalSlots", 0)),
            )
            for p in doc.get("participantStats") or []
        ],
    )


def snapshot_to_document(snapshot: StoredSetList) -> dict[str, Any]:
    return strip_absent(
        {
            "id": snapshot.id,
            "name": snapshot.name,
            "originalSetListId": snapshot.original_setlist_id,
            "savedAt": snapshot.saved_at,
            "statistics": summary_to_document(snapshot.summary),
            "setList": snapshot.document,
        }
    )


def snapshot_from_document(doc: dict[str, Any]) -> StoredSetList:
    return StoredSetList(
        id=str(_require(doc, "id", "stored setlist")),
        name=str(doc.get("name", "")),
        original_setlist_id=str(doc.get("originalSetListId", "")),
        saved_at=int(doc.get("savedAt", 0)),
        summary=summary_from_document(doc.get("statistics") or {}),
        document=dict(doc.get("setList") or {}),
    )


def catalog_song_from_document(doc: dict[str, Any]) -> CatalogSong:
    return CatalogSong(
        id=str(_require(doc, "id", "approved song")),
        title=str(doc.get("title", "")),
        members=_members(doc),
        artist=doc.get("artist"),
    )
