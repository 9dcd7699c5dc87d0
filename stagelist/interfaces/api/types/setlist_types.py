"""
Setlist API request and response types.

Architecture:
- These types are owned by the interface layer
- They define what external clients see (REST API shapes)
- They transform internal DTOs via .from_dto() classmethods
- Services and lower layers should NOT import from this module
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field
from typing_extensions import Self

from stagelist.components.setlist.unit_model_comp import unit_key
from stagelist.helpers.dto.setlist_dto import (
    CatalogSong,
    FlexibleCard,
    FlexibleSlot,
    ParticipantStat,
    PerformanceUnit,
    RequestCard,
    SetList,
    SetListView,
    SongUnit,
    StoredSetList,
)

# ──────────────────────────────────────────────────────────────────────
# Unit Types
# ──────────────────────────────────────────────────────────────────────


class SlotResponse(BaseModel):
    id: str
    kind: str
    members: list[str]
    is_completed: bool
    song_ref: str | None = None
    title: str | None = None

    @classmethod
    def from_dto(cls, slot: FlexibleSlot) -> Self:
        return cls(
            id=slot.id,
            kind=slot.kind,
            members=list(slot.members),
            is_completed=slot.is_completed,
            song_ref=slot.song_ref,
            title=slot.title,
        )


class RequestSongResponse(BaseModel):
    id: str
    title: str
    requested_by: str


class UnitResponse(BaseModel):
    """
    One performance unit, flattened.

    `kind` tells the client which of the kind-specific fields are set.
    """

    kind: Literal["song", "flexible", "request"]
    key: str
    order: int
    completed_at: int | None = None
    # song
    title: str | None = None
    artist: str | None = None
    members: list[str] | None = None
    # flexible
    owner_nickname: str | None = None
    total_slots: int | None = None
    slots: list[SlotResponse] | None = None
    all_participants: list[str] | None = None
    total_slots_completed: int | None = None
    # request
    songs: list[RequestSongResponse] | None = None

    @classmethod
    def from_dto(cls, unit: PerformanceUnit) -> Self:
        match unit:
            case SongUnit():
                return cls(
                    kind="song",
                    key=unit_key(unit),
                    order=unit.order,
                    completed_at=unit.completed_at,
                    title=unit.title,
                    artist=unit.artist,
                    members=list(unit.members),
                )
            case FlexibleCard():
                return cls(
                    kind="flexible",
                    key=unit_key(unit),
                    order=unit.order,
                    completed_at=unit.completed_at,
                    owner_nickname=unit.owner_nickname,
                    total_slots=unit.total_slots,
                    slots=[SlotResponse.from_dto(s) for s in unit.slots],
                    all_participants=unit.all_participants,
                    total_slots_completed=unit.total_slots_completed,
                )
            case RequestCard():
                return cls(
                    kind="request",
                    key=unit_key(unit),
                    order=unit.order,
                    completed_at=unit.completed_at,
                    songs=[
                        RequestSongResponse(id=s.id, title=s.title, requested_by=s.requested_by) for s in unit.songs
                    ],
                )
            case _:
                raise TypeError(f"Not a performance unit: {type(unit).__name__}")


# ──────────────────────────────────────────────────────────────────────
# SetList Types
# ──────────────────────────────────────────────────────────────────────


class SetListResponse(BaseModel):
    id: str
    name: str
    participants: list[str]
    status: str
    created_by: str
    created_at: int
    updated_at: int
    version: int
    songs: list[UnitResponse]
    flexible_cards: list[UnitResponse]
    request_song_cards: list[UnitResponse]
    completed_songs: list[UnitResponse]
    completed_flexible_cards: list[UnitResponse]
    completed_request_song_cards: list[UnitResponse]

    @classmethod
    def from_dto(cls, setlist: SetList) -> Self:
        def units(items: list[Any]) -> list[UnitResponse]:
            return [UnitResponse.from_dto(u) for u in items]

        return cls(
            id=setlist.id,
            name=setlist.name,
            participants=list(setlist.participants),
            status=setlist.status,
            created_by=setlist.created_by,
            created_at=setlist.created_at,
            updated_at=setlist.updated_at,
            version=setlist.version,
            songs=units(setlist.songs),
            flexible_cards=units(setlist.flexible_cards),
            request_song_cards=units(setlist.request_song_cards),
            completed_songs=units(setlist.completed_songs),
            completed_flexible_cards=units(setlist.completed_flexible_cards),
            completed_request_song_cards=units(setlist.completed_request_song_cards),
        )


class ParticipantStatResponse(BaseModel):
    nickname: str
    appearance_count: int
    completed_count: int
    completion_rate: float
    is_guest: bool

    @classmethod
    def from_dto(cls, stat: ParticipantStat) -> Self:
        return cls(
            nickname=stat.nickname,
            appearance_count=stat.appearance_count,
            completed_count=stat.completed_count,
            completion_rate=stat.completion_rate,
            is_guest=stat.is_guest,
        )


class SetListViewResponse(BaseModel):
    """Aggregate plus derived queue and statistics, as rendered by clients."""

    setlist: SetListResponse
    queue: list[UnitResponse]
    stats: list[ParticipantStatResponse]

    @classmethod
    def from_dto(cls, view: SetListView) -> Self:
        return cls(
            setlist=SetListResponse.from_dto(view.setlist),
            queue=[UnitResponse.from_dto(u) for u in view.queue],
            stats=[ParticipantStatResponse.from_dto(s) for s in view.stats],
        )


class StoredSetListResponse(BaseModel):
    id: str
    name: str
    original_setlist_id: str
    saved_at: int
    total_songs: int
    total_slots: int
    total_cards: int
    participant_stats: list[dict[str, Any]]

    @classmethod
    def from_dto(cls, stored: StoredSetList) -> Self:
        return cls(
            id=stored.id,
            name=stored.name,
            original_setlist_id=stored.original_setlist_id,
            saved_at=stored.saved_at,
            total_songs=stored.summary.total_songs,
            total_slots=stored.summary.total_slots,
            total_cards=stored.summary.total_cards,
            participant_stats=[
                {
                    "nickname": p.nickname,
                    "song_count": p.song_count,
                    "total_songs": p.total_songs,
                    "total_slots": p.total_slots,
                }
                for p in stored.summary.participant_stats
            ],
        )


class CatalogSongResponse(BaseModel):
    id: str
    title: str
    members: list[str]
    artist: str | None = None

    @classmethod
    def from_dto(cls, song: CatalogSong) -> Self:
        return cls(id=song.id, title=song.title, members=list(song.members), artist=song.artist)


# ──────────────────────────────────────────────────────────────────────
# Request Models
# ──────────────────────────────────────────────────────────────────────


class CreateSetListRequest(BaseModel):
    name: str
    participants: list[str]


class ParticipantsRequest(BaseModel):
    participants: list[str]


class AddSongRequest(BaseModel):
    song_id: str
    insert_at: int | None = None


class CreateFlexibleCardRequest(BaseModel):
    total_slots: int
    owner_nickname: str | None = None


class PlaceUnitRequest(BaseModel):
    insert_at: int | None = None


class ReorderRequest(BaseModel):
    """A released drag. unit_key is the unit the client saw at source_index."""

    source_index: int
    target_index: int
    unit_key: str | None = None


class SlotPatchRequest(BaseModel):
    kind: Literal["solo", "duet", "chorus", "empty"]
    members: list[str]
    title: str | None = None
    song_ref: str | None = None
    is_completed: bool = False


class MemberRequest(BaseModel):
    nickname: str


class SlotCompletedRequest(BaseModel):
    completed: bool


class RequestSongRequest(BaseModel):
    title: str


class ActionResult(BaseModel):
    ok: bool = True
    message: str = ""


# ──────────────────────────────────────────────────────────────────────
# Gesture Types
# ──────────────────────────────────────────────────────────────────────


class PointModel(BaseModel):
    x: float
    y: float


class SwipeRequest(BaseModel):
    start: PointModel
    end: PointModel
    is_current_card: bool = True


class SwipeResponse(BaseModel):
    action: Literal["complete", "delete", "next", "previous", "none"]


class DropIndexRequest(BaseModel):
    x: float
    y: float
    area_left: float
    area_top: float
    area_width: float = Field(gt=0)
    area_height: float = Field(ge=0)
    count: int = Field(ge=0)


class DropIndexResponse(BaseModel):
    insert_index: int


class TargetIndexRequest(BaseModel):
    delta_position: float
    item_height: float = Field(gt=0)
    source_index: int = Field(ge=0)
    bound_count: int = Field(gt=0)


class TargetIndexResponse(BaseModel):
    target_index: int
