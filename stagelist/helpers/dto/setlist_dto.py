"""
Setlist domain DTOs.

Data transfer objects for the performance queue: the SetList aggregate and the
three performance unit kinds stored on it.

Rules:
- Import only stdlib and typing (no stagelist.* imports)
- Pure data structures only (no I/O, no DB access, no business logic)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal

SetListStatus = Literal["draft", "active", "completed"]
SlotKind = Literal["solo", "duet", "chorus", "empty"]
UnitKind = Literal["song", "flexible", "request"]

SLOT_KINDS: tuple[str, ...] = ("solo", "duet", "chorus", "empty")
SETLIST_STATUSES: tuple[str, ...] = ("draft", "active", "completed")


@dataclass
class FlexibleSlot:
    """One sub-assignment inside a flexible card, completable on its own."""

    id: str
    kind: SlotKind = "empty"
    members: list[str] = field(default_factory=list)
    is_completed: bool = False
    song_ref: str | None = None
    title: str | None = None


@dataclass
class RequestSong:
    """A song requested by an audience member on a request card."""

    id: str
    title: str
    requested_by: str


@dataclass
class SongUnit:
    """
    A fixed song placed on the queue.

    Identified by song_id (the catalog id of the approved song).
    """

    kind: ClassVar[UnitKind] = "song"

    song_id: str
    title: str
    members: list[str] = field(default_factory=list)
    order: int = -1
    artist: str | None = None
    completed_at: int | None = None


@dataclass
class FlexibleCard:
    """
    A multi-slot card owned by one nickname.

    all_participants and total_slots_completed are only set on archived cards
    and always equal a re-derivation from slots.
    """

    kind: ClassVar[UnitKind] = "flexible"

    id: str
    owner_nickname: str
    total_slots: int
    slots: list[FlexibleSlot] = field(default_factory=list)
    order: int = -1
    completed_at: int | None = None
    all_participants: list[str] | None = None
    total_slots_completed: int | None = None


@dataclass
class RequestCard:
    """A card collecting request songs."""

    kind: ClassVar[UnitKind] = "request"

    id: str
    songs: list[RequestSong] = field(default_factory=list)
    order: int = -1
    completed_at: int | None = None


PerformanceUnit = SongUnit | FlexibleCard | RequestCard


@dataclass
class SetList:
    """
    SetList aggregate root.

    Holds participants plus the active and completed arrays of every unit kind.
    version is bumped by the store on every successful write.
    """

    id: str
    name: str
    participants: list[str] = field(default_factory=list)
    created_by: str = ""
    created_at: int = 0
    updated_at: int = 0
    status: SetListStatus = "draft"
    version: int = 0
    songs: list[SongUnit] = field(default_factory=list)
    flexible_cards: list[FlexibleCard] = field(default_factory=list)
    request_song_cards: list[RequestCard] = field(default_factory=list)
    completed_songs: list[SongUnit] = field(default_factory=list)
    completed_flexible_cards: list[FlexibleCard] = field(default_factory=list)
    completed_request_song_cards: list[RequestCard] = field(default_factory=list)


@dataclass
class ActiveArrays:
    """Result of decompose(): the three active per-kind arrays."""

    songs: list[SongUnit]
    flexible_cards: list[FlexibleCard]
    request_song_cards: list[RequestCard]


@dataclass
class CatalogSong:
    """An approved song from the external song catalog."""

    id: str
    title: str
    members: list[str] = field(default_factory=list)
    artist: str | None = None


@dataclass
class ParticipantStat:
    """Per-participant statistics row."""

    nickname: str
    appearance_count: int
    completed_count: int
    completion_rate: float
    is_guest: bool = False


@dataclass
class ParticipantSummary:
    """Per-participant counts stored with a snapshot."""

    nickname: str
    song_count: int
    total_songs: int
    total_slots: int


@dataclass
class SetListSummary:
    """Aggregate counts stored with a snapshot."""

    total_songs: int
    total_slots: int
    total_cards: int
    participant_stats: list[ParticipantSummary]


@dataclass
class SetListView:
    """What a subscribed client renders after each realtime push."""

    setlist: SetList
    queue: list[PerformanceUnit]
    stats: list[ParticipantStat]


@dataclass
class StoredSetList:
    """A stored snapshot of a SetList taken on save or completion."""

    id: str
    name: str
    original_setlist_id: str
    saved_at: int
    summary: SetListSummary
    document: dict = field(default_factory=dict)
