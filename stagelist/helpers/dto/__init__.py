"""
DTO package.
"""

from .actor_dto import DEFAULT_ELEVATED_ROLES, Actor
from .config_dto import ArangoSettings, GetInternalInfoResult, SetListSettings
from .gesture_dto import GestureThresholds, Point, ReorderPlan, SwipeAction, SwipeState
from .result_dto import OperationResult
from .setlist_dto import (
    ActiveArrays,
    CatalogSong,
    FlexibleCard,
    FlexibleSlot,
    ParticipantStat,
    ParticipantSummary,
    PerformanceUnit,
    RequestCard,
    RequestSong,
    SetList,
    SetListStatus,
    SetListSummary,
    SetListView,
    SlotKind,
    SongUnit,
    StoredSetList,
    UnitKind,
)

__all__ = [
    "DEFAULT_ELEVATED_ROLES",
    "ActiveArrays",
    "ArangoSettings",
    "Actor",
    "CatalogSong",
    "FlexibleCard",
    "FlexibleSlot",
    "GetInternalInfoResult",
    "GestureThresholds",
    "OperationResult",
    "ParticipantStat",
    "ParticipantSummary",
    "PerformanceUnit",
    "Point",
    "ReorderPlan",
    "RequestCard",
    "RequestSong",
    "SetList",
    "SetListStatus",
    "SetListSummary",
    "SetListSettings",
    "SetListView",
    "SlotKind",
    "SongUnit",
    "StoredSetList",
    "SwipeAction",
    "SwipeState",
    "UnitKind",
]
