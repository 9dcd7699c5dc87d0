"""Setlist endpoints: setlist administration, queue mutations, slots and request songs."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.gesture_dto import ReorderPlan
from stagelist.interfaces.api.auth import get_current_actor
from stagelist.interfaces.api.errors import unwrap_or_raise
from stagelist.interfaces.api.types.setlist_types import (
    ActionResult,
    AddSongRequest,
    CatalogSongResponse,
    CreateFlexibleCardRequest,
    CreateSetListRequest,
    MemberRequest,
    ParticipantsRequest,
    ParticipantStatResponse,
    PlaceUnitRequest,
    ReorderRequest,
    RequestSongRequest,
    SetListResponse,
    SetListViewResponse,
    SlotCompletedRequest,
    SlotPatchRequest,
    StoredSetListResponse,
    UnitResponse,
)
from stagelist.interfaces.api.web.dependencies import get_setlist_admin_service, get_setlist_service
from stagelist.services.setlist_admin_svc import SetListAdminService
from stagelist.services.setlist_svc import SetListService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/setlists", tags=["Setlists"])


# ──────────────────────────────────────────────────────────────────────
# Setlist Administration
# ──────────────────────────────────────────────────────────────────────


@router.get("")
async def list_setlists(
    status_filter: str | None = Query(default=None, alias="status"),
    _actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> list[SetListResponse]:
    setlists = unwrap_or_raise(await admin.list_setlists(status_filter))
    return [SetListResponse.from_dto(s) for s in setlists]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_setlist(
    request: CreateSetListRequest,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await admin.create_setlist(request.name, request.participants, actor)))


@router.get("/active")
async def get_active_setlist(
    _actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> SetListResponse | None:
    active = unwrap_or_raise(await admin.get_active_setlist())
    return SetListResponse.from_dto(active) if active is not None else None


@router.get("/snapshots")
async def list_snapshots(
    original_setlist_id: str | None = None,
    _actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> list[StoredSetListResponse]:
    snapshots = unwrap_or_raise(await admin.list_snapshots(original_setlist_id))
    return [StoredSetListResponse.from_dto(s) for s in snapshots]


@router.delete("/snapshots/{snapshot_id}")
async def delete_snapshot(
    snapshot_id: str,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> ActionResult:
    unwrap_or_raise(await admin.delete_snapshot(snapshot_id, actor))
    return ActionResult(message=f"Stored setlist {snapshot_id} deleted")


@router.get("/{setlist_id}")
async def get_setlist_view(
    setlist_id: str,
    _actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListViewResponse:
    """Aggregate, composed queue and statistics in one response."""
    return SetListViewResponse.from_dto(unwrap_or_raise(await service.get_view(setlist_id)))


@router.delete("/{setlist_id}")
async def delete_setlist(
    setlist_id: str,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> ActionResult:
    unwrap_or_raise(await admin.delete_setlist(setlist_id, actor))
    return ActionResult(message=f"Setlist {setlist_id} deleted")


@router.put("/{setlist_id}/participants")
async def update_participants(
    setlist_id: str,
    request: ParticipantsRequest,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> SetListResponse:
    return SetListResponse.from_dto(
        unwrap_or_raise(await admin.update_participants(setlist_id, request.participants, actor))
    )


@router.post("/{setlist_id}/activate")
async def activate_setlist(
    setlist_id: str,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await admin.activate_setlist(setlist_id, actor)))


@router.post("/{setlist_id}/deactivate")
async def deactivate_setlist(
    setlist_id: str,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await admin.deactivate_setlist(setlist_id, actor)))


@router.post("/{setlist_id}/complete")
async def complete_setlist(
    setlist_id: str,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await admin.complete_setlist(setlist_id, actor)))


@router.post("/{setlist_id}/snapshots", status_code=status.HTTP_201_CREATED)
async def save_snapshot(
    setlist_id: str,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> StoredSetListResponse:
    return StoredSetListResponse.from_dto(unwrap_or_raise(await admin.save_snapshot(setlist_id, actor)))


@router.post("/{setlist_id}/reset-statistics")
async def reset_statistics(
    setlist_id: str,
    actor: Actor = Depends(get_current_actor),
    admin: SetListAdminService = Depends(get_setlist_admin_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await admin.reset_statistics(setlist_id, actor)))


# ──────────────────────────────────────────────────────────────────────
# Queue Reads
# ──────────────────────────────────────────────────────────────────────


@router.get("/{setlist_id}/queue")
async def get_queue(
    setlist_id: str,
    _actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> list[UnitResponse]:
    return [UnitResponse.from_dto(u) for u in unwrap_or_raise(await service.get_queue(setlist_id))]


@router.get("/{setlist_id}/stats")
async def get_statistics(
    setlist_id: str,
    _actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> list[ParticipantStatResponse]:
    return [ParticipantStatResponse.from_dto(s) for s in unwrap_or_raise(await service.get_statistics(setlist_id))]


@router.get("/{setlist_id}/available-songs")
async def get_available_songs(
    setlist_id: str,
    search: str = "",
    _actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> list[CatalogSongResponse]:
    songs = unwrap_or_raise(await service.available_songs(setlist_id, search))
    return [CatalogSongResponse.from_dto(s) for s in songs]


# ──────────────────────────────────────────────────────────────────────
# Queue Mutations
# ──────────────────────────────────────────────────────────────────────


@router.post("/{setlist_id}/songs")
async def add_song(
    setlist_id: str,
    request: AddSongRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    return SetListResponse.from_dto(
        unwrap_or_raise(await service.add_song(setlist_id, request.song_id, actor, request.insert_at))
    )


@router.post("/{setlist_id}/flexible-cards", status_code=status.HTTP_201_CREATED)
async def create_flexible_card(
    setlist_id: str,
    request: CreateFlexibleCardRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> UnitResponse:
    card = unwrap_or_raise(
        await service.create_flexible_card(setlist_id, actor, request.total_slots, request.owner_nickname)
    )
    return UnitResponse.from_dto(card)


@router.post("/{setlist_id}/request-cards", status_code=status.HTTP_201_CREATED)
async def create_request_card(
    setlist_id: str,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> UnitResponse:
    return UnitResponse.from_dto(unwrap_or_raise(await service.create_request_card(setlist_id, actor)))


@router.post("/{setlist_id}/reorder")
async def reorder(
    setlist_id: str,
    request: ReorderRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    """
    Commit a released drag.

    With unit_key the move is applied to that unit wherever it now sits;
    without it the stored queue is planned by index.
    """
    if request.unit_key is None:
        result = await service.move_unit(setlist_id, request.source_index, request.target_index, actor)
    else:
        plan = None
        if request.source_index != request.target_index:
            plan = ReorderPlan(request.unit_key, request.source_index, request.target_index)
        result = await service.reorder(setlist_id, plan, actor)
    return SetListResponse.from_dto(unwrap_or_raise(result))


@router.post("/{setlist_id}/units/{unit_key}/place")
async def place_unit(
    setlist_id: str,
    unit_key: str,
    request: PlaceUnitRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    return SetListResponse.from_dto(
        unwrap_or_raise(await service.place_unit(setlist_id, unit_key, actor, request.insert_at))
    )


@router.post("/{setlist_id}/units/{unit_key}/unplace")
async def unplace_unit(
    setlist_id: str,
    unit_key: str,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await service.unplace_unit(setlist_id, unit_key, actor)))


@router.post("/{setlist_id}/units/{unit_key}/complete")
async def complete_unit(
    setlist_id: str,
    unit_key: str,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await service.complete_unit(setlist_id, unit_key, actor)))


@router.delete("/{setlist_id}/units/{unit_key}")
async def delete_unit(
    setlist_id: str,
    unit_key: str,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await service.delete_unit(setlist_id, unit_key, actor)))


# ──────────────────────────────────────────────────────────────────────
# Flexible Card Slots
# ──────────────────────────────────────────────────────────────────────


@router.put("/{setlist_id}/cards/{card_id}/slots/{slot_index}")
async def update_slot(
    setlist_id: str,
    card_id: str,
    slot_index: int,
    request: SlotPatchRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    result = await service.update_slot(setlist_id, card_id, slot_index, request.model_dump(), actor)
    return SetListResponse.from_dto(unwrap_or_raise(result))


@router.post("/{setlist_id}/cards/{card_id}/slots/{slot_index}/members")
async def add_slot_member(
    setlist_id: str,
    card_id: str,
    slot_index: int,
    request: MemberRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    result = await service.add_member(setlist_id, card_id, slot_index, request.nickname, actor)
    return SetListResponse.from_dto(unwrap_or_raise(result))


@router.delete("/{setlist_id}/cards/{card_id}/slots/{slot_index}/members/{nickname}")
async def remove_slot_member(
    setlist_id: str,
    card_id: str,
    slot_index: int,
    nickname: str,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    result = await service.remove_member(setlist_id, card_id, slot_index, nickname, actor)
    return SetListResponse.from_dto(unwrap_or_raise(result))


@router.post("/{setlist_id}/cards/{card_id}/slots/{slot_index}/reset")
async def reset_slot(
    setlist_id: str,
    card_id: str,
    slot_index: int,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    return SetListResponse.from_dto(unwrap_or_raise(await service.reset_slot(setlist_id, card_id, slot_index, actor)))


@router.put("/{setlist_id}/cards/{card_id}/slots/{slot_index}/completed")
async def set_slot_completed(
    setlist_id: str,
    card_id: str,
    slot_index: int,
    request: SlotCompletedRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    result = await service.set_slot_completed(setlist_id, card_id, slot_index, request.completed, actor)
    return SetListResponse.from_dto(unwrap_or_raise(result))


# ──────────────────────────────────────────────────────────────────────
# Request Songs
# ──────────────────────────────────────────────────────────────────────


@router.post("/{setlist_id}/request-cards/{card_id}/songs")
async def add_request_song(
    setlist_id: str,
    card_id: str,
    request: RequestSongRequest,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    result = await service.add_request_song(setlist_id, card_id, request.title, actor)
    return SetListResponse.from_dto(unwrap_or_raise(result))


@router.delete("/{setlist_id}/request-cards/{card_id}/songs/{song_id}")
async def remove_request_song(
    setlist_id: str,
    card_id: str,
    song_id: str,
    actor: Actor = Depends(get_current_actor),
    service: SetListService = Depends(get_setlist_service),
) -> SetListResponse:
    result = await service.remove_request_song(setlist_id, card_id, song_id, actor)
    return SetListResponse.from_dto(unwrap_or_raise(result))
