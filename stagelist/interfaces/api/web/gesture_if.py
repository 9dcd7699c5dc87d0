"""Gesture endpoints: classify swipes and resolve drop/drag indices for thin clients."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from stagelist.components.setlist.gesture_comp import classify_swipe
from stagelist.components.setlist.reorder_comp import gesture_target_index, insert_index_from_position
from stagelist.components.setlist.unit_model_comp import is_elevated
from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.gesture_dto import GestureThresholds, Point
from stagelist.helpers.exceptions import ValidationError
from stagelist.interfaces.api.auth import get_current_actor
from stagelist.interfaces.api.types.setlist_types import (
    DropIndexRequest,
    DropIndexResponse,
    SwipeRequest,
    SwipeResponse,
    TargetIndexRequest,
    TargetIndexResponse,
)
from stagelist.interfaces.api.web.dependencies import get_gesture_thresholds, get_setlist_service
from stagelist.services.setlist_svc import SetListService

router = APIRouter(prefix="/gestures", tags=["Gestures"])


@router.post("/swipe")
async def classify_swipe_endpoint(
    request: SwipeRequest,
    actor: Actor = Depends(get_current_actor),
    thresholds: GestureThresholds = Depends(get_gesture_thresholds),
    service: SetListService = Depends(get_setlist_service),
) -> SwipeResponse:
    """Complete and delete are only reported for elevated actors."""
    action = classify_swipe(
        Point(request.start.x, request.start.y),
        Point(request.end.x, request.end.y),
        is_elevated=is_elevated(actor, service.elevated_roles),
        is_current_card=request.is_current_card,
        thresholds=thresholds,
    )
    return SwipeResponse(action=action)


@router.post("/drop-index")
async def drop_index(
    request: DropIndexRequest,
    _actor: Actor = Depends(get_current_actor),
    thresholds: GestureThresholds = Depends(get_gesture_thresholds),
) -> DropIndexResponse:
    index = insert_index_from_position(
        request.x,
        request.y,
        request.area_left,
        request.area_top,
        request.area_width,
        request.area_height,
        request.count,
        margin=thresholds.drop_margin,
    )
    return DropIndexResponse(insert_index=index)


@router.post("/target-index")
async def target_index(
    request: TargetIndexRequest,
    _actor: Actor = Depends(get_current_actor),
) -> TargetIndexResponse:
    try:
        index = gesture_target_index(
            request.delta_position, request.item_height, request.source_index, request.bound_count
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return TargetIndexResponse(target_index=index)
