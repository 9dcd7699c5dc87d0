"""Unit lifecycle - pooled -> placed -> completed, plus deletion.

All functions are pure transforms: they take an aggregate and return a new
one. Whenever a placed unit is added, removed or archived the result is
renumbered through the queue composer inside the same transform, so callers
always persist a gap-free order.
"""

from __future__ import annotations

import dataclasses
import logging
import uuid
from collections.abc import Iterable

from stagelist.components.setlist.queue_composer_comp import compose, recompose
from stagelist.components.setlist.unit_model_comp import (
    can_act_on,
    derive_all_participants,
    is_placed,
    make_empty_slot,
    normalize_nicknames,
    unit_key,
    unit_label,
)
from stagelist.helpers.dto.actor_dto import DEFAULT_ELEVATED_ROLES, Actor
from stagelist.helpers.dto.setlist_dto import (
    CatalogSong,
    FlexibleCard,
    PerformanceUnit,
    RequestCard,
    SetList,
    SongUnit,
)
from stagelist.helpers.exceptions import Forbidden, NotFound, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SLOTS = 10

_ACTIVE_ARRAYS = ("songs", "flexible_cards", "request_song_cards")
_ARCHIVE_FOR = {
    "songs": "completed_songs",
    "flexible_cards": "completed_flexible_cards",
    "request_song_cards": "completed_request_song_cards",
}


def new_unit_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def locate_unit(setlist: SetList, key: str) -> tuple[str, int, PerformanceUnit]:
    """
    Find an active (pooled or placed) unit by key.

    Returns:
        (array attribute name, index in that array, unit)

    Raises:
        NotFound: If the unit is not in any active array
    """
    for attr in _ACTIVE_ARRAYS:
        for index, unit in enumerate(getattr(setlist, attr)):
            if unit_key(unit) == key:
                return attr, index, unit
    for attr in _ARCHIVE_FOR.values():
        if any(unit_key(u) == key for u in getattr(setlist, attr)):
            raise NotFound(f"Unit {key} is already completed")
    raise NotFound(f"Unit {key} not found in setlist {setlist.id}")


def ensure_can_act(
    actor: Actor,
    unit: PerformanceUnit,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> None:
    if not can_act_on(actor, unit, elevated_roles):
        raise Forbidden(f"{actor.nickname} may not modify {unit_label(unit)}")


def _without(setlist: SetList, attr: str, index: int) -> SetList:
    remaining = list(getattr(setlist, attr))
    del remaining[index]
    return dataclasses.replace(setlist, **{attr: remaining})


def _with_appended(setlist: SetList, attr: str, unit: PerformanceUnit) -> SetList:
    return dataclasses.replace(setlist, **{attr: [*getattr(setlist, attr), unit]})


def _replaced(setlist: SetList, attr: str, index: int, unit: PerformanceUnit) -> SetList:
    items = list(getattr(setlist, attr))
    items[index] = unit
    return dataclasses.replace(setlist, **{attr: items})


def _with_pooled(setlist: SetList, attr: str, unit: PerformanceUnit) -> SetList:
    """Insert a pooled unit after the pooled block, ahead of the placed units of its kind."""
    items = list(getattr(setlist, attr))
    position = next((i for i, existing in enumerate(items) if is_placed(existing)), len(items))
    items.insert(position, unit)
    return dataclasses.replace(setlist, **{attr: items})


# ----------------------------------------------------------------------
# Creation
# ----------------------------------------------------------------------


def new_flexible_card(owner_nickname: str, total_slots: int, max_slots: int = DEFAULT_MAX_SLOTS) -> FlexibleCard:
    """Build a pooled flexible card with `total_slots` empty slots."""
    owner = (owner_nickname or "").strip()
    if not owner:
        raise ValidationError("A flexible card needs an owner nickname")
    if isinstance(total_slots, bool) or not isinstance(total_slots, int):
        raise ValidationError("total_slots must be an integer")
    if not 1 <= total_slots <= max_slots:
        raise ValidationError(f"total_slots must be between 1 and {max_slots}")
    card_id = new_unit_id("flexible")
    slots = [make_empty_slot(f"{card_id}_slot_{i}") for i in range(total_slots)]
    return FlexibleCard(id=card_id, owner_nickname=owner, total_slots=total_slots, slots=slots, order=-1)


def new_request_card() -> RequestCard:
    return RequestCard(id=new_unit_id("request"), songs=[], order=-1)


def add_pooled_unit(setlist: SetList, unit: FlexibleCard | RequestCard) -> SetList:
    """
    Add a freshly created card to its array as a pooled unit.

    Arrays keep the shape decompose() produces: pooled units first, in
    creation order, then the placed ones.
    """
    pooled = dataclasses.replace(unit, order=-1)
    match pooled:
        case FlexibleCard():
            return _with_pooled(setlist, "flexible_cards", pooled)
        case RequestCard():
            return _with_pooled(setlist, "request_song_cards", pooled)
        case _:
            raise ValidationError(f"Only cards can be pooled, got {type(unit).__name__}")


def add_song(setlist: SetList, song: CatalogSong, insert_at: int | None = None, place: bool = True) -> SetList:
    """
    Add a catalog song as a SongUnit.

    A song that is already active on the setlist is a no-op: the same
    aggregate object is returned so callers can skip the write.
    """
    if not song.id:
        raise ValidationError("Catalog song has no id")
    if any(s.song_id == song.id for s in setlist.songs):
        logger.debug(f"Song {song.id} already on setlist {setlist.id}")
        return setlist
    unit = SongUnit(
        song_id=song.id,
        title=(song.title or "").strip(),
        members=normalize_nicknames(song.members),
        order=-1,
        artist=song.artist,
    )
    with_song = _with_pooled(setlist, "songs", unit)
    if not place:
        return with_song
    return place_unit(with_song, song.id, insert_at)


# ----------------------------------------------------------------------
# Transitions
# ----------------------------------------------------------------------


def place_unit(setlist: SetList, key: str, insert_at: int | None = None) -> SetList:
    """
    pool -> place.

    Without insert_at the unit is appended (order = current placed count);
    with insert_at in [0, N] it is inserted there and the queue renumbered.
    """
    _attr, _index, unit = locate_unit(setlist, key)
    if is_placed(unit):
        raise ValidationError(f"Unit {key} is already placed")
    queue = compose(setlist)
    position = len(queue) if insert_at is None else insert_at
    if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position <= len(queue):
        raise ValidationError(f"Insert index {insert_at} out of bounds for queue of {len(queue)}")
    queue.insert(position, unit)
    return recompose(setlist, queue)


def unplace_unit(setlist: SetList, key: str) -> SetList:
    """place -> pool: take a unit off the queue without deleting it."""
    attr, index, unit = locate_unit(setlist, key)
    if not is_placed(unit):
        raise ValidationError(f"Unit {key} is not placed")
    pooled = _replaced(setlist, attr, index, dataclasses.replace(unit, order=-1))
    return recompose(pooled)


def archive_record(unit: PerformanceUnit, completed_at: int) -> PerformanceUnit:
    """
    Build the completion-archive copy of a unit.

    Flexible cards get allParticipants and totalSlotsCompleted derived from
    their slots at this moment.
    """
    match unit:
        case SongUnit() | RequestCard():
            return dataclasses.replace(unit, order=-1, completed_at=completed_at)
        case FlexibleCard():
            return dataclasses.replace(
                unit,
                order=-1,
                completed_at=completed_at,
                all_participants=derive_all_participants(unit.slots),
                total_slots_completed=len(unit.slots),
            )
        case _:
            raise ValidationError(f"Not a performance unit: {type(unit).__name__}")


def archive_is_consistent(card: FlexibleCard) -> bool:
    """True when an archived card's derived fields match its slots."""
    return card.all_participants == derive_all_participants(card.slots) and card.total_slots_completed == len(
        card.slots
    )


def complete_unit(setlist: SetList, key: str, completed_at: int) -> SetList:
    """
    place -> complete.

    Moves the unit to its completion archive with completed_at set, removes it
    from the active array and renumbers the remaining queue.
    """
    attr, index, unit = locate_unit(setlist, key)
    if not is_placed(unit):
        raise ValidationError(f"Unit {key} is not placed and cannot be completed")
    archived = archive_record(unit, completed_at)
    moved = _with_appended(_without(setlist, attr, index), _ARCHIVE_FOR[attr], archived)
    return recompose(moved)


def delete_unit(setlist: SetList, key: str) -> SetList:
    """place -> delete / pool -> delete. No archive entry is written."""
    attr, index, _unit = locate_unit(setlist, key)
    return recompose(_without(setlist, attr, index))


def replace_unit(setlist: SetList, key: str, unit: PerformanceUnit) -> SetList:
    """Swap an active unit for an edited copy of itself (same key and kind)."""
    attr, index, current = locate_unit(setlist, key)
    if type(current) is not type(unit) or unit_key(unit) != key:
        raise ValidationError("Replacement must keep the unit's kind and key")
    return _replaced(setlist, attr, index, unit)


def reset_statistics(setlist: SetList) -> SetList:
    """Clear every completion archive (statistics start from zero)."""
    return dataclasses.replace(
        setlist,
        completed_songs=[],
        completed_flexible_cards=[],
        completed_request_song_cards=[],
    )
