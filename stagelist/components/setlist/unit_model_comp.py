"""Performance unit model - predicates, identity and authorization rules.

The three unit kinds form a closed tagged variant (SongUnit | FlexibleCard |
RequestCard). Every consumer discriminates with these predicates or with a
`match` over the dataclass types, never by probing for fields.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeGuard

from stagelist.helpers.dto.actor_dto import DEFAULT_ELEVATED_ROLES
from stagelist.helpers.dto.setlist_dto import (
    FlexibleCard,
    FlexibleSlot,
    PerformanceUnit,
    RequestCard,
    SongUnit,
)
from stagelist.helpers.exceptions import ValidationError

if TYPE_CHECKING:
    from stagelist.helpers.dto.actor_dto import Actor

logger = logging.getLogger(__name__)


def is_song(unit: PerformanceUnit) -> TypeGuard[SongUnit]:
    return isinstance(unit, SongUnit)


def is_flexible_card(unit: PerformanceUnit) -> TypeGuard[FlexibleCard]:
    return isinstance(unit, FlexibleCard)


def is_request_card(unit: PerformanceUnit) -> TypeGuard[RequestCard]:
    return isinstance(unit, RequestCard)


def unit_key(unit: PerformanceUnit) -> str:
    """Stable identity of a unit: song_id for songs, id for cards."""
    match unit:
        case SongUnit(song_id=song_id):
            return song_id
        case FlexibleCard(id=card_id) | RequestCard(id=card_id):
            return card_id
        case _:
            raise ValidationError(f"Not a performance unit: {type(unit).__name__}")


def unit_label(unit: PerformanceUnit) -> str:
    """Short human label used in log lines."""
    match unit:
        case SongUnit(title=title):
            return f"song '{title}'"
        case FlexibleCard(owner_nickname=owner, total_slots=total):
            return f"{owner}'s {total}-slot card"
        case RequestCard(songs=songs):
            return f"request card ({len(songs)} songs)"
        case _:
            raise ValidationError(f"Not a performance unit: {type(unit).__name__}")


def is_placed(unit: PerformanceUnit) -> bool:
    return unit.order >= 0


def is_pooled(unit: PerformanceUnit) -> bool:
    return unit.order < 0


def normalize_nicknames(nicknames: Iterable[str]) -> list[str]:
    """
    Trim nicknames, drop blanks and duplicates, keep first-seen order.

    Used for participant lists and for every member set.
    """
    seen: set[str] = set()
    result: list[str] = []
    for raw in nicknames:
        if not isinstance(raw, str):
            raise ValidationError(f"Nickname must be a string, got {type(raw).__name__}")
        name = raw.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


def derive_all_participants(slots: Iterable[FlexibleSlot]) -> list[str]:
    """Deduplicated, first-seen-ordered union of every slot's members."""
    return normalize_nicknames(member for slot in slots for member in slot.members)


def make_empty_slot(slot_id: str) -> FlexibleSlot:
    return FlexibleSlot(id=slot_id, kind="empty", members=[], is_completed=False)


def is_elevated(actor: Actor, elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES) -> bool:
    return actor.role in set(elevated_roles)


def owner_of(unit: PerformanceUnit) -> str | None:
    """Owning nickname of a unit; only flexible cards have one."""
    match unit:
        case FlexibleCard(owner_nickname=owner):
            return owner
        case SongUnit() | RequestCard():
            return None
        case _:
            raise ValidationError(f"Not a performance unit: {type(unit).__name__}")


def can_act_on(
    actor: Actor,
    unit: PerformanceUnit,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> bool:
    """
    Authorization rule for unit-level mutations.

    Elevated roles may act on any unit; a standard actor only on units it owns.
    """
    if is_elevated(actor, elevated_roles):
        return True
    owner = owner_of(unit)
    return owner is not None and owner == actor.nickname
