"""Slot editor - flexible-card slot edits and request-song edits.

Every function takes the acting Actor and checks authorization before
building anything, so a Forbidden never comes with a partial edit. Edits
return a new card; when nothing would change the input card itself is
returned so callers can skip the write.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from stagelist.components.setlist.lifecycle_comp import ensure_can_act, new_unit_id
from stagelist.components.setlist.unit_model_comp import is_elevated, make_empty_slot, normalize_nicknames
from stagelist.helpers.dto.actor_dto import DEFAULT_ELEVATED_ROLES, Actor
from stagelist.helpers.dto.setlist_dto import SLOT_KINDS, FlexibleCard, FlexibleSlot, RequestCard, RequestSong
from stagelist.helpers.exceptions import Forbidden, ValidationError

logger = logging.getLogger(__name__)

_PATCH_KEYS = frozenset({"kind", "members", "title", "song_ref", "is_completed"})


def _slot_at(card: FlexibleCard, slot_index: int) -> FlexibleSlot:
    if isinstance(slot_index, bool) or not isinstance(slot_index, int):
        raise ValidationError("slot_index must be an integer")
    if not 0 <= slot_index < len(card.slots):
        raise ValidationError(f"Slot {slot_index} out of range for card with {len(card.slots)} slots")
    return card.slots[slot_index]


def _with_slot(card: FlexibleCard, slot_index: int, slot: FlexibleSlot) -> FlexibleCard:
    slots = list(card.slots)
    slots[slot_index] = slot
    return dataclasses.replace(card, slots=slots)


def _clean_nickname(nickname: str) -> str:
    if not isinstance(nickname, str) or not nickname.strip():
        raise ValidationError("Nickname must be a non-empty string")
    return nickname.strip()


def update_slot(
    card: FlexibleCard,
    slot_index: int,
    patch: Mapping[str, Any],
    actor: Actor,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> FlexibleCard:
    """
    Replace one slot wholesale.

    The patch must carry `kind` and `members`; `title`, `song_ref` and
    `is_completed` are optional. The slot id is always preserved, and blank
    optional values are dropped rather than stored.

    Raises:
        Forbidden: If the actor neither owns the card nor holds an elevated role
        ValidationError: On a bad slot index or a malformed patch
    """
    ensure_can_act(actor, card, elevated_roles)
    current = _slot_at(card, slot_index)

    unknown = set(patch) - _PATCH_KEYS
    if unknown:
        raise ValidationError(f"Unknown slot fields: {', '.join(sorted(unknown))}")
    if "kind" not in patch or "members" not in patch:
        raise ValidationError("Slot patch needs 'kind' and 'members'")
    kind = patch["kind"]
    if kind not in SLOT_KINDS:
        raise ValidationError(f"Unknown slot kind: {kind}")
    members = patch["members"]
    if isinstance(members, str) or not isinstance(members, Iterable):
        raise ValidationError("members must be a list of nicknames")

    title = patch.get("title")
    song_ref = patch.get("song_ref")
    slot = FlexibleSlot(
        id=current.id,
        kind=kind,
        members=normalize_nicknames(members),
        is_completed=bool(patch.get("is_completed", False)),
        song_ref=song_ref or None,
        title=title.strip() if isinstance(title, str) and title.strip() else None,
    )
    if slot == current:
        return card
    return _with_slot(card, slot_index, slot)


def add_member(
    card: FlexibleCard,
    slot_index: int,
    nickname: str,
    actor: Actor,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> FlexibleCard:
    """Add a nickname to a slot; already present is a no-op."""
    ensure_can_act(actor, card, elevated_roles)
    slot = _slot_at(card, slot_index)
    name = _clean_nickname(nickname)
    if name in slot.members:
        return card
    return _with_slot(card, slot_index, dataclasses.replace(slot, members=[*slot.members, name]))


def remove_member(
    card: FlexibleCard,
    slot_index: int,
    nickname: str,
    actor: Actor,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> FlexibleCard:
    """Remove a nickname from a slot; absent is a no-op."""
    ensure_can_act(actor, card, elevated_roles)
    slot = _slot_at(card, slot_index)
    name = _clean_nickname(nickname)
    if name not in slot.members:
        return card
    return _with_slot(card, slot_index, dataclasses.replace(slot, members=[m for m in slot.members if m != name]))


def reset_slot(
    card: FlexibleCard,
    slot_index: int,
    actor: Actor,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> FlexibleCard:
    """Force a slot back to empty, keeping its id."""
    ensure_can_act(actor, card, elevated_roles)
    slot = _slot_at(card, slot_index)
    empty = make_empty_slot(slot.id)
    if slot == empty:
        return card
    return _with_slot(card, slot_index, empty)


def set_slot_completed(
    card: FlexibleCard,
    slot_index: int,
    completed: bool,
    actor: Actor,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> FlexibleCard:
    """Mark a single slot as performed (or not) while the card stays on the queue."""
    ensure_can_act(actor, card, elevated_roles)
    slot = _slot_at(card, slot_index)
    if slot.is_completed == completed:
        return card
    return _with_slot(card, slot_index, dataclasses.replace(slot, is_completed=completed))


# ----------------------------------------------------------------------
# Request songs
# ----------------------------------------------------------------------


def add_request_song(card: RequestCard, title: str, actor: Actor) -> RequestCard:
    """Anyone may request a song; the actor is recorded as requester."""
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Request song title is required")
    song = RequestSong(id=new_unit_id("req"), title=title.strip(), requested_by=actor.nickname)
    return dataclasses.replace(card, songs=[*card.songs, song])


def remove_request_song(
    card: RequestCard,
    song_id: str,
    actor: Actor,
    elevated_roles: Iterable[str] = DEFAULT_ELEVATED_ROLES,
) -> RequestCard:
    """
    Remove a requested song.

    Only the requester or an elevated actor may remove it. A song id that is
    not on the card is a no-op.
    """
    target = next((s for s in card.songs if s.id == song_id), None)
    if target is None:
        return card
    if target.requested_by != actor.nickname and not is_elevated(actor, elevated_roles):
        raise Forbidden(f"{actor.nickname} may not remove '{target.title}' requested by {target.requested_by}")
    return dataclasses.replace(card, songs=[s for s in card.songs if s.id != song_id])
