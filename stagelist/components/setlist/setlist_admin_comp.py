"""SetList-level rules: creation, participants and status transitions."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable

from stagelist.components.setlist.lifecycle_comp import new_unit_id
from stagelist.components.setlist.unit_model_comp import normalize_nicknames
from stagelist.helpers.dto.setlist_dto import SetList, SetListStatus
from stagelist.helpers.exceptions import ValidationError

logger = logging.getLogger(__name__)

# status -> statuses reachable from it
_TRANSITIONS: dict[str, frozenset[str]] = {
    "draft": frozenset({"active", "completed"}),
    "active": frozenset({"draft", "completed"}),
    "completed": frozenset(),
}


def normalize_participants(participants: Iterable[str]) -> list[str]:
    """Trim, drop blanks and duplicates; at least one participant must remain."""
    if isinstance(participants, str):
        raise ValidationError("participants must be a list of nicknames")
    result = normalize_nicknames(participants)
    if not result:
        raise ValidationError("A setlist needs at least one participant")
    return result


def new_setlist(name: str, participants: Iterable[str], created_by: str, now: int) -> SetList:
    """Build a fresh draft aggregate with empty unit arrays."""
    clean_name = name.strip() if isinstance(name, str) else ""
    if not clean_name:
        raise ValidationError("Setlist name is required")
    return SetList(
        id=new_unit_id("setlist"),
        name=clean_name,
        participants=normalize_participants(participants),
        created_by=created_by,
        created_at=now,
        updated_at=now,
        status="draft",
        version=0,
    )


def with_participants(setlist: SetList, participants: Iterable[str]) -> SetList:
    return dataclasses.replace(setlist, participants=normalize_participants(participants))


def can_transition(current: str, target: str) -> bool:
    return target == current or target in _TRANSITIONS.get(current, frozenset())


def with_status(setlist: SetList, status: SetListStatus) -> SetList:
    """
    Move a setlist to a new status.

    Raises:
        ValidationError: For transitions out of `completed` or unknown statuses
    """
    if status not in _TRANSITIONS:
        raise ValidationError(f"Unknown setlist status: {status}")
    if not can_transition(setlist.status, status):
        raise ValidationError(f"Setlist {setlist.id} cannot go from {setlist.status} to {status}")
    return dataclasses.replace(setlist, status=status)


def ensure_mutable(setlist: SetList) -> None:
    """Completed setlists are frozen; their queue can no longer change."""
    if setlist.status == "completed":
        raise ValidationError(f"Setlist {setlist.id} is completed")
