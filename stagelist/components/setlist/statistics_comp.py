"""Statistics aggregator - per-participant appearance and completion counts.

Songs count once per member. Flexible cards count once per slot member (a
nickname in three slots of one card appears three times). Request cards carry
no membership and contribute nothing.
"""

from __future__ import annotations

import locale
import logging
from collections.abc import Iterable

from stagelist.components.setlist.unit_model_comp import is_placed
from stagelist.helpers.dto.setlist_dto import (
    FlexibleCard,
    ParticipantStat,
    ParticipantSummary,
    SetList,
    SetListSummary,
    SongUnit,
)

logger = logging.getLogger(__name__)


class _Tally:
    __slots__ = ("appearances", "completed")

    def __init__(self) -> None:
        self.appearances = 0
        self.completed = 0


def _rank_key(stat: ParticipantStat) -> tuple[int, str, str]:
    # strxfrm follows the process LC_COLLATE (set by start.configure_collation); raw nickname breaks ties
    return (-stat.completed_count, locale.strxfrm(stat.nickname), stat.nickname)


def _count_song(tallies: dict[str, _Tally], song: SongUnit, completed: bool) -> None:
    for member in set(song.members):
        tally = tallies.setdefault(member, _Tally())
        tally.appearances += 1
        if completed:
            tally.completed += 1


def _count_card(tallies: dict[str, _Tally], card: FlexibleCard, archived: bool) -> None:
    for slot in card.slots:
        done = archived or slot.is_completed
        for member in set(slot.members):
            tally = tallies.setdefault(member, _Tally())
            tally.appearances += 1
            if done:
                tally.completed += 1


def compute_stats(setlist: SetList, known_nicknames: Iterable[str] | None = None) -> list[ParticipantStat]:
    """
    Ranked participant statistics over placed and completed units.

    Pooled units (order < 0) are not on the queue yet and count for nobody.

    A slot counts as completed when its card is archived or the slot itself is
    marked completed. Every setlist participant gets a row, including those
    with no appearances (rate 0.0). Nicknames that are neither participants nor
    in `known_nicknames` are tagged as guests.

    Args:
        setlist: Aggregate to aggregate over
        known_nicknames: Registered member nicknames, if the caller knows them

    Returns:
        Rows sorted by completed count descending, then nickname ascending
    """
    tallies: dict[str, _Tally] = {name: _Tally() for name in setlist.participants}

    for song in filter(is_placed, setlist.songs):
        _count_song(tallies, song, completed=False)
    for song in setlist.completed_songs:
        _count_song(tallies, song, completed=True)
    for card in filter(is_placed, setlist.flexible_cards):
        _count_card(tallies, card, archived=False)
    for card in setlist.completed_flexible_cards:
        _count_card(tallies, card, archived=True)

    known = set(setlist.participants)
    if known_nicknames is not None:
        known.update(known_nicknames)

    stats = [
        ParticipantStat(
            nickname=nickname,
            appearance_count=tally.appearances,
            completed_count=tally.completed,
            completion_rate=tally.completed / tally.appearances if tally.appearances else 0.0,
            is_guest=nickname not in known,
        )
        for nickname, tally in tallies.items()
    ]
    stats.sort(key=_rank_key)
    return stats


def build_summary(setlist: SetList) -> SetListSummary:
    """
    Snapshot summary: song and slot totals plus per-participant counts.

    Only placed or completed units count; pooled units were never performed.
    """
    all_songs = [*filter(is_placed, setlist.songs), *setlist.completed_songs]
    cards = [*filter(is_placed, setlist.flexible_cards), *setlist.completed_flexible_cards]
    total_slots = sum(c.total_slots for c in cards)

    participant_stats = []
    for nickname in setlist.participants:
        song_count = sum(1 for s in all_songs if nickname in s.members)
        slot_count = sum(1 for c in cards for slot in c.slots if nickname in slot.members)
        participant_stats.append(
            ParticipantSummary(
                nickname=nickname,
                song_count=song_count + slot_count,
                total_songs=song_count,
                total_slots=slot_count,
            )
        )

    return SetListSummary(
        total_songs=len(all_songs) + total_slots,
        total_slots=total_slots,
        total_cards=len(cards),
        participant_stats=participant_stats,
    )
