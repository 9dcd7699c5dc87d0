"""Queue composer - one total order over three per-kind unit arrays.

compose() merges the placed units of a SetList into a single ordered queue.
decompose() is its inverse: it renumbers a (possibly reordered) queue to
0..N-1 and splits it back into the three per-kind arrays, keeping pooled units
of each kind in front of the placed ones.

This module is the only writer of `order` for placed units; every mutation
that adds, removes or moves a placed unit goes through decompose() so the
placed orders stay a gap-free permutation of 0..N-1.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

from stagelist.components.setlist.unit_model_comp import is_placed, is_pooled, unit_key
from stagelist.helpers.dto.setlist_dto import (
    ActiveArrays,
    FlexibleCard,
    PerformanceUnit,
    RequestCard,
    SetList,
    SongUnit,
)
from stagelist.helpers.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _check_order(unit: PerformanceUnit) -> None:
    if not isinstance(unit.order, int) or isinstance(unit.order, bool):
        raise ValidationError(f"Unit {unit_key(unit)} has non-integer order {unit.order!r}")


def compose(setlist: SetList) -> list[PerformanceUnit]:
    """
    Merge the placed units of a SetList into one queue.

    Songs, flexible cards and request cards with order >= 0 are concatenated
    in that kind order and stable-sorted by order, so on a (not expected) tie
    the earlier array position wins.

    Args:
        setlist: Aggregate to read

    Returns:
        Placed units in queue order

    Raises:
        ValidationError: If a unit carries a non-integer order
    """
    merged: list[PerformanceUnit] = [
        *setlist.songs,
        *setlist.flexible_cards,
        *setlist.request_song_cards,
    ]
    for unit in merged:
        _check_order(unit)
    placed = [u for u in merged if is_placed(u)]
    return sorted(placed, key=lambda u: u.order)


def decompose(sequence: Sequence[PerformanceUnit], source: SetList | None = None) -> ActiveArrays:
    """
    Renumber a queue and split it back into per-kind arrays.

    Every unit in `sequence` gets order = its index. Pooled units of `source`
    (order < 0) that are not in the sequence are prepended, untouched, to the
    array of their kind. Input units are never mutated; renumbered copies are
    returned.

    Args:
        sequence: Units in the desired queue order
        source: Aggregate whose pooled units should be carried over

    Returns:
        ActiveArrays with songs, flexible_cards and request_song_cards

    Raises:
        ValidationError: If the sequence holds the same unit twice
    """
    keys = [unit_key(u) for u in sequence]
    if len(set(keys)) != len(keys):
        raise ValidationError("Queue contains the same unit more than once")

    songs: list[SongUnit] = []
    flexible_cards: list[FlexibleCard] = []
    request_song_cards: list[RequestCard] = []

    if source is not None:
        in_queue = set(keys)
        songs.extend(u for u in source.songs if is_pooled(u) and u.song_id not in in_queue)
        flexible_cards.extend(u for u in source.flexible_cards if is_pooled(u) and u.id not in in_queue)
        request_song_cards.extend(
            u for u in source.request_song_cards if is_pooled(u) and u.id not in in_queue
        )

    for index, unit in enumerate(sequence):
        match unit:
            case SongUnit():
                songs.append(dataclasses.replace(unit, order=index))
            case FlexibleCard():
                flexible_cards.append(dataclasses.replace(unit, order=index))
            case RequestCard():
                request_song_cards.append(dataclasses.replace(unit, order=index))
            case _:
                raise ValidationError(f"Not a performance unit: {type(unit).__name__}")

    return ActiveArrays(songs=songs, flexible_cards=flexible_cards, request_song_cards=request_song_cards)


def apply_arrays(setlist: SetList, arrays: ActiveArrays) -> SetList:
    """Return a copy of the aggregate with its three active arrays replaced."""
    return dataclasses.replace(
        setlist,
        songs=arrays.songs,
        flexible_cards=arrays.flexible_cards,
        request_song_cards=arrays.request_song_cards,
    )


def recompose(setlist: SetList, sequence: Sequence[PerformanceUnit] | None = None) -> SetList:
    """Renumber the aggregate through compose/decompose (or a given queue)."""
    queue = compose(setlist) if sequence is None else sequence
    return apply_arrays(setlist, decompose(queue, setlist))


def placed_count(setlist: SetList) -> int:
    return len(compose(setlist))


def has_total_order(setlist: SetList) -> bool:
    """True when placed orders are exactly {0, ..., N-1}."""
    orders = [u.order for u in compose(setlist)]
    return sorted(orders) == list(range(len(orders)))


def find_in_queue(queue: Sequence[PerformanceUnit], key: str) -> int:
    """Index of the unit with the given key in a composed queue, or -1."""
    for index, unit in enumerate(queue):
        if unit_key(unit) == key:
            return index
    return -1
