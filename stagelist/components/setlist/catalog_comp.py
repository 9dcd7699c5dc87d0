"""Song catalog filter - which approved songs the current participants can sing."""

from __future__ import annotations

from collections.abc import Iterable

from stagelist.helpers.dto.setlist_dto import CatalogSong


def is_available(song: CatalogSong, participants: Iterable[str]) -> bool:
    """A song is available when it has members and every member is a participant."""
    members = [m.strip() for m in song.members if m and m.strip()]
    if not members:
        return False
    present = {p.strip() for p in participants}
    return all(m in present for m in members)


def matches_search(song: CatalogSong, search: str) -> bool:
    """Case-insensitive substring match over the title and member names."""
    needle = search.strip().casefold()
    if not needle:
        return True
    if needle in song.title.casefold():
        return True
    return any(needle in member.casefold() for member in song.members)


def available_songs(
    catalog: Iterable[CatalogSong],
    participants: Iterable[str],
    search: str = "",
) -> list[CatalogSong]:
    """
    Filter the approved-song catalog for a setlist.

    Args:
        catalog: Approved songs
        participants: Setlist participant nicknames
        search: Optional search text

    Returns:
        Available songs in catalog order
    """
    present = list(participants)
    return [s for s in catalog if is_available(s, present) and matches_search(s, search)]
