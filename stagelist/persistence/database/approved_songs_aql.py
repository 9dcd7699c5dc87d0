"""Approved song catalog operations for ArangoDB (read-only)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from stagelist.persistence.arango_client import DatabaseLike
from stagelist.persistence.database.setlists_aql import strip_meta

if TYPE_CHECKING:
    from arango.cursor import Cursor


class ApprovedSongsOperations:
    """Operations for the approved_songs collection."""

    def __init__(self, db: DatabaseLike) -> None:
        self.db = db
        self.collection = db.collection("approved_songs")

    def list_songs(self) -> list[dict[str, Any]]:
        """All approved songs ordered by title. Each document carries its _key as id."""
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            FOR s IN approved_songs
                SORT s.title ASC
                RETURN MERGE(s, { id: s._key })
            """,
            ),
        )
        return [strip_meta(doc) for doc in cursor]

    def get_song(self, song_id: str) -> dict[str, Any] | None:
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            FOR s IN approved_songs
                FILTER s._key == @key
                LIMIT 1
                RETURN MERGE(s, { id: s._key })
            """,
                bind_vars={"key": song_id},
            ),
        )
        doc = next(cursor, None)
        return strip_meta(doc) if doc is not None else None
