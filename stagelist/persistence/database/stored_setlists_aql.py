"""Stored setlist snapshot operations for ArangoDB."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from stagelist.persistence.arango_client import DatabaseLike
from stagelist.persistence.database.setlists_aql import strip_meta

if TYPE_CHECKING:
    from arango.cursor import Cursor


class StoredSetListOperations:
    """Operations for the stored_setlists collection."""

    def __init__(self, db: DatabaseLike) -> None:
        self.db = db
        self.collection = db.collection("stored_setlists")

    def insert_snapshot(self, document: dict[str, Any]) -> dict[str, Any]:
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            INSERT MERGE(@doc, { _key: @doc.id }) INTO stored_setlists
            RETURN NEW
            """,
                bind_vars={"doc": document},
            ),
        )
        return strip_meta(next(cursor))

    def list_snapshots(self, original_setlist_id: str | None = None) -> list[dict[str, Any]]:
        """List snapshots newest first, optionally only those of one setlist."""
        filter_clause = "FILTER s.originalSetListId == @original" if original_setlist_id is not None else ""
        bind_vars: dict[str, Any] = {"original": original_setlist_id} if original_setlist_id is not None else {}
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                f"""
            FOR s IN stored_setlists
                {filter_clause}
                SORT s.savedAt DESC
                RETURN s
            """,
                bind_vars=bind_vars,
            ),
        )
        return [strip_meta(doc) for doc in cursor]

    def delete_snapshot(self, snapshot_id: str) -> bool:
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            FOR s IN stored_setlists
                FILTER s._key == @key
                REMOVE s IN stored_setlists
                RETURN OLD._key
            """,
                bind_vars={"key": snapshot_id},
            ),
        )
        return next(cursor, None) is not None
