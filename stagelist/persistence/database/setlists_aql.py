"""SetList operations for ArangoDB.

The aggregate's id is used as the document _key. Writes are version-checked:
an UPDATE only matches when the stored version equals the caller's expected
version, and bumps it by one in the same statement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from stagelist.persistence.arango_client import DatabaseLike

if TYPE_CHECKING:
    from arango.cursor import Cursor

_ARANGO_META = ("_key", "_id", "_rev")


def strip_meta(doc: dict[str, Any]) -> dict[str, Any]:
    """Drop Arango system attributes from a stored document."""
    return {k: v for k, v in doc.items() if k not in _ARANGO_META}


class SetListOperations:
    """Operations for the setlists collection."""

    def __init__(self, db: DatabaseLike) -> None:
        self.db = db
        self.collection = db.collection("setlists")

    def insert_setlist(self, document: dict[str, Any]) -> dict[str, Any]:
        """Insert a new aggregate document (version must already be set).

        Returns:
            The stored document without system attributes
        """
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            INSERT MERGE(@doc, { _key: @doc.id }) INTO setlists
            RETURN NEW
            """,
                bind_vars={"doc": document},
            ),
        )
        return strip_meta(next(cursor))

    def get_setlist(self, setlist_id: str) -> dict[str, Any] | None:
        """Get a setlist document by id, or None if not found."""
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            FOR s IN setlists
                FILTER s._key == @key
                LIMIT 1
                RETURN s
            """,
                bind_vars={"key": setlist_id},
            ),
        )
        doc = next(cursor, None)
        return strip_meta(doc) if doc is not None else None

    def update_if_version(
        self,
        setlist_id: str,
        fields: dict[str, Any],
        expected_version: int,
    ) -> dict[str, Any] | None:
        """Apply a partial update only when the stored version matches.

        Arrays in `fields` replace the stored arrays wholesale.

        Returns:
            The updated document, or None when no document matched
            (missing, or version moved on)
        """
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            FOR s IN setlists
                FILTER s._key == @key
                FILTER s.version == @expected_version
                UPDATE s WITH MERGE(@fields, { version: s.version + 1 }) IN setlists
                    OPTIONS { mergeObjects: false }
                RETURN NEW
            """,
                bind_vars={"key": setlist_id, "fields": fields, "expected_version": expected_version},
            ),
        )
        doc = next(cursor, None)
        return strip_meta(doc) if doc is not None else None

    def list_setlists(self, status: str | None = None) -> list[dict[str, Any]]:
        """List setlist documents, newest first, optionally filtered by status."""
        filter_clause = "FILTER s.status == @status" if status is not None else ""
        bind_vars: dict[str, Any] = {"status": status} if status is not None else {}
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                f"""
            FOR s IN setlists
                {filter_clause}
                SORT s.createdAt DESC
                RETURN s
            """,
                bind_vars=bind_vars,
            ),
        )
        return [strip_meta(doc) for doc in cursor]

    def delete_setlist(self, setlist_id: str) -> bool:
        """Delete a setlist. Returns True if a document was removed."""
        cursor = cast(
            "Cursor",
            self.db.aql.execute(
                """
            FOR s IN setlists
                FILTER s._key == @key
                REMOVE s IN setlists
                RETURN OLD._key
            """,
                bind_vars={"key": setlist_id},
            ),
        )
        return next(cursor, None) is not None
