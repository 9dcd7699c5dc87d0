"""ArangoDB schema bootstrap component.

Creates the collections and indexes the setlist gateway relies on.
All operations are idempotent (safe to run on every startup).
"""

import logging

from arango.database import StandardDatabase
from arango.exceptions import CollectionCreateError, IndexCreateError

from stagelist.persistence.arango_client import DatabaseLike

logger = logging.getLogger(__name__)

DOCUMENT_COLLECTIONS = ("setlists", "stored_setlists", "approved_songs")


def ensure_schema(db: DatabaseLike | StandardDatabase) -> None:
    """Ensure all collections and indexes exist.

    Creates missing collections/indexes but does NOT alter existing ones.
    """
    _create_collections(db)
    _create_indexes(db)


def _create_collections(db: DatabaseLike | StandardDatabase) -> None:
    for collection_name in DOCUMENT_COLLECTIONS:
        if not db.has_collection(collection_name):
            try:
                db.create_collection(collection_name)
                logger.info(f"Created collection {collection_name}")
            except CollectionCreateError:
                pass  # Collection already exists (race condition)


def _create_indexes(db: DatabaseLike | StandardDatabase) -> None:
    # activation scans for the currently active setlist
    _ensure_index(db, "setlists", ["status"])
    _ensure_index(db, "setlists", ["createdAt"])
    _ensure_index(db, "stored_setlists", ["originalSetListId"])
    _ensure_index(db, "stored_setlists", ["savedAt"])
    _ensure_index(db, "approved_songs", ["title"])


def _ensure_index(
    db: DatabaseLike | StandardDatabase,
    collection: str,
    fields: list[str],
    unique: bool = False,
    sparse: bool = False,
) -> None:
    """Create a persistent index if it doesn't exist."""
    try:
        db.collection(collection).add_persistent_index(fields=fields, unique=unique, sparse=sparse)
    except IndexCreateError:
        pass  # Index already exists
