"""
Database operations package.

Contains collection-specific operations classes (one per collection).
Each *_aql.py file owns all AQL for that specific collection.
"""

from .approved_songs_aql import ApprovedSongsOperations
from .setlists_aql import SetListOperations, strip_meta
from .stored_setlists_aql import StoredSetListOperations

__all__ = [
    "ApprovedSongsOperations",
    "SetListOperations",
    "StoredSetListOperations",
    "strip_meta",
]
