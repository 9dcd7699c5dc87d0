"""
ArangoDB connection for stagelist.

python-arango pools HTTP connections per client. The handle is used from the
gateway's worker threads (asyncio.to_thread), one client per process.

Every AQL call goes through SafeDatabase.aql so bind vars are checked at one
place: setlist documents arrive here already encoded by unit_codec_comp, and
anything that is not plain JSON is refused with the path where it was found.
"""

from __future__ import annotations

import logging
from typing import Any

from arango import ArangoClient
from arango.aql import AQL
from arango.collection import StandardCollection
from arango.database import StandardDatabase
from arango.exceptions import ArangoError

from stagelist.helpers.dto.config_dto import ArangoSettings
from stagelist.helpers.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_SCALARS = (str, int, float, bool, type(None))


def _to_bind_value(value: Any, *, _path: str = "$") -> Any:
    """
    Normalize a bind var tree to JSON values.

    Tuples become lists and sets become sorted lists (participant and role
    sets). DTOs are refused: encode them with unit_codec_comp first.

    Raises:
        TypeError: Naming the offending path, e.g. "$.fields.songs[0]"
    """
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, dict):
        return {str(k): _to_bind_value(v, _path=f"{_path}.{k}") for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_to_bind_value(v, _path=f"{_path}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, set | frozenset):
        return [_to_bind_value(v, _path=f"{_path}[{i}]") for i, v in enumerate(sorted(value))]
    raise TypeError(
        f"{type(value).__name__} at {_path} cannot be sent to ArangoDB; "
        f"encode it with unit_codec_comp before it reaches persistence"
    )


class _CheckedAQL:
    """AQL facade whose execute() normalizes bind vars; everything else is the driver's."""

    def __init__(self, aql: AQL) -> None:
        self._aql = aql

    def execute(self, query: str, bind_vars: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        return self._aql.execute(query, bind_vars=_to_bind_value(bind_vars or {}), **kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._aql, name)


class SafeDatabase:
    """StandardDatabase proxy with a checked `.aql`."""

    def __init__(self, db: StandardDatabase) -> None:
        self._db = db
        self._aql = _CheckedAQL(db.aql)

    @property
    def aql(self) -> _CheckedAQL:
        return self._aql

    def collection(self, name: str) -> StandardCollection:
        return self._db.collection(name)  # type: ignore[return-value]

    def __getattr__(self, name: str) -> Any:
        return getattr(self._db, name)


# What the *_aql operations classes and the schema bootstrap accept
DatabaseLike = StandardDatabase | SafeDatabase


def create_arango_client(settings: ArangoSettings) -> SafeDatabase:
    """
    Connect to the configured database and verify the credentials.

    The database and its user must already exist; collections and indexes
    are created afterwards by arango_bootstrap_comp.ensure_schema().

    Raises:
        PersistenceError: If the server is unreachable or refuses the login
    """
    client = ArangoClient(hosts=settings.hosts)
    try:
        db = client.db(settings.db_name, username=settings.username, password=settings.password, verify=True)
    except ArangoError as e:
        logger.error(f"[arango_client] Cannot open {settings.db_name} at {settings.hosts}: {e}")
        raise PersistenceError(f"Cannot connect to ArangoDB database '{settings.db_name}'") from e
    logger.info(f"[arango_client] Connected to {settings.db_name} at {settings.hosts}")
    return SafeDatabase(db)
