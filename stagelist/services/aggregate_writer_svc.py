"""
Aggregate writer - read / transform / write with optimistic concurrency.

Every mutation of a SetList goes through AggregateWriter.mutate():
  1) read the aggregate
  2) apply a pure transform
  3) write the changed fields back with the version that was read
On ConflictError (another client wrote in between) the whole cycle is
repeated on a fresh read, up to max_conflict_retries extra attempts.

One writer instance holds one asyncio.Lock, so all services sharing a
writer serialize their mutations within this process.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from stagelist.components.setlist.unit_codec_comp import encode_fields
from stagelist.helpers.dto.result_dto import OperationResult
from stagelist.helpers.dto.setlist_dto import SetList
from stagelist.helpers.exceptions import ConflictError, PersistenceError, SetListError
from stagelist.helpers.time_helper import Clock, now_ms
from stagelist.persistence.gateway import SetListGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")
Transform = Callable[[SetList], SetList]

ACTIVE_FIELDS: tuple[str, ...] = ("songs", "flexible_cards", "request_song_cards")
ARCHIVE_FIELDS: tuple[str, ...] = ("completed_songs", "completed_flexible_cards", "completed_request_song_cards")
UNIT_FIELDS: tuple[str, ...] = ACTIVE_FIELDS + ARCHIVE_FIELDS


class AggregateWriter:
    """Serialized, version-checked read-modify-write of SetList aggregates."""

    def __init__(
        self,
        gateway: SetListGateway,
        max_conflict_retries: int = 3,
        clock: Clock = now_ms,
    ) -> None:
        self.gateway = gateway
        self.max_conflict_retries = max_conflict_retries
        self.clock = clock
        self.lock = asyncio.Lock()

    async def mutate(self, setlist_id: str, transform: Transform, fields: Iterable[str]) -> SetList:
        """
        Apply `transform` to the stored aggregate and persist `fields`.

        If the transform returns the aggregate it was given (identity), the
        mutation is a no-op and nothing is written.

        Args:
            setlist_id: Aggregate to mutate
            transform: Pure function producing the new aggregate; may raise SetListError
            fields: SetList attribute names to write (updated_at is always added)

        Returns:
            The aggregate as stored after the write (or as read, for a no-op)

        Raises:
            SetListError: From the transform or the gateway; ConflictError once retries run out
        """
        attrs = [*fields, "updated_at"]
        attempts = self.max_conflict_retries + 1
        async with self.lock:
            for attempt in range(1, attempts + 1):
                current = await self.gateway.get(setlist_id)
                updated = transform(current)
                if updated is current:
                    logger.debug(f"[AggregateWriter] No change for setlist {setlist_id}")
                    return current
                updated = dataclasses.replace(updated, updated_at=self.clock())
                try:
                    return await self.gateway.put(setlist_id, encode_fields(updated, attrs), current.version)
                except ConflictError:
                    if attempt == attempts:
                        logger.warning(
                            f"[AggregateWriter] Giving up on setlist {setlist_id} after {attempts} conflicting writes"
                        )
                        raise
                    logger.warning(
                        f"[AggregateWriter] Version conflict on setlist {setlist_id} "
                        f"(attempt {attempt}/{attempts}), retrying on fresh read"
                    )
        raise ConflictError(f"Setlist {setlist_id} could not be written")  # pragma: no cover


async def run_operation(name: str, operation: Awaitable[T]) -> OperationResult[T]:
    """
    Await a service operation and fold its outcome into an OperationResult.

    SetListError subclasses become failures as-is; anything else escaping
    from a store adapter is logged and reported as PersistenceError.
    """
    try:
        value = await operation
    except SetListError as e:
        logger.info(f"[{name}] {e.kind}: {e}")
        return OperationResult.failure(e)
    except Exception as e:
        logger.exception(f"[{name}] Unexpected failure")
        return OperationResult.failure(PersistenceError(f"{name} failed: {e}"))
    return OperationResult.success(value)
