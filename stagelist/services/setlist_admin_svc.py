"""
SetList admin service - setlist-level lifecycle and stored snapshots.

Owns the system-wide rule that at most one SetList is active: activation
first moves every other active SetList back to draft, then activates the
target.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from stagelist.components.setlist.lifecycle_comp import new_unit_id, reset_statistics
from stagelist.components.setlist.setlist_admin_comp import new_setlist, with_participants, with_status
from stagelist.components.setlist.statistics_comp import build_summary
from stagelist.components.setlist.unit_codec_comp import setlist_to_document
from stagelist.components.setlist.unit_model_comp import is_elevated
from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.config_dto import SetListSettings
from stagelist.helpers.dto.result_dto import OperationResult
from stagelist.helpers.dto.setlist_dto import SetList, StoredSetList
from stagelist.helpers.exceptions import Forbidden, ValidationError
from stagelist.persistence.gateway import SetListGateway
from stagelist.services.aggregate_writer_svc import ARCHIVE_FIELDS, AggregateWriter, run_operation

logger = logging.getLogger(__name__)


class SetListAdminService:
    """Service for creating, activating, completing and archiving setlists."""

    def __init__(self, writer: AggregateWriter, settings: SetListSettings) -> None:
        self._writer = writer
        self._gateway: SetListGateway = writer.gateway
        self.settings = settings

    def _ensure_elevated(self, actor: Actor, action: str) -> None:
        if not is_elevated(actor, self.settings.elevated_roles):
            raise Forbidden(f"{actor.nickname} may not {action}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_setlists(self, status: str | None = None) -> OperationResult[list[SetList]]:
        return await run_operation("SetListAdminService", self._gateway.list_setlists(status))

    async def get_active_setlist(self) -> OperationResult[SetList | None]:
        """The active SetList, or None when no setlist is active."""

        async def _active() -> SetList | None:
            active = await self._gateway.list_setlists("active")
            if len(active) > 1:
                logger.warning(
                    f"[SetListAdminService] {len(active)} active setlists found, using the newest ({active[0].id})"
                )
            return active[0] if active else None

        return await run_operation("SetListAdminService", _active())

    async def list_snapshots(self, original_setlist_id: str | None = None) -> OperationResult[list[StoredSetList]]:
        return await run_operation("SetListAdminService", self._gateway.list_snapshots(original_setlist_id))

    # ------------------------------------------------------------------
    # Setlist lifecycle
    # ------------------------------------------------------------------

    async def create_setlist(self, name: str, participants: Iterable[str], actor: Actor) -> OperationResult[SetList]:
        async def _create() -> SetList:
            self._ensure_elevated(actor, "create setlists")
            setlist = new_setlist(name, participants, actor.nickname, self._writer.clock())
            created = await self._gateway.create(setlist)
            logger.info(f"[SetListAdminService] {actor.nickname} created setlist '{created.name}' ({created.id})")
            return created

        return await run_operation("SetListAdminService", _create())

    async def delete_setlist(self, setlist_id: str, actor: Actor) -> OperationResult[None]:
        async def _delete() -> None:
            self._ensure_elevated(actor, "delete setlists")
            async with self._writer.lock:
                await self._gateway.delete(setlist_id)
            logger.info(f"[SetListAdminService] {actor.nickname} deleted setlist {setlist_id}")

        return await run_operation("SetListAdminService", _delete())

    async def update_participants(
        self, setlist_id: str, participants: Iterable[str], actor: Actor
    ) -> OperationResult[SetList]:
        names = list(participants)

        async def _update() -> SetList:
            self._ensure_elevated(actor, "change participants")
            return await self._writer.mutate(setlist_id, lambda s: with_participants(s, names), ["participants"])

        return await run_operation("SetListAdminService", _update())

    async def activate_setlist(self, setlist_id: str, actor: Actor) -> OperationResult[SetList]:
        """
        Make `setlist_id` the only active setlist.

        Every other active setlist is set back to draft first, then the target
        is activated. Completed setlists cannot be activated.
        """

        async def _activate() -> SetList:
            self._ensure_elevated(actor, "activate setlists")
            target = await self._gateway.get(setlist_id)
            if target.status == "completed":
                raise ValidationError(f"Setlist {setlist_id} is completed and cannot be activated")
            for other in await self._gateway.list_setlists("active"):
                if other.id == setlist_id:
                    continue
                await self._writer.mutate(other.id, _to_draft, ["status"])
                logger.info(f"[SetListAdminService] Deactivated setlist {other.id}")
            activated = await self._writer.mutate(setlist_id, _to_active, ["status"])
            logger.info(f"[SetListAdminService] {actor.nickname} activated setlist {setlist_id}")
            return activated

        return await run_operation("SetListAdminService", _activate())

    async def deactivate_setlist(self, setlist_id: str, actor: Actor) -> OperationResult[SetList]:
        async def _deactivate() -> SetList:
            self._ensure_elevated(actor, "deactivate setlists")
            return await self._writer.mutate(setlist_id, _to_draft, ["status"])

        return await run_operation("SetListAdminService", _deactivate())

    async def complete_setlist(self, setlist_id: str, actor: Actor) -> OperationResult[SetList]:
        """Store a final snapshot, then mark the setlist completed."""

        async def _complete() -> SetList:
            self._ensure_elevated(actor, "complete setlists")
            current = await self._gateway.get(setlist_id)
            if current.status == "completed":
                raise ValidationError(f"Setlist {setlist_id} is already completed")
            await self._store_snapshot(current)
            completed = await self._writer.mutate(setlist_id, lambda s: with_status(s, "completed"), ["status"])
            logger.info(f"[SetListAdminService] {actor.nickname} completed setlist {setlist_id}")
            return completed

        return await run_operation("SetListAdminService", _complete())

    # ------------------------------------------------------------------
    # Snapshots and statistics
    # ------------------------------------------------------------------

    async def save_snapshot(self, setlist_id: str, actor: Actor) -> OperationResult[StoredSetList]:
        """Copy the aggregate and its summary statistics into the stored collection."""

        async def _save() -> StoredSetList:
            self._ensure_elevated(actor, "save setlists")
            return await self._store_snapshot(await self._gateway.get(setlist_id))

        return await run_operation("SetListAdminService", _save())

    async def delete_snapshot(self, snapshot_id: str, actor: Actor) -> OperationResult[None]:
        async def _delete() -> None:
            self._ensure_elevated(actor, "delete stored setlists")
            await self._gateway.delete_snapshot(snapshot_id)

        return await run_operation("SetListAdminService", _delete())

    async def reset_statistics(self, setlist_id: str, actor: Actor) -> OperationResult[SetList]:
        """Clear the three completion archives so statistics start over."""

        async def _reset() -> SetList:
            self._ensure_elevated(actor, "reset statistics")
            reset = await self._writer.mutate(setlist_id, _reset_archives, ARCHIVE_FIELDS)
            logger.info(f"[SetListAdminService] {actor.nickname} reset statistics of setlist {setlist_id}")
            return reset

        return await run_operation("SetListAdminService", _reset())

    async def _store_snapshot(self, setlist: SetList) -> StoredSetList:
        snapshot = StoredSetList(
            id=new_unit_id("stored"),
            name=setlist.name,
            original_setlist_id=setlist.id,
            saved_at=self._writer.clock(),
            summary=build_summary(setlist),
            document=setlist_to_document(setlist),
        )
        stored = await self._gateway.save_snapshot(snapshot)
        logger.info(f"[SetListAdminService] Stored snapshot {stored.id} of setlist {setlist.id}")
        return stored


def _to_draft(setlist: SetList) -> SetList:
    return setlist if setlist.status == "draft" else with_status(setlist, "draft")


def _to_active(setlist: SetList) -> SetList:
    return setlist if setlist.status == "active" else with_status(setlist, "active")


def _reset_archives(setlist: SetList) -> SetList:
    if not (setlist.completed_songs or setlist.completed_flexible_cards or setlist.completed_request_song_cards):
        return setlist
    return reset_statistics(setlist)
