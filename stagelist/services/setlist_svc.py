"""
SetList queue service - orchestrates the performance-queue components.

ARCHITECTURE:
- Reads and writes aggregates only through the AggregateWriter / gateway
- Passes aggregates to pure components (composer, reorder, lifecycle,
  slot editor, statistics) for every decision
- Returns OperationResult to the interface layer; never raises SetListError
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from stagelist.components.setlist.catalog_comp import available_songs
from stagelist.components.setlist.lifecycle_comp import (
    add_pooled_unit,
    add_song,
    complete_unit,
    delete_unit,
    ensure_can_act,
    locate_unit,
    new_flexible_card,
    new_request_card,
    place_unit,
    replace_unit,
    unplace_unit,
)
from stagelist.components.setlist.queue_composer_comp import compose
from stagelist.components.setlist.reorder_comp import apply_reorder, plan_reorder
from stagelist.components.setlist.setlist_admin_comp import ensure_mutable
from stagelist.components.setlist.slot_editor_comp import (
    add_member,
    add_request_song,
    remove_member,
    remove_request_song,
    reset_slot,
    set_slot_completed,
    update_slot,
)
from stagelist.components.setlist.statistics_comp import compute_stats
from stagelist.components.setlist.unit_model_comp import is_elevated, unit_key, unit_label
from stagelist.helpers.dto.actor_dto import Actor
from stagelist.helpers.dto.config_dto import SetListSettings
from stagelist.helpers.dto.gesture_dto import ReorderPlan
from stagelist.helpers.dto.result_dto import OperationResult
from stagelist.helpers.dto.setlist_dto import (
    CatalogSong,
    FlexibleCard,
    ParticipantStat,
    PerformanceUnit,
    RequestCard,
    SetList,
    SetListView,
)
from stagelist.helpers.exceptions import Forbidden, NotFound, ValidationError
from stagelist.persistence.gateway import SetListGateway, SongCatalog, Unsubscribe
from stagelist.services.aggregate_writer_svc import ACTIVE_FIELDS, UNIT_FIELDS, AggregateWriter, run_operation

logger = logging.getLogger(__name__)

ViewListener = Callable[[SetListView], None]


def build_view(setlist: SetList, known_nicknames: Iterable[str] | None = None) -> SetListView:
    """Everything a client renders: the aggregate, its queue and its statistics."""
    return SetListView(setlist=setlist, queue=compose(setlist), stats=compute_stats(setlist, known_nicknames))


class SetListService:
    """
    Service for queue mutations on a single SetList aggregate.

    Every mutation is read → pure transform → whole-array write, serialized
    by the shared AggregateWriter lock and retried on version conflicts.
    """

    def __init__(
        self,
        writer: AggregateWriter,
        settings: SetListSettings,
        catalog: SongCatalog | None = None,
    ) -> None:
        """
        Initialize setlist service.

        Args:
            writer: Shared aggregate writer (owns the gateway and the mutation lock)
            settings: Retry, slot and role settings
            catalog: Approved-song catalog; required for song additions by id
        """
        self._writer = writer
        self._gateway: SetListGateway = writer.gateway
        self.settings = settings
        self._catalog = catalog

    @property
    def elevated_roles(self) -> frozenset[str]:
        return self.settings.elevated_roles

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_setlist(self, setlist_id: str) -> OperationResult[SetList]:
        return await run_operation("SetListService", self._gateway.get(setlist_id))

    async def get_queue(self, setlist_id: str) -> OperationResult[list[PerformanceUnit]]:
        async def _queue() -> list[PerformanceUnit]:
            return compose(await self._gateway.get(setlist_id))

        return await run_operation("SetListService", _queue())

    async def get_statistics(
        self, setlist_id: str, known_nicknames: Iterable[str] | None = None
    ) -> OperationResult[list[ParticipantStat]]:
        async def _stats() -> list[ParticipantStat]:
            return compute_stats(await self._gateway.get(setlist_id), known_nicknames)

        return await run_operation("SetListService", _stats())

    async def get_view(self, setlist_id: str, known_nicknames: Iterable[str] | None = None) -> OperationResult[SetListView]:
        async def _view() -> SetListView:
            return build_view(await self._gateway.get(setlist_id), known_nicknames)

        return await run_operation("SetListService", _view())

    async def available_songs(self, setlist_id: str, search: str = "") -> OperationResult[list[CatalogSong]]:
        """Approved songs whose every member is a participant of the setlist."""

        async def _available() -> list[CatalogSong]:
            setlist = await self._gateway.get(setlist_id)
            catalog = await self._require_catalog().list_songs()
            return available_songs(catalog, setlist.participants, search)

        return await run_operation("SetListService", _available())

    async def watch(
        self,
        setlist_id: str,
        on_view: ViewListener,
        known_nicknames: Iterable[str] | None = None,
    ) -> OperationResult[Unsubscribe]:
        """
        Subscribe to realtime changes of a setlist.

        The current view is delivered immediately, then a fresh view after
        every write pushed by the gateway.

        Returns:
            OperationResult holding the unsubscribe function
        """
        known = list(known_nicknames) if known_nicknames is not None else None

        def _on_change(setlist: SetList) -> None:
            on_view(build_view(setlist, known))

        async def _watch() -> Unsubscribe:
            current = await self._gateway.get(setlist_id)
            unsubscribe = self._gateway.subscribe(setlist_id, _on_change)
            on_view(build_view(current, known))
            logger.debug(f"[SetListService] Watching setlist {setlist_id}")
            return unsubscribe

        return await run_operation("SetListService", _watch())

    # ------------------------------------------------------------------
    # Reordering
    # ------------------------------------------------------------------

    async def reorder(self, setlist_id: str, plan: ReorderPlan | None, actor: Actor) -> OperationResult[SetList]:
        """
        Commit a reorder plan produced by a drag session.

        A None plan (drag ended where it started) writes nothing. The unit is
        located by key in the freshly read aggregate; if another client has
        completed or removed it meanwhile the operation fails with NotFound.
        """

        def _transform(setlist: SetList) -> SetList:
            if plan is None:
                return setlist
            ensure_mutable(setlist)
            _attr, _index, unit = locate_unit(setlist, plan.unit_key)
            ensure_can_act(actor, unit, self.elevated_roles)
            return apply_reorder(setlist, plan)

        result = await run_operation(
            "SetListService", self._writer.mutate(setlist_id, _transform, ACTIVE_FIELDS)
        )
        if result.ok and plan is not None:
            logger.info(
                f"[SetListService] {actor.nickname} moved {plan.unit_key} to position {plan.target_index} "
                f"in setlist {setlist_id}"
            )
        return result

    async def move_unit(
        self, setlist_id: str, source_index: int, target_index: int, actor: Actor
    ) -> OperationResult[SetList]:
        """Pointer-drag commit by indexes, planned against the current stored queue."""
        current = await self.get_queue(setlist_id)
        if not current.ok:
            return OperationResult.failure(current.error)  # type: ignore[arg-type]
        try:
            plan = plan_reorder(current.value or [], source_index, target_index)
        except ValidationError as e:
            return OperationResult.failure(e)
        return await self.reorder(setlist_id, plan, actor)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def add_song(
        self,
        setlist_id: str,
        song: CatalogSong | str,
        actor: Actor,
        insert_at: int | None = None,
    ) -> OperationResult[SetList]:
        """
        Place an approved song on the queue (at the end or at insert_at).

        `song` may be a CatalogSong or a catalog id. A song already active on
        the setlist is a no-op success.
        """

        async def _add() -> SetList:
            self._ensure_elevated(actor, "add songs")
            catalog_song = await self._resolve_song(song)

            def _transform(setlist: SetList) -> SetList:
                ensure_mutable(setlist)
                return add_song(setlist, catalog_song, insert_at)

            updated = await self._writer.mutate(setlist_id, _transform, ACTIVE_FIELDS)
            logger.info(f"[SetListService] {actor.nickname} added song '{catalog_song.title}' to {setlist_id}")
            return updated

        return await run_operation("SetListService", _add())

    async def create_flexible_card(
        self,
        setlist_id: str,
        actor: Actor,
        total_slots: int,
        owner_nickname: str | None = None,
    ) -> OperationResult[FlexibleCard]:
        """
        Create a pooled flexible card.

        Standard actors may only create cards they own; elevated actors may
        create a card for any nickname.
        """
        owner = (owner_nickname or actor.nickname).strip()

        async def _create() -> FlexibleCard:
            if owner != actor.nickname:
                self._ensure_elevated(actor, "create cards for other members")
            card = new_flexible_card(owner, total_slots, self.settings.max_flexible_slots)

            def _transform(setlist: SetList) -> SetList:
                ensure_mutable(setlist)
                return add_pooled_unit(setlist, card)

            await self._writer.mutate(setlist_id, _transform, ACTIVE_FIELDS)
            logger.info(f"[SetListService] {actor.nickname} created {unit_label(card)} on {setlist_id}")
            return card

        return await run_operation("SetListService", _create())

    async def create_request_card(self, setlist_id: str, actor: Actor) -> OperationResult[RequestCard]:
        async def _create() -> RequestCard:
            self._ensure_elevated(actor, "create request cards")
            card = new_request_card()

            def _transform(setlist: SetList) -> SetList:
                ensure_mutable(setlist)
                return add_pooled_unit(setlist, card)

            await self._writer.mutate(setlist_id, _transform, ACTIVE_FIELDS)
            logger.info(f"[SetListService] {actor.nickname} created request card {card.id} on {setlist_id}")
            return card

        return await run_operation("SetListService", _create())

    async def place_unit(
        self, setlist_id: str, key: str, actor: Actor, insert_at: int | None = None
    ) -> OperationResult[SetList]:
        """Pool → place, appended or inserted at insert_at."""
        return await self._unit_mutation(
            setlist_id, key, actor, "placed", lambda s: place_unit(s, key, insert_at), ACTIVE_FIELDS
        )

    async def unplace_unit(self, setlist_id: str, key: str, actor: Actor) -> OperationResult[SetList]:
        """Place → pool."""
        return await self._unit_mutation(setlist_id, key, actor, "unplaced", lambda s: unplace_unit(s, key), ACTIVE_FIELDS)

    async def complete_unit(self, setlist_id: str, key: str, actor: Actor) -> OperationResult[SetList]:
        """Place → complete: archive the unit and renumber the queue in one write."""
        completed_at = self._writer.clock()
        return await self._unit_mutation(
            setlist_id, key, actor, "completed", lambda s: complete_unit(s, key, completed_at), UNIT_FIELDS
        )

    async def delete_unit(self, setlist_id: str, key: str, actor: Actor) -> OperationResult[SetList]:
        """Remove a pooled or placed unit without archiving it."""
        return await self._unit_mutation(setlist_id, key, actor, "deleted", lambda s: delete_unit(s, key), ACTIVE_FIELDS)

    # ------------------------------------------------------------------
    # Slot editor
    # ------------------------------------------------------------------

    async def update_slot(
        self, setlist_id: str, card_id: str, slot_index: int, patch: Mapping[str, Any], actor: Actor
    ) -> OperationResult[SetList]:
        return await self._card_edit(
            setlist_id, card_id, lambda c: update_slot(c, slot_index, patch, actor, self.elevated_roles)
        )

    async def add_member(
        self, setlist_id: str, card_id: str, slot_index: int, nickname: str, actor: Actor
    ) -> OperationResult[SetList]:
        return await self._card_edit(
            setlist_id, card_id, lambda c: add_member(c, slot_index, nickname, actor, self.elevated_roles)
        )

    async def remove_member(
        self, setlist_id: str, card_id: str, slot_index: int, nickname: str, actor: Actor
    ) -> OperationResult[SetList]:
        return await self._card_edit(
            setlist_id, card_id, lambda c: remove_member(c, slot_index, nickname, actor, self.elevated_roles)
        )

    async def reset_slot(self, setlist_id: str, card_id: str, slot_index: int, actor: Actor) -> OperationResult[SetList]:
        return await self._card_edit(
            setlist_id, card_id, lambda c: reset_slot(c, slot_index, actor, self.elevated_roles)
        )

    async def set_slot_completed(
        self, setlist_id: str, card_id: str, slot_index: int, completed: bool, actor: Actor
    ) -> OperationResult[SetList]:
        return await self._card_edit(
            setlist_id, card_id, lambda c: set_slot_completed(c, slot_index, completed, actor, self.elevated_roles)
        )

    # ------------------------------------------------------------------
    # Request songs
    # ------------------------------------------------------------------

    async def add_request_song(self, setlist_id: str, card_id: str, title: str, actor: Actor) -> OperationResult[SetList]:
        return await self._request_edit(setlist_id, card_id, lambda c: add_request_song(c, title, actor))

    async def remove_request_song(
        self, setlist_id: str, card_id: str, song_id: str, actor: Actor
    ) -> OperationResult[SetList]:
        return await self._request_edit(
            setlist_id, card_id, lambda c: remove_request_song(c, song_id, actor, self.elevated_roles)
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _ensure_elevated(self, actor: Actor, action: str) -> None:
        if not is_elevated(actor, self.elevated_roles):
            raise Forbidden(f"{actor.nickname} may not {action}")

    def _require_catalog(self) -> SongCatalog:
        if self._catalog is None:
            raise NotFound("No song catalog configured")
        return self._catalog

    async def _resolve_song(self, song: CatalogSong | str) -> CatalogSong:
        if isinstance(song, CatalogSong):
            return song
        found = await self._require_catalog().get_song(song)
        if found is None:
            raise NotFound(f"Song {song} is not in the approved catalog")
        return found

    async def _unit_mutation(
        self,
        setlist_id: str,
        key: str,
        actor: Actor,
        verb: str,
        apply: Callable[[SetList], SetList],
        fields: Iterable[str],
    ) -> OperationResult[SetList]:
        def _transform(setlist: SetList) -> SetList:
            ensure_mutable(setlist)
            _attr, _index, unit = locate_unit(setlist, key)
            ensure_can_act(actor, unit, self.elevated_roles)
            return apply(setlist)

        result = await run_operation("SetListService", self._writer.mutate(setlist_id, _transform, fields))
        if result.ok:
            logger.info(f"[SetListService] {actor.nickname} {verb} {key} in setlist {setlist_id}")
        return result

    async def _card_edit(
        self, setlist_id: str, card_id: str, edit: Callable[[FlexibleCard], FlexibleCard]
    ) -> OperationResult[SetList]:
        def _transform(setlist: SetList) -> SetList:
            ensure_mutable(setlist)
            _attr, _index, unit = locate_unit(setlist, card_id)
            if not isinstance(unit, FlexibleCard):
                raise ValidationError(f"Unit {card_id} is not a flexible card")
            edited = edit(unit)
            if edited is unit:
                return setlist
            return replace_unit(setlist, card_id, edited)

        return await run_operation("SetListService", self._writer.mutate(setlist_id, _transform, ACTIVE_FIELDS))

    async def _request_edit(
        self, setlist_id: str, card_id: str, edit: Callable[[RequestCard], RequestCard]
    ) -> OperationResult[SetList]:
        def _transform(setlist: SetList) -> SetList:
            ensure_mutable(setlist)
            _attr, _index, unit = locate_unit(setlist, card_id)
            if not isinstance(unit, RequestCard):
                raise ValidationError(f"Unit {card_id} is not a request card")
            edited = edit(unit)
            if edited is unit:
                return setlist
            return replace_unit(setlist, unit_key(unit), edited)

        return await run_operation("SetListService", self._writer.mutate(setlist_id, _transform, ACTIVE_FIELDS))
