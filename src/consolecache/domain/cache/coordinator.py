"""Optimistic mutation orchestration.

The coordinator is the only writer to a ``QueryCache``. One mutation runs as:

1. read the current snapshot and compute the forward patch and its inverse
2. write the forward snapshot before the remote call is issued
3. await the remote call
4. reconcile (success) or apply the inverse (failure) against whatever the
   cache holds *at that moment*, addressing entities by id

Step 4 never reuses the snapshot captured in step 1, which keeps overlapping
mutations correct regardless of the order their replies arrive in.
"""

from __future__ import annotations

import asyncio
import itertools
import time
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Literal, cast, overload

from consolecache.domain.cache.patches import (
    NOOP,
    Insert,
    Intent,
    PatchFields,
    Remove,
    Replace,
    compute_patch,
    sort_snapshot,
)
from consolecache.domain.errors import UnknownQueryError
from consolecache.domain.model import PLACEHOLDER_PREFIX, Entity, display_sort_key

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping

    from consolecache.domain.cache.store import ListSnapshot, QueryCache, QueryKey

log = getLogger(__name__)

type RemoteCall[P, R] = Callable[[P], Awaitable[R]]


class MutationKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    PATCH = "patch"
    DELETE = "delete"


class PatchStatus(StrEnum):
    APPLIED = "applied"
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True, slots=True)
class FieldPatch:
    """Partial update payload: field values to merge into one entity."""

    entity_id: str
    updates: Mapping[str, object]


@dataclass(slots=True, kw_only=True)
class PendingPatch:
    """Lifecycle record of one in-flight optimistic mutation."""

    query_key: QueryKey
    kind: MutationKind
    forward: Intent
    inverse: Intent
    status: PatchStatus = PatchStatus.APPLIED
    placeholder_id: str | None = None


class _BrokenRemoteContractError(TypeError):
    """Remote call resolved to something other than the registered entity type."""


class MutationCoordinator:
    def __init__(
        self,
        cache: QueryCache,
        *,
        placeholder_ids: Callable[[], str] | None = None,
    ) -> None:
        self._cache = cache
        self._shapes: dict[QueryKey, type[Entity]] = {}
        self._pending: list[PendingPatch] = []
        self._revisions: dict[QueryKey, int] = {}
        self._sequence = itertools.count(1)
        self._placeholder_ids = placeholder_ids or self._next_placeholder_id

    @property
    def cache(self) -> QueryCache:
        return self._cache

    def register(self, query_key: QueryKey, entity_type: type[Entity]) -> None:
        """Bind ``query_key`` to the entity shape its snapshots hold."""
        existing = self._shapes.get(query_key)
        if existing is not None and existing is not entity_type:
            raise ValueError(
                f"{query_key} is already registered for {existing.__name__}, "
                f"not {entity_type.__name__}"
            )
        self._shapes[query_key] = entity_type

    def entity_type(self, query_key: QueryKey) -> type[Entity]:
        try:
            return self._shapes[query_key]
        except KeyError:
            raise UnknownQueryError(f"No entity type registered for {query_key}") from None

    def pending(
        self,
        query_key: QueryKey | None = None,
        kind: MutationKind | None = None,
    ) -> tuple[PendingPatch, ...]:
        """Return in-flight patches, optionally filtered by key and kind."""
        return tuple(
            patch
            for patch in self._pending
            if (query_key is None or patch.query_key == query_key)
            and (kind is None or patch.kind is kind)
        )

    def revision(self, query_key: QueryKey) -> int:
        """Count of mutations started or settled on ``query_key`` so far.

        A list fetched while this number moved may predate a change the
        server has already confirmed.
        """
        return self._revisions.get(query_key, 0)

    def load(self, query_key: QueryKey, entities: Iterable[Entity]) -> ListSnapshot[Entity]:
        """Write a freshly fetched list, sorted by display field.

        Mutations still in flight are replayed on top of the fetched list and
        their inverses recomputed against it, so a later rollback restores the
        server's version rather than the one cached before the fetch.
        """
        self.entity_type(query_key)
        snapshot = sort_snapshot(entities, sort_key=display_sort_key)
        for pending in self.pending(query_key):
            patch = compute_patch(snapshot, pending.forward, sort_key=display_sort_key)
            snapshot = patch.forward
            pending.inverse = patch.inverse
        self._cache.set(query_key, snapshot)
        log.debug(f"Loaded {len(snapshot)} entities into {query_key}")
        return snapshot

    @overload
    async def perform(
        self,
        query_key: QueryKey,
        kind: Literal[MutationKind.DELETE],
        payload: str,
        remote_call: RemoteCall[str, object],
    ) -> Literal[True] | None: ...

    @overload
    async def perform(
        self,
        query_key: QueryKey,
        kind: Literal[MutationKind.CREATE, MutationKind.UPDATE, MutationKind.PATCH],
        payload: object,
        remote_call: RemoteCall[object, object],
    ) -> Entity | None: ...

    async def perform(
        self,
        query_key: QueryKey,
        kind: MutationKind,
        payload: object,
        remote_call: RemoteCall[object, object] | RemoteCall[str, object],
    ) -> Entity | Literal[True] | None:
        """Run one optimistic mutation end to end.

        Returns the server-confirmed entity (``True`` for deletes) or ``None``
        when the remote call failed and the optimistic change was rolled back.
        Remote failures never propagate.
        """

        kind = MutationKind(kind)
        entity_type = self.entity_type(query_key)
        pending = self._begin(query_key, kind, payload, entity_type)

        try:
            result = await cast("RemoteCall[object, object]", remote_call)(payload)
            if kind is not MutationKind.DELETE and not isinstance(result, entity_type):
                log.error(
                    f"{kind} on {query_key} resolved to {type(result).__name__}, "
                    f"expected {entity_type.__name__}"
                )
                raise _BrokenRemoteContractError(type(result).__name__)
        except asyncio.CancelledError:
            self._roll_back(pending)
            raise
        except Exception as exc:  # noqa: BLE001
            self._roll_back(pending)
            log.warning(f"{kind} on {query_key} failed, rolled back: {exc!r}", exc_info=exc)
            return None

        if kind is MutationKind.DELETE:
            self._settle(pending, PatchStatus.RECONCILED)
            return True

        entity = cast("Entity", result)
        self._reconcile(pending, entity)
        return entity

    async def create(
        self,
        query_key: QueryKey,
        fields: Mapping[str, object],
        remote_call: RemoteCall[Mapping[str, object], Entity],
    ) -> Entity | None:
        return await self.perform(
            query_key,
            MutationKind.CREATE,
            fields,
            cast("RemoteCall[object, object]", remote_call),
        )

    async def update(
        self,
        query_key: QueryKey,
        entity: Entity,
        remote_call: RemoteCall[Entity, Entity],
    ) -> Entity | None:
        return await self.perform(
            query_key,
            MutationKind.UPDATE,
            entity,
            cast("RemoteCall[object, object]", remote_call),
        )

    async def patch(
        self,
        query_key: QueryKey,
        field_patch: FieldPatch,
        remote_call: RemoteCall[FieldPatch, Entity],
    ) -> Entity | None:
        return await self.perform(
            query_key,
            MutationKind.PATCH,
            field_patch,
            cast("RemoteCall[object, object]", remote_call),
        )

    async def delete(
        self,
        query_key: QueryKey,
        entity_id: str,
        remote_call: RemoteCall[str, object],
    ) -> bool:
        return bool(await self.perform(query_key, MutationKind.DELETE, entity_id, remote_call))

    def _begin(
        self,
        query_key: QueryKey,
        kind: MutationKind,
        payload: object,
        entity_type: type[Entity],
    ) -> PendingPatch:
        placeholder_id: str | None = None
        forward: Intent
        match kind:
            case MutationKind.CREATE:
                placeholder_id = self._placeholder_ids()
                fields = cast("Mapping[str, object]", payload)
                forward = Insert(entity_type.from_fields(placeholder_id, fields))
            case MutationKind.UPDATE:
                entity = cast("Entity", payload)
                forward = Replace(entity.id, entity)
            case MutationKind.PATCH:
                field_patch = cast("FieldPatch", payload)
                forward = PatchFields(field_patch.entity_id, dict(field_patch.updates))
            case MutationKind.DELETE:
                forward = Remove(cast("str", payload))

        inverse: Intent = NOOP
        snapshot = self._cache.get(query_key)
        if snapshot is not None:
            patch = compute_patch(snapshot, forward, sort_key=display_sort_key)
            inverse = patch.inverse
            if patch.changed:
                self._cache.set(query_key, patch.forward)
                log.debug(f"Optimistic {kind} applied to {query_key}")

        pending = PendingPatch(
            query_key=query_key,
            kind=kind,
            forward=forward,
            inverse=inverse,
            placeholder_id=placeholder_id,
        )
        self._pending.append(pending)
        self._bump(query_key)
        return pending

    def _reconcile(self, pending: PendingPatch, entity: Entity) -> None:
        current = self._cache.get(pending.query_key)
        if current is not None:
            target_id = pending.placeholder_id or getattr(pending.forward, "entity_id", entity.id)
            cached = next((item for item in current if item.id == target_id), None)
            if cached is not None and cached != entity:
                patch = compute_patch(current, Replace(target_id, entity), sort_key=display_sort_key)
                if patch.changed:
                    self._cache.set(pending.query_key, patch.forward)
                    log.debug(f"Reconciled {target_id} as {entity.id} in {pending.query_key}")
        self._settle(pending, PatchStatus.RECONCILED)

    def _roll_back(self, pending: PendingPatch) -> None:
        current = self._cache.get(pending.query_key)
        if current is not None:
            patch = compute_patch(current, pending.inverse, sort_key=display_sort_key)
            if patch.changed:
                self._cache.set(pending.query_key, patch.forward)
        self._settle(pending, PatchStatus.ROLLED_BACK)

    def _settle(self, pending: PendingPatch, status: PatchStatus) -> None:
        pending.status = status
        self._pending.remove(pending)
        self._bump(pending.query_key)

    def _bump(self, query_key: QueryKey) -> None:
        self._revisions[query_key] = self.revision(query_key) + 1

    def _next_placeholder_id(self) -> str:
        return f"{PLACEHOLDER_PREFIX}{time.time_ns()}-{next(self._sequence)}"
