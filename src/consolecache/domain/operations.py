"""Per-entity operation façades over the mutation coordinator."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

from consolecache.domain.cache import FieldPatch, MutationKind, QueryKey
from consolecache.domain.errors import InvalidPayloadError
from consolecache.domain.model import Entity

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from consolecache.domain.cache import (
        ListSnapshot,
        MutationCoordinator,
        Unsubscribe,
    )
    from consolecache.domain.ports import EntityEndpoint

log = getLogger(__name__)

# fetches that overlap a mutation are repeated at most this many times
MAX_STALE_RELOADS = 2


class EntityOperations[TEntity: Entity]:
    """Uniform ``list/create/update/delete/get_by_id/search`` surface for one entity type.

    Reads come from the shared cache; writes go through the coordinator so
    every change is optimistic and rolled back on remote failure. Failures are
    reported as ``None``/``False``; presentation is left to the caller.
    """

    def __init__(
        self,
        *,
        entity_type: type[TEntity],
        endpoint: EntityEndpoint[TEntity],
        coordinator: MutationCoordinator,
        query_key: QueryKey | None = None,
    ) -> None:
        self._entity_type = entity_type
        self._endpoint = endpoint
        self._coordinator = coordinator
        self._query_key = query_key or QueryKey(entity_type.ENTITY_TYPE.value)
        self._refreshing = 0
        self._load_error: Exception | None = None
        coordinator.register(self._query_key, entity_type)

    @property
    def entity_type(self) -> type[TEntity]:
        return self._entity_type

    @property
    def query_key(self) -> QueryKey:
        return self._query_key

    @property
    def is_loaded(self) -> bool:
        return self._query_key in self._coordinator.cache

    @property
    def is_loading(self) -> bool:
        return self._refreshing > 0

    @property
    def load_error(self) -> Exception | None:
        """Cause of the last failed refresh, cleared by the next successful one."""
        return self._load_error

    @property
    def is_creating(self) -> bool:
        return bool(self._coordinator.pending(self._query_key, MutationKind.CREATE))

    @property
    def is_updating(self) -> bool:
        return any(
            self._coordinator.pending(self._query_key, kind)
            for kind in (MutationKind.UPDATE, MutationKind.PATCH)
        )

    @property
    def is_deleting(self) -> bool:
        return bool(self._coordinator.pending(self._query_key, MutationKind.DELETE))

    def list(self) -> tuple[TEntity, ...]:
        """Current snapshot, empty while the list has not been loaded."""
        snapshot = self._coordinator.cache.get(self._query_key)
        if snapshot is None:
            return ()
        return cast("tuple[TEntity, ...]", snapshot)

    def subscribe(self, callback: Callable[[ListSnapshot[Entity]], None]) -> Unsubscribe:
        return self._coordinator.cache.subscribe(self._query_key, callback)

    def get_by_id(self, entity_id: str) -> TEntity | None:
        for entity in self.list():
            if entity.id == entity_id:
                return entity
        return None

    def search(self, query: str) -> tuple[TEntity, ...]:
        """Case-insensitive substring match on the display field."""
        if not query.strip():
            return self.list()
        needle = query.casefold()
        return tuple(entity for entity in self.list() if needle in entity.display_name.casefold())

    async def refresh(self) -> bool:
        """Refetch the list from the backend and replace the cached snapshot.

        When a mutation on this list starts or settles while the request is
        out, the response may predate it and the list is fetched again.
        """
        self._refreshing += 1
        try:
            for attempt in range(MAX_STALE_RELOADS + 1):
                revision = self._coordinator.revision(self._query_key)
                try:
                    entities = await self._endpoint.fetch_all()
                except Exception as exc:  # noqa: BLE001
                    log.warning(f"Failed to load {self._query_key}: {exc!r}", exc_info=exc)
                    self._load_error = exc
                    return False
                self._coordinator.load(self._query_key, entities)
                self._load_error = None
                if self._coordinator.revision(self._query_key) == revision:
                    break
                if attempt < MAX_STALE_RELOADS:
                    log.debug(f"{self._query_key} changed while loading, fetching again")
            else:
                log.warning(f"{self._query_key} kept changing while loading; kept the last fetch")
            return True
        finally:
            self._refreshing -= 1

    async def create(self, payload: Mapping[str, object]) -> TEntity | None:
        fields = self._validated_fields(payload, require_display=True)
        result = await self._coordinator.create(self._query_key, fields, self._endpoint.create)
        if result is None:
            log.info(f"Failed to create {self._entity_type.ENTITY_TYPE}")
        return cast("TEntity | None", result)

    async def update(self, payload: Mapping[str, object]) -> TEntity | None:
        """Update the entity named by ``payload["id"]`` with the remaining fields."""
        entity_id = _require_id(payload.get("id"))
        changes = self._validated_fields(payload, require_display=False)
        if not changes:
            raise InvalidPayloadError(f"No {self._entity_type.ENTITY_TYPE} fields to update")

        async def send(_payload: object) -> TEntity:
            return await self._endpoint.update(entity_id, changes)

        current = self.get_by_id(entity_id)
        if current is not None:
            result = await self._coordinator.update(
                self._query_key, current.with_updates(changes), send
            )
        else:
            result = await self._coordinator.patch(
                self._query_key, FieldPatch(entity_id, changes), send
            )
        if result is None:
            log.info(f"Failed to update {self._entity_type.ENTITY_TYPE} {entity_id}")
        return cast("TEntity | None", result)

    async def delete(self, entity_id: str) -> bool:
        checked_id = _require_id(entity_id)
        deleted = await self._coordinator.delete(self._query_key, checked_id, self._endpoint.delete)
        if not deleted:
            log.info(f"Failed to delete {self._entity_type.ENTITY_TYPE} {checked_id}")
        return deleted

    def _validated_fields(
        self,
        payload: Mapping[str, object],
        *,
        require_display: bool,
    ) -> dict[str, object]:
        known = self._entity_type.field_names() - {"id"}
        unknown = sorted(set(payload) - known - {"id"})
        if unknown:
            raise InvalidPayloadError(
                f"Unknown {self._entity_type.ENTITY_TYPE} fields: {', '.join(unknown)}"
            )

        fields = {name: value for name, value in payload.items() if name in known}
        display_field = self._entity_type.DISPLAY_FIELD
        if require_display or display_field in fields:
            value = fields.get(display_field)
            if not isinstance(value, str) or not value.strip():
                raise InvalidPayloadError(
                    f"{self._entity_type.ENTITY_TYPE} requires a non-empty {display_field}"
                )
        return fields


def _require_id(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidPayloadError("An entity id is required")
    return value
