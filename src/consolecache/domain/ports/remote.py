"""Ports for reaching the console backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from consolecache.domain.model import Entity

if TYPE_CHECKING:
    from collections.abc import Mapping


@runtime_checkable
class EntityEndpoint[TEntity: Entity](Protocol):
    """Remote CRUD contract for one entity collection.

    Every method raises on failure; ``create`` and ``update`` resolve to the
    complete, server-authoritative entity.
    """

    async def fetch_all(self) -> list[TEntity]: ...

    async def create(self, fields: Mapping[str, object]) -> TEntity: ...

    async def update(self, entity_id: str, fields: Mapping[str, object]) -> TEntity: ...

    async def delete(self, entity_id: str) -> None: ...
