"""Controllable remote calls and in-memory endpoints for cache tests."""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from consolecache.domain.model import Entity

if TYPE_CHECKING:
    from collections.abc import Mapping


class RemoteFailure(RuntimeError):
    """Stand-in for a rejected backend call."""


class ControlledRemote[TPayload, TResult]:
    """Remote call whose replies are released explicitly by the test.

    Each invocation parks on its own future, so tests can settle overlapping
    calls in any order.
    """

    def __init__(self) -> None:
        self.calls: list[TPayload] = []
        self._replies: list[asyncio.Future[TResult]] = []

    async def __call__(self, payload: TPayload) -> TResult:
        reply: asyncio.Future[TResult] = asyncio.get_running_loop().create_future()
        self.calls.append(payload)
        self._replies.append(reply)
        return await reply

    def resolve(self, value: TResult, *, call: int = 0) -> None:
        self._replies[call].set_result(value)

    def reject(self, error: BaseException | None = None, *, call: int = 0) -> None:
        self._replies[call].set_exception(error or RemoteFailure("backend rejected the call"))


async def settle() -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(3):
        await asyncio.sleep(0)


@dataclass
class FakeEndpoint[TEntity: Entity]:
    """In-memory ``EntityEndpoint`` with per-method failure injection."""

    entity_type: type[TEntity]
    records: list[TEntity] = field(default_factory=list)
    failures: dict[str, BaseException] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    # the next fetch_all reads the records, then waits here before replying
    fetch_gate: asyncio.Event | None = None
    _ids: itertools.count[int] = field(default_factory=lambda: itertools.count(100))

    async def fetch_all(self) -> list[TEntity]:
        self._record("fetch_all", None)
        records = list(self.records)
        if self.fetch_gate is not None:
            gate, self.fetch_gate = self.fetch_gate, None
            await gate.wait()
        return records

    async def create(self, fields: Mapping[str, object]) -> TEntity:
        self._record("create", dict(fields))
        entity = self.entity_type.from_fields(str(next(self._ids)), fields)
        self.records.append(entity)
        return entity

    async def update(self, entity_id: str, fields: Mapping[str, object]) -> TEntity:
        self._record("update", (entity_id, dict(fields)))
        for position, entity in enumerate(self.records):
            if entity.id == entity_id:
                updated = entity.with_updates(fields)
                self.records[position] = updated
                return updated
        raise RemoteFailure(f"{entity_id} not found")

    async def delete(self, entity_id: str) -> None:
        self._record("delete", entity_id)
        self.records = [entity for entity in self.records if entity.id != entity_id]

    def _record(self, method: str, payload: object) -> None:
        self.calls.append((method, payload))
        failure = self.failures.get(method)
        if failure is not None:
            raise failure
