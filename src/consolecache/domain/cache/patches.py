"""Pure list transformations with computed inverses.

Every intent addresses entities by id. ``compute_patch`` returns the forward
snapshot together with the intent that undoes it, so an undo can be replayed
against a later snapshot that other patches have touched in the meantime.

Targets that are missing, and intents that would change nothing, degrade to
``Noop`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from consolecache.domain.model import Entity, display_sort_key

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from consolecache.domain.cache.store import ListSnapshot

type SortKey = Callable[[Entity], str]


@dataclass(frozen=True, slots=True)
class Insert:
    entity: Entity


@dataclass(frozen=True, slots=True)
class Replace:
    entity_id: str
    entity: Entity


@dataclass(frozen=True, slots=True)
class Remove:
    entity_id: str


@dataclass(frozen=True, slots=True)
class PatchFields:
    entity_id: str
    updates: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class Restore:
    """Put ``entity`` back where it was, optionally in place of ``displaced_id``.

    ``after_id`` names the entity that preceded it (``None`` if it was first);
    ``index`` is only a fallback when that predecessor has gone.
    """

    entity: Entity
    index: int
    after_id: str | None
    displaced_id: str | None = None


@dataclass(frozen=True, slots=True)
class Noop:
    pass


type Intent = Insert | Replace | Remove | PatchFields | Restore | Noop

NOOP = Noop()


@dataclass(frozen=True, slots=True)
class Patch:
    forward: ListSnapshot[Entity]
    inverse: Intent

    @property
    def changed(self) -> bool:
        return not isinstance(self.inverse, Noop)


def sort_snapshot(
    entities: Iterable[Entity],
    *,
    sort_key: SortKey = display_sort_key,
) -> ListSnapshot[Entity]:
    """Stable, case-insensitive ordering by display field."""
    return tuple(sorted(entities, key=sort_key))


def compute_patch(
    snapshot: ListSnapshot[Entity],
    intent: Intent,
    *,
    sort_key: SortKey = display_sort_key,
) -> Patch:
    """Return the forward snapshot for ``intent`` and the intent that reverts it."""

    match intent:
        case Insert():
            return _insert(snapshot, intent, sort_key)
        case Replace():
            return _replace(snapshot, intent, sort_key)
        case Remove():
            return _remove(snapshot, intent)
        case PatchFields():
            return _patch_fields(snapshot, intent, sort_key)
        case Restore():
            return _restore(snapshot, intent, sort_key)
        case Noop():
            return Patch(snapshot, NOOP)


def apply_intent(
    snapshot: ListSnapshot[Entity],
    intent: Intent,
    *,
    sort_key: SortKey = display_sort_key,
) -> ListSnapshot[Entity]:
    return compute_patch(snapshot, intent, sort_key=sort_key).forward


def _insert(snapshot: ListSnapshot[Entity], intent: Insert, sort_key: SortKey) -> Patch:
    if _index_of(snapshot, intent.entity.id) is not None:
        return Patch(snapshot, NOOP)
    forward = sort_snapshot((*snapshot, intent.entity), sort_key=sort_key)
    return Patch(forward, Remove(intent.entity.id))


def _replace(snapshot: ListSnapshot[Entity], intent: Replace, sort_key: SortKey) -> Patch:
    index = _index_of(snapshot, intent.entity_id)
    if index is None:
        return Patch(snapshot, NOOP)

    original = snapshot[index]
    incoming = intent.entity
    if incoming == original:
        return Patch(snapshot, NOOP)
    items = [
        incoming if position == index else item
        for position, item in enumerate(snapshot)
        if position == index or item.id != incoming.id
    ]
    inverse = Restore(
        entity=original,
        index=index,
        after_id=_predecessor_id(snapshot, index),
        displaced_id=incoming.id,
    )
    return Patch(sort_snapshot(items, sort_key=sort_key), inverse)


def _remove(snapshot: ListSnapshot[Entity], intent: Remove) -> Patch:
    index = _index_of(snapshot, intent.entity_id)
    if index is None:
        return Patch(snapshot, NOOP)

    inverse = Restore(
        entity=snapshot[index],
        index=index,
        after_id=_predecessor_id(snapshot, index),
    )
    return Patch(snapshot[:index] + snapshot[index + 1 :], inverse)


def _patch_fields(
    snapshot: ListSnapshot[Entity],
    intent: PatchFields,
    sort_key: SortKey,
) -> Patch:
    index = _index_of(snapshot, intent.entity_id)
    if index is None:
        return Patch(snapshot, NOOP)

    current = snapshot[index]
    known = current.field_names() - {"id"}
    changed = {
        name: value
        for name, value in intent.updates.items()
        if name in known and getattr(current, name) != value
    }
    if not changed:
        return Patch(snapshot, NOOP)

    updated = current.with_updates(changed)
    items = list(snapshot)
    items[index] = updated
    if sort_key(updated) != sort_key(current):
        forward = sort_snapshot(items, sort_key=sort_key)
    else:
        forward = tuple(items)
    previous = {name: getattr(current, name) for name in changed}
    return Patch(forward, PatchFields(current.id, previous))


def _restore(snapshot: ListSnapshot[Entity], intent: Restore, sort_key: SortKey) -> Patch:
    entity = intent.entity
    displaced_index: int | None = None
    if intent.displaced_id is not None:
        displaced_index = _index_of(snapshot, intent.displaced_id)
        # the entity this restore would stand in for was removed elsewhere
        if displaced_index is None:
            return Patch(snapshot, NOOP)
    if entity.id != intent.displaced_id and _index_of(snapshot, entity.id) is not None:
        return Patch(snapshot, NOOP)

    items = list(snapshot)
    displaced: Entity | None = None
    inverse: Intent
    if displaced_index is not None:
        displaced = items.pop(displaced_index)
        inverse = Restore(
            entity=displaced,
            index=displaced_index,
            after_id=_predecessor_id(snapshot, displaced_index),
            displaced_id=entity.id,
        )
    else:
        inverse = Remove(entity.id)

    items.insert(_anchor_position(items, intent.after_id, intent.index), entity)
    return Patch(sort_snapshot(items, sort_key=sort_key), inverse)


def _index_of(snapshot: ListSnapshot[Entity] | list[Entity], entity_id: str) -> int | None:
    for position, item in enumerate(snapshot):
        if item.id == entity_id:
            return position
    return None


def _predecessor_id(snapshot: ListSnapshot[Entity], index: int) -> str | None:
    return snapshot[index - 1].id if index > 0 else None


def _anchor_position(items: list[Entity], after_id: str | None, index: int) -> int:
    if after_id is None:
        return 0
    position = _index_of(items, after_id)
    if position is not None:
        return position + 1
    return max(0, min(index, len(items)))
