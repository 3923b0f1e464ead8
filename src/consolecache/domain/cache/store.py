"""In-memory store holding one list snapshot per query key."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from consolecache.domain.model import Entity

log = getLogger(__name__)

type ListSnapshot[T: Entity] = tuple[T, ...]
type Subscriber = Callable[[ListSnapshot[Entity]], None]
type Unsubscribe = Callable[[], None]


@dataclass(frozen=True, slots=True)
class QueryKey:
    """Identity of one cached read query."""

    name: str
    params: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if not self.params:
            return self.name
        rendered = ",".join(f"{key}={value}" for key, value in self.params)
        return f"{self.name}({rendered})"


class QueryCache:
    """Holds exactly one snapshot per query key and notifies subscribers on write.

    ``set`` delivers synchronously, at most once per subscriber per call. The
    subscriber list is copied before delivery so callbacks may subscribe or
    unsubscribe without affecting the current round.
    """

    def __init__(self) -> None:
        self._snapshots: dict[QueryKey, ListSnapshot[Entity]] = {}
        self._subscribers: defaultdict[QueryKey, list[Subscriber]] = defaultdict(list)

    def __contains__(self, key: object) -> bool:
        return key in self._snapshots

    def get(self, key: QueryKey) -> ListSnapshot[Entity] | None:
        """Return the cached snapshot, or ``None`` if the key was never populated."""
        return self._snapshots.get(key)

    def set(self, key: QueryKey, snapshot: ListSnapshot[Entity]) -> None:
        frozen = tuple(snapshot)
        self._snapshots[key] = frozen
        for callback in tuple(self._subscribers.get(key, ())):
            try:
                callback(frozen)
            except Exception:
                log.exception(f"Subscriber for {key} failed")

    def subscribe(self, key: QueryKey, callback: Subscriber) -> Unsubscribe:
        self._subscribers[key].append(callback)
        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            current = self._subscribers.get(key)
            if current is None or callback not in current:
                return
            current.remove(callback)
            if not current:
                del self._subscribers[key]

        return unsubscribe

    def evict(self, key: QueryKey) -> None:
        """Drop the snapshot and subscribers for ``key``."""
        self._snapshots.pop(key, None)
        self._subscribers.pop(key, None)
