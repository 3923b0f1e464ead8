from __future__ import annotations

import pytest

from consolecache.domain.cache import MutationCoordinator, QueryCache
from consolecache.domain.model import State
from tests.helpers.entities import STATES, make_states


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture
def coordinator(cache: QueryCache) -> MutationCoordinator:
    coordinator = MutationCoordinator(cache)
    coordinator.register(STATES, State)
    return coordinator


@pytest.fixture
def arizona_texas() -> tuple[State, ...]:
    return make_states("Arizona", "Texas")


@pytest.fixture
def seeded_cache(cache: QueryCache, arizona_texas: tuple[State, ...]) -> QueryCache:
    cache.set(STATES, arizona_texas)
    return cache
