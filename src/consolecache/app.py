"""Application root: one explicit cache shared by every entity façade."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from consolecache.adapters.console_api import HttpEntityEndpoint
from consolecache.adapters.http_resilience import ResilientClient
from consolecache.config import ConsoleApiConfig, get_console_api_config
from consolecache.domain.cache import MutationCoordinator, QueryCache
from consolecache.domain.model import (
    Bank,
    City,
    Company,
    Department,
    Entity,
    EntityType,
    Shift,
    Skill,
    State,
)
from consolecache.domain.operations import EntityOperations
from consolecache.domain.ports import EntityEndpoint

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

EndpointFactory = Callable[[type[Entity]], EntityEndpoint[Any]]


log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class AdminConsole:
    """Façades for every reference entity, wired to one cache and coordinator."""

    cache: QueryCache
    coordinator: MutationCoordinator
    states: EntityOperations[State]
    cities: EntityOperations[City]
    companies: EntityOperations[Company]
    departments: EntityOperations[Department]
    skills: EntityOperations[Skill]
    shifts: EntityOperations[Shift]
    banks: EntityOperations[Bank]
    client: ResilientClient | None = None

    def operations(self) -> dict[EntityType, EntityOperations[Any]]:
        facades: tuple[EntityOperations[Any], ...] = (
            self.states,
            self.cities,
            self.companies,
            self.departments,
            self.skills,
            self.shifts,
            self.banks,
        )
        return {facade.entity_type.ENTITY_TYPE: facade for facade in facades}

    async def refresh_all(self) -> dict[EntityType, bool]:
        """Load every list concurrently; failures are reported per entity type."""
        facades = self.operations()
        results = await asyncio.gather(*(facade.refresh() for facade in facades.values()))
        return dict(zip(facades, results, strict=True))

    async def aclose(self) -> None:
        """Drop every cached list and its subscribers, then close the HTTP client."""
        for facade in self.operations().values():
            self.cache.evict(facade.query_key)
        if self.client is not None:
            await self.client.aclose()

    async def __aenter__(self) -> AdminConsole:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def build_admin_console(
    *,
    config: ConsoleApiConfig | None = None,
    cache: QueryCache | None = None,
    endpoint_factory: EndpointFactory | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AdminConsole:
    """Construct the console data layer.

    Without ``endpoint_factory`` the façades talk HTTP through a shared
    ``ResilientClient`` configured from ``config`` (or the environment).
    """

    effective_cache = cache if cache is not None else QueryCache()
    coordinator = MutationCoordinator(effective_cache)

    client: ResilientClient | None = None
    make_endpoint: EndpointFactory
    if endpoint_factory is not None:
        make_endpoint = endpoint_factory
    else:
        effective_config = config or get_console_api_config()
        client = ResilientClient(effective_config.resilience, transport=transport)
        make_endpoint = _http_endpoint_factory(client)
        log.info(f"Console API at {effective_config.base_url}")

    def facade[TEntity: Entity](entity_type: type[TEntity]) -> EntityOperations[TEntity]:
        return EntityOperations(
            entity_type=entity_type,
            endpoint=make_endpoint(entity_type),
            coordinator=coordinator,
        )

    return AdminConsole(
        cache=effective_cache,
        coordinator=coordinator,
        states=facade(State),
        cities=facade(City),
        companies=facade(Company),
        departments=facade(Department),
        skills=facade(Skill),
        shifts=facade(Shift),
        banks=facade(Bank),
        client=client,
    )


def _http_endpoint_factory(client: ResilientClient) -> EndpointFactory:
    def http_endpoint(entity_type: type[Entity]) -> EntityEndpoint[Any]:
        return HttpEntityEndpoint(client, entity_type)

    return http_endpoint
