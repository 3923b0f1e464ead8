"""HTTP endpoints for the console backend."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from consolecache.domain.model import Entity

from .routes import ROUTES, Addressing, EndpointRoute
from .translator import ID_FIELD, parse_entity, to_wire_fields

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from consolecache.adapters.http_resilience import ResilientClient
    from consolecache.domain.ports import EntityEndpoint

log = getLogger(__name__)


class ConsoleApiError(RuntimeError):
    """Raised when the console backend answers with an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HttpEntityEndpoint[TEntity: Entity]:
    """``EntityEndpoint`` backed by the console REST API.

    Non-2xx responses raise ``httpx.HTTPStatusError``; malformed bodies raise
    ``ConsoleApiError``.
    """

    def __init__(
        self,
        client: ResilientClient,
        entity_type: type[TEntity],
        *,
        route: EndpointRoute | None = None,
    ) -> None:
        self._client = client
        self._entity_type = entity_type
        self._route = route or ROUTES[entity_type.ENTITY_TYPE]

    async def fetch_all(self) -> list[TEntity]:
        response = await self._client.get(self._route.path)
        payload = self._decode(response)
        if not isinstance(payload, list):
            raise ConsoleApiError(
                f"Expected a list from {self._route.path}", status_code=response.status_code
            )
        return [self._parse(item, response) for item in payload]

    async def create(self, fields: Mapping[str, object]) -> TEntity:
        body = to_wire_fields(self._entity_type, fields)
        response = await self._client.post(self._route.path, json=body)
        return self._parse(self._decode(response), response)

    async def update(self, entity_id: str, fields: Mapping[str, object]) -> TEntity:
        body = to_wire_fields(self._entity_type, fields)
        if self._route.addressing is Addressing.PATH:
            response = await self._client.patch(self._route.item_path(entity_id), json=body)
        else:
            response = await self._client.patch(
                self._route.path, json={ID_FIELD: entity_id, **body}
            )
        return self._parse(self._decode(response), response)

    async def delete(self, entity_id: str) -> None:
        if self._route.addressing is Addressing.PATH:
            response = await self._client.delete(self._route.item_path(entity_id))
        else:
            response = await self._client.delete(self._route.path, json={ID_FIELD: entity_id})
        response.raise_for_status()

    def _decode(self, response: httpx.Response) -> object:
        response.raise_for_status()
        try:
            return response.json()
        except ValueError:
            raise ConsoleApiError(
                f"Non-JSON response from {response.request.url}",
                status_code=response.status_code,
            ) from None

    def _parse(self, payload: object, response: httpx.Response) -> TEntity:
        try:
            return parse_entity(self._entity_type, payload)
        except ValidationError as exc:
            log.error(
                f"Invalid {self._entity_type.ENTITY_TYPE} payload from "
                f"{response.request.url}: {exc.error_count()} error(s)"
            )
            raise ConsoleApiError(
                f"Invalid {self._entity_type.ENTITY_TYPE} payload",
                status_code=response.status_code,
            ) from exc


if TYPE_CHECKING:
    from consolecache.domain.model import State

    def _endpoint_check(client: ResilientClient) -> EntityEndpoint[State]:
        return HttpEntityEndpoint(client, State)
