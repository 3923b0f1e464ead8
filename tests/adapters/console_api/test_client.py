from __future__ import annotations

import asyncio

import httpx
import pytest

from consolecache.adapters.console_api import ConsoleApiError, HttpEntityEndpoint
from consolecache.config import RetryPolicy
from consolecache.domain.model import City, Shift, State
from consolecache.domain.ports import EntityEndpoint
from tests.helpers.http import json_body, mock_client


def test_fetch_all_parses_records() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=[
                {"_id": "c1", "name": "Austin", "stateId": "s1", "statename": "Texas", "__v": 0},
                {"_id": "c2", "name": "Tucson"},
            ],
        )

    endpoint = HttpEntityEndpoint(mock_client(handler), City)

    cities = asyncio.run(endpoint.fetch_all())

    assert cities == [
        City(id="c1", name="Austin", state_id="s1", state_name="Texas"),
        City(id="c2", name="Tucson"),
    ]
    assert requests[0].method == "GET"
    assert requests[0].url == "https://console.test/api/city"


def test_endpoint_satisfies_port() -> None:
    endpoint = HttpEntityEndpoint(mock_client(lambda _: httpx.Response(200, json=[])), State)

    assert isinstance(endpoint, EntityEndpoint)


def test_create_posts_wire_fields() -> None:
    seen: list[object] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json_body(request)))
        return httpx.Response(201, json={"_id": "c9", "name": "Dallas", "stateId": "s1"})

    endpoint = HttpEntityEndpoint(mock_client(handler), City)

    city = asyncio.run(endpoint.create({"name": "Dallas", "state_id": "s1"}))

    assert city == City(id="c9", name="Dallas", state_id="s1")
    assert seen == [("POST", "/api/city", {"name": "Dallas", "stateId": "s1"})]


def test_update_sends_id_in_body_by_default() -> None:
    seen: list[object] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json_body(request)))
        return httpx.Response(200, json={"_id": "s2", "name": "Alaska"})

    endpoint = HttpEntityEndpoint(mock_client(handler), State)

    state = asyncio.run(endpoint.update("s2", {"name": "Alaska"}))

    assert state == State(id="s2", name="Alaska")
    assert seen == [("PATCH", "/api/states", {"_id": "s2", "name": "Alaska"})]


def test_shift_update_and_delete_address_the_path() -> None:
    seen: list[tuple[str, str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json={"_id": "sh1", "title": "Late", "updatedAt": "2024-05-01"})

    endpoint = HttpEntityEndpoint(mock_client(handler), Shift)

    shift = asyncio.run(endpoint.update("sh1", {"title": "Late"}))
    asyncio.run(endpoint.delete("sh1"))

    assert shift == Shift(id="sh1", title="Late", updated_at="2024-05-01")
    assert seen[0][:2] == ("PATCH", "/api/shift/sh1")
    assert seen[1] == ("DELETE", "/api/shift/sh1", b"")


def test_delete_sends_id_in_body() -> None:
    seen: list[object] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json_body(request)))
        return httpx.Response(200, json={"ok": True})

    endpoint = HttpEntityEndpoint(mock_client(handler), State)

    asyncio.run(endpoint.delete("s1"))

    assert seen == [("DELETE", "/api/states", {"_id": "s1"})]


def test_error_status_raises_http_error() -> None:
    endpoint = HttpEntityEndpoint(
        mock_client(lambda _: httpx.Response(409, json={"message": "exists"})),
        State,
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(endpoint.create({"name": "Texas"}))


def test_delete_error_status_raises() -> None:
    endpoint = HttpEntityEndpoint(mock_client(lambda _: httpx.Response(404)), State)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(endpoint.delete("missing"))


def test_invalid_record_raises_console_error() -> None:
    endpoint = HttpEntityEndpoint(
        mock_client(lambda _: httpx.Response(200, json={"name": "No id"})),
        State,
    )

    with pytest.raises(ConsoleApiError) as exc:
        asyncio.run(endpoint.create({"name": "No id"}))

    assert exc.value.status_code == 200


def test_non_json_body_raises_console_error() -> None:
    endpoint = HttpEntityEndpoint(
        mock_client(lambda _: httpx.Response(200, text="<html>oops</html>")),
        State,
    )

    with pytest.raises(ConsoleApiError, match="Non-JSON"):
        asyncio.run(endpoint.fetch_all())


def test_fetch_all_requires_a_list() -> None:
    endpoint = HttpEntityEndpoint(
        mock_client(lambda _: httpx.Response(200, json={"_id": "s1", "name": "Ohio"})),
        State,
    )

    with pytest.raises(ConsoleApiError, match="Expected a list"):
        asyncio.run(endpoint.fetch_all())


def test_transient_get_failures_are_retried() -> None:
    attempts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        if len(attempts) == 1:
            return httpx.Response(503)
        return httpx.Response(200, json=[{"_id": "s1", "name": "Ohio"}])

    client = mock_client(handler, retry=RetryPolicy(total=2, backoff_factor=0.0))
    endpoint = HttpEntityEndpoint(client, State)

    assert asyncio.run(endpoint.fetch_all()) == [State(id="s1", name="Ohio")]
    assert attempts == ["GET", "GET"]


def test_creates_are_not_retried() -> None:
    attempts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        return httpx.Response(503)

    client = mock_client(handler, retry=RetryPolicy(total=2, backoff_factor=0.0))
    endpoint = HttpEntityEndpoint(client, State)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(endpoint.create({"name": "Ohio"}))

    assert attempts == ["POST"]
