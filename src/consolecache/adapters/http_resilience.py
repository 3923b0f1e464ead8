"""Async HTTP client used by the console API adapter.

Retries come from ``httpx_retries``, throttling from ``aiolimiter`` and the
optional response cache from ``hishel``. All three are configured through
``consolecache.config.ResilienceConfig``.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from consolecache.config.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import QueryParamTypes

__all__ = [
    "CacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_retry",
]

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=sorted(policy.allowed_methods),
        status_forcelist=sorted(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ResilientClient:
    """Thin async client for one backend.

    Requests share one ``httpx.AsyncClient``; every call waits for the rate
    limiter (if any) and goes through the retry transport. ``transport``
    replaces the network layer underneath the retries, e.g. with
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = _build_limiter(config.ratelimit)

        hooks: list[Any] = [_log_response, *config.response_hooks]
        client_kwargs: dict[str, Any] = {
            "base_url": config.base_url or "",
            "timeout": config.timeout_seconds,
            "headers": dict(config.default_headers or {}),
            "event_hooks": {"response": hooks},
            "transport": RetryTransport(transport=transport, retry=build_retry(config.retry)),
        }
        storage = _build_cache_storage(config.cache)
        self._client: httpx.AsyncClient = (
            AsyncCacheClient(**client_kwargs, storage=storage)
            if storage is not None
            else httpx.AsyncClient(**client_kwargs)
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: object = None,
        params: QueryParamTypes | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, json=json, params=params)
        async with self._limiter:
            return await self._client.request(method, url, json=json, params=params)

    async def get(self, url: str, *, params: QueryParamTypes | None = None) -> httpx.Response:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, *, json: object = None) -> httpx.Response:
        return await self.request("POST", url, json=json)

    async def patch(self, url: str, *, json: object = None) -> httpx.Response:
        return await self.request("PATCH", url, json=json)

    async def delete(self, url: str, *, json: object = None) -> httpx.Response:
        # the console API takes the id of body-addressed deletes as JSON
        return await self.request("DELETE", url, json=json)


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    log.debug(f"{request.method} {request.url.path} -> {response.status_code}")


def _build_limiter(ratelimit: RateLimit | None) -> AsyncLimiter | None:
    if ratelimit is None:
        return None
    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)


def _build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    if config is None or not config.enabled:
        return None

    return AsyncSqliteStorage(
        database_path=":memory:",
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )
