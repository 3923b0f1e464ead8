"""Console API clients backed by ``httpx.MockTransport``."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx

from consolecache.adapters.http_resilience import ResilientClient
from consolecache.config import ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://console.test/api"


def mock_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    retry: RetryPolicy | None = None,
) -> ResilientClient:
    """Resilient client whose network layer is ``handler``; retries off by default."""
    config = ResilienceConfig(
        name="console-test",
        base_url=BASE_URL,
        retry=retry or RetryPolicy(total=0),
    )
    return ResilientClient(config, transport=httpx.MockTransport(handler))


def json_body(request: httpx.Request) -> object:
    return json.loads(request.content)
