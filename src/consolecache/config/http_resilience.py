"""Transport settings for the console API client."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ResponseHook = Callable[[httpx.Response], Awaitable[None] | None]

IDEMPOTENT_METHODS: frozenset[str] = frozenset({"DELETE", "GET", "HEAD", "OPTIONS", "PUT"})
NON_IDEMPOTENT_METHODS: frozenset[str] = frozenset({"PATCH", "POST"})
TRANSIENT_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})
TRANSIENT_ERRORS: tuple[type[httpx.HTTPError], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retry transient failures of idempotent requests.

    Creates (POST) and partial updates (PATCH) are sent exactly once: a
    replayed create would duplicate the entity on the server.
    """

    total: int = 2
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    allowed_methods: frozenset[str] = IDEMPOTENT_METHODS
    status_forcelist: frozenset[int] = TRANSIENT_STATUSES
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = TRANSIENT_ERRORS
    backoff_jitter: float = 1.0

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ConfigurationError(f"Retry total must be >= 0, got {self.total}")
        unsafe = {method.upper() for method in self.allowed_methods} & NON_IDEMPOTENT_METHODS
        if unsafe:
            raise ConfigurationError(
                f"Refusing to retry non-idempotent methods: {', '.join(sorted(unsafe))}"
            )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_calls <= 0 or self.per_seconds <= 0:
            raise ConfigurationError(
                f"Rate limit needs positive values, got {self.max_calls}/{self.per_seconds}s"
            )


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """In-memory HTTP response cache; nothing is kept across restarts."""

    enabled: bool = True
    default_ttl_seconds: float | None = None
    refresh_ttl_on_access: bool = True


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    # list responses go stale after every mutation, so caching is opt-in
    cache: CacheConfig | None = None
    response_hooks: tuple[ResponseHook, ...] = field(default_factory=tuple)
    default_headers: Mapping[str, str] | None = None
