"""Console backend API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import (
    non_negative_int_env_var,
    optional_env_var,
    optional_positive_int_env_var,
    positive_float_env_var,
    require_env_vars,
)
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

CONSOLE_API_TIMEOUT_SECONDS = 15.0
CONSOLE_API_MAX_RETRIES = 2


@dataclass(frozen=True, slots=True)
class ConsoleApiConfig:
    """Holds the console backend connection settings."""

    base_url: str
    resilience: ResilienceConfig
    token: str | None = None


def get_console_api_config(*, resilience: ResilienceConfig | None = None) -> ConsoleApiConfig:
    """Read the console API settings from the environment.

    ``CONSOLE_API_BASE_URL`` is required. ``CONSOLE_API_TOKEN``,
    ``CONSOLE_API_TIMEOUT_SECONDS``, ``CONSOLE_API_MAX_RETRIES`` and
    ``CONSOLE_API_MAX_CALLS_PER_SECOND`` are optional. An explicit
    ``resilience`` replaces everything but the base URL and token.
    """

    values = require_env_vars(("CONSOLE_API_BASE_URL",))
    base_url = values["CONSOLE_API_BASE_URL"].rstrip("/")
    token = optional_env_var("CONSOLE_API_TOKEN")
    if resilience is None:
        resilience = _resilience_from_env(base_url, token)
    return ConsoleApiConfig(base_url=base_url, token=token, resilience=resilience)


def _resilience_from_env(base_url: str, token: str | None) -> ResilienceConfig:
    timeout = positive_float_env_var("CONSOLE_API_TIMEOUT_SECONDS", CONSOLE_API_TIMEOUT_SECONDS)
    retries = non_negative_int_env_var("CONSOLE_API_MAX_RETRIES", CONSOLE_API_MAX_RETRIES)
    calls_per_second = optional_positive_int_env_var("CONSOLE_API_MAX_CALLS_PER_SECOND")

    headers = {"Accept": "application/json"}
    if token is not None:
        headers["Authorization"] = f"Bearer {token}"

    return ResilienceConfig(
        name="console",
        base_url=base_url,
        timeout_seconds=timeout,
        retry=RetryPolicy(total=retries),
        ratelimit=RateLimit(max_calls=calls_per_second) if calls_per_second else None,
        default_headers=headers,
    )
