"""Application configuration helpers."""

from __future__ import annotations

from .api import ConsoleApiConfig, get_console_api_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "ConsoleApiConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_console_api_config",
    "optional_env_var",
    "require_env_vars",
]
