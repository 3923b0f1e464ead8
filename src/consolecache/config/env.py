"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the stripped values of ``names``; raise listing every missing or blank one."""

    values = {name: optional_env_var(name) for name in names}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise MissingConfigurationError(missing)
    return {name: value for name, value in values.items() if value is not None}


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def positive_float_env_var(name: str, default: float) -> float:
    return _parsed_env_var(name, default, float, lambda value: value > 0, "a positive number")


def non_negative_int_env_var(name: str, default: int) -> int:
    return _parsed_env_var(name, default, int, lambda value: value >= 0, "a whole number >= 0")


def optional_positive_int_env_var(name: str) -> int | None:
    if optional_env_var(name) is None:
        return None
    return _parsed_env_var(name, 1, int, lambda value: value > 0, "a whole number > 0")


def _parsed_env_var[T: (int, float)](
    name: str,
    default: T,
    parse: Callable[[str], T],
    accept: Callable[[T], bool],
    expected: str,
) -> T:
    raw = optional_env_var(name)
    if raw is None:
        return default
    try:
        value = parse(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be {expected}, got {raw!r}") from None
    if not accept(value):
        raise ConfigurationError(f"{name} must be {expected}, got {raw!r}")
    return value
