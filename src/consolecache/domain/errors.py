"""Domain error definitions."""

from __future__ import annotations


class ConsoleCacheError(Exception):
    """Base class for errors raised by the cache layer."""


class UnknownQueryError(ConsoleCacheError, LookupError):
    """Raised when a mutation targets a query key with no registered entity type."""


class InvalidPayloadError(ConsoleCacheError, ValueError):
    """Raised by façades when a caller passes an unusable payload."""
