"""Public interface for the console backend adapter."""

from __future__ import annotations

from .client import ConsoleApiError, HttpEntityEndpoint
from .routes import ROUTES, Addressing, EndpointRoute
from .schema import ConsoleRecord
from .translator import parse_entity, to_wire_fields

__all__ = [
    "ROUTES",
    "Addressing",
    "ConsoleApiError",
    "ConsoleRecord",
    "EndpointRoute",
    "HttpEntityEndpoint",
    "parse_entity",
    "to_wire_fields",
]
