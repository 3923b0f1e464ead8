"""Domain port definitions for adapters."""

from __future__ import annotations

from .remote import EntityEndpoint

__all__ = ["EntityEndpoint"]
