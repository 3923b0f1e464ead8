"""Public domain model surface."""

from __future__ import annotations

from consolecache.domain.model.entity import (
    PLACEHOLDER_PREFIX,
    Entity,
    display_sort_key,
    is_placeholder_id,
)
from consolecache.domain.model.enums import EntityType
from consolecache.domain.model.reference import (
    ENTITY_CLASSES,
    Bank,
    City,
    Company,
    Department,
    Shift,
    Skill,
    State,
)

__all__ = [
    "ENTITY_CLASSES",
    "PLACEHOLDER_PREFIX",
    "Bank",
    "City",
    "Company",
    "Department",
    "Entity",
    "EntityType",
    "Shift",
    "Skill",
    "State",
    "display_sort_key",
    "is_placeholder_id",
]
