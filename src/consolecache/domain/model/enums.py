"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for the reference entities managed by the console."""

    STATE = "state"
    CITY = "city"
    COMPANY = "company"
    DEPARTMENT = "department"
    SKILL = "skill"
    SHIFT = "shift"
    BANK = "bank"
