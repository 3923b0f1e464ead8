"""Reference entities managed from the admin console."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from consolecache.domain.model.entity import Entity
from consolecache.domain.model.enums import EntityType


@dataclass(frozen=True, slots=True, kw_only=True)
class State(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.STATE

    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class City(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CITY

    name: str
    state_id: str | None = None
    state_name: str | None = None
    image: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Company(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.COMPANY

    name: str
    address: str | None = None
    city_id: str | None = None
    city_name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Department(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.DEPARTMENT

    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Skill(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SKILL

    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Shift(Entity):
    """Work shift; ordered by ``title`` rather than ``name``."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SHIFT
    DISPLAY_FIELD: ClassVar[str] = "title"

    title: str
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Bank(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.BANK

    name: str


ENTITY_CLASSES: dict[EntityType, type[Entity]] = {
    cls.ENTITY_TYPE: cls for cls in (State, City, Company, Department, Skill, Shift, Bank)
}
