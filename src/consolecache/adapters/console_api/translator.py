"""Translate between console wire records and domain entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from consolecache.domain.model import Entity, EntityType

from .schema import (
    BankRecord,
    CityRecord,
    CompanyRecord,
    ConsoleRecord,
    DepartmentRecord,
    ShiftRecord,
    SkillRecord,
    StateRecord,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

ID_FIELD = "_id"

RECORD_TYPES: dict[EntityType, type[ConsoleRecord]] = {
    EntityType.STATE: StateRecord,
    EntityType.CITY: CityRecord,
    EntityType.COMPANY: CompanyRecord,
    EntityType.DEPARTMENT: DepartmentRecord,
    EntityType.SKILL: SkillRecord,
    EntityType.SHIFT: ShiftRecord,
    EntityType.BANK: BankRecord,
}


def record_type_for(entity_type: type[Entity]) -> type[ConsoleRecord]:
    return RECORD_TYPES[entity_type.ENTITY_TYPE]


def parse_entity[TEntity: Entity](entity_type: type[TEntity], payload: object) -> TEntity:
    """Validate one wire record and build the matching domain entity.

    Raises ``pydantic.ValidationError`` when the payload does not fit the record.
    """

    record = record_type_for(entity_type).model_validate(payload)
    return entity_type(**record.model_dump())


def to_wire_fields(
    entity_type: type[Entity],
    fields: Mapping[str, object],
) -> dict[str, object]:
    """Rename domain field names to their wire aliases; ``id`` is never sent here."""

    model_fields = record_type_for(entity_type).model_fields
    body: dict[str, object] = {}
    for name, value in fields.items():
        if name == "id" or name not in model_fields:
            continue
        body[model_fields[name].alias or name] = value
    return body
