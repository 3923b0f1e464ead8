"""
Base building blocks:
string identity, placeholder ids and display-name ordering.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final, Self

if TYPE_CHECKING:
    from collections.abc import Mapping

    from consolecache.domain.model.enums import EntityType

PLACEHOLDER_PREFIX: Final[str] = "temp-"


def is_placeholder_id(entity_id: str) -> bool:
    """Return whether ``entity_id`` was synthesised client-side."""
    return entity_id.startswith(PLACEHOLDER_PREFIX)


@dataclass(frozen=True, slots=True, kw_only=True)
class Entity:
    """A record with a unique string identifier and scalar fields.

    Subclasses name the field used for display and ordering through
    ``DISPLAY_FIELD``.
    """

    id: str

    # class-level discriminator; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]
    DISPLAY_FIELD: ClassVar[str] = "name"

    @property
    def display_name(self) -> str:
        value = getattr(self, self.DISPLAY_FIELD)
        return "" if value is None else str(value)

    @property
    def is_placeholder(self) -> bool:
        return is_placeholder_id(self.id)

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in dataclasses.fields(cls))

    @classmethod
    def from_fields(cls, entity_id: str, values: Mapping[str, object]) -> Self:
        """Build an entity from a field mapping, ignoring unknown keys."""
        known = cls.field_names() - {"id"}
        kwargs = {name: value for name, value in values.items() if name in known}
        return cls(id=entity_id, **kwargs)

    def with_updates(self, updates: Mapping[str, object]) -> Self:
        """Return a copy with ``updates`` shallow-merged; ``id`` and unknown keys are ignored."""
        known = self.field_names() - {"id"}
        changes = {name: value for name, value in updates.items() if name in known}
        if not changes:
            return self
        return dataclasses.replace(self, **changes)


def display_sort_key(entity: Entity) -> str:
    """Case-insensitive ordering key on the entity's display field."""
    return entity.display_name.casefold()
