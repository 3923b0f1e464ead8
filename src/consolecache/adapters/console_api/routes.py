"""REST routes of the console backend, per entity type."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from consolecache.domain.model import EntityType


class Addressing(StrEnum):
    """Where update/delete requests carry the target id."""

    BODY = "body"
    PATH = "path"


@dataclass(frozen=True, slots=True)
class EndpointRoute:
    path: str
    addressing: Addressing = Addressing.BODY

    def item_path(self, entity_id: str) -> str:
        return f"{self.path}/{entity_id}"


ROUTES: dict[EntityType, EndpointRoute] = {
    EntityType.STATE: EndpointRoute("/states"),
    EntityType.CITY: EndpointRoute("/city"),
    EntityType.COMPANY: EndpointRoute("/company"),
    EntityType.DEPARTMENT: EndpointRoute("/dept"),
    EntityType.SKILL: EndpointRoute("/admin/skill"),
    EntityType.SHIFT: EndpointRoute("/shift", Addressing.PATH),
    EntityType.BANK: EndpointRoute("/bank"),
}
