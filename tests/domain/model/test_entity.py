from __future__ import annotations

import dataclasses

import pytest

from consolecache.domain.model import (
    ENTITY_CLASSES,
    City,
    EntityType,
    Shift,
    State,
    display_sort_key,
    is_placeholder_id,
)


def test_every_entity_type_has_a_class() -> None:
    assert set(ENTITY_CLASSES) == set(EntityType)
    for entity_type, cls in ENTITY_CLASSES.items():
        assert cls.ENTITY_TYPE is entity_type


def test_display_name_follows_display_field() -> None:
    assert State(id="1", name="Ohio").display_name == "Ohio"
    assert Shift(id="1", title="Night").display_name == "Night"


def test_display_sort_key_is_case_insensitive() -> None:
    assert display_sort_key(State(id="1", name="OHIO")) == display_sort_key(
        State(id="2", name="ohio")
    )


def test_placeholder_ids() -> None:
    assert is_placeholder_id("temp-1700000000-1")
    assert not is_placeholder_id("64f1c0")
    assert State(id="temp-1", name="Ohio").is_placeholder


def test_from_fields_ignores_unknown_keys() -> None:
    city = City.from_fields("7", {"name": "Austin", "state_id": "2", "population": 1})

    assert city == City(id="7", name="Austin", state_id="2")


def test_with_updates_merges_known_fields_only() -> None:
    city = City(id="7", name="Austin", state_id="2")

    updated = city.with_updates({"name": "Dallas", "id": "8", "mayor": "x"})

    assert updated == City(id="7", name="Dallas", state_id="2")
    assert city.name == "Austin"
    assert city.with_updates({}) is city


def test_entities_are_immutable() -> None:
    state = State(id="1", name="Ohio")

    with pytest.raises(dataclasses.FrozenInstanceError):
        state.name = "Iowa"  # type: ignore[misc]
