"""
Tests for building objects from configuration groups.

Tests cover:
- Tuples and ObjectDefinition items
- A single reset after all objects are made
- Error wrapping with the source name and the cause
"""

import pytest

from objectregister import (
    InvalidNameError,
    MissingMemberError,
    ObjectCreationError,
    ObjectDefinition,
    UnknownClassError,
    make_objects,
)

from sample_objects import Channel, Storage


CONFIG = [
    ("Storage", "Lake", {"EOL": "123.4", "Sources": "[Lake2, Spillway]", "SpillOutlet": "weir"}),
    ("Storage", "Spillway", {}),
    ("Storage", "Lake2", {"EOL": "7"}),
    ("Channel", "weir", {"Capacity": "40"}),
]


class TestMakeObjects:

    def test_tuples(self, factory, registry):
        objects = make_objects(factory, CONFIG, source_name="lakes.ini")
        lake, spillway, lake2, weir = objects
        assert lake.eol == 123.4
        assert lake.sources == [lake2, spillway]
        assert lake.spill_outlet is weir
        assert lake2.eol == 7.0
        assert weir.capacity == 40.0
        assert registry.instances() == objects

    def test_definitions(self, factory):
        definitions = [
            ObjectDefinition("Channel", "weir", {"Open": "false"}, source="channels.ini"),
            ObjectDefinition("Storage", "Lake"),
        ]
        weir, lake = make_objects(factory, definitions)
        assert weir.open is False
        assert isinstance(lake, Storage)

    def test_reset_skipped(self, factory):
        (weir,) = make_objects(factory, [("Channel", "weir", {"Capacity": "40"})], reset=False)
        assert weir.capacity == 0.0
        factory.registry.reset()
        assert weir.capacity == 40.0

    def test_single_reset(self, factory, registry, monkeypatch):
        calls = []
        original = registry.reset
        monkeypatch.setattr(registry, "reset", lambda: calls.append(1) or original())
        make_objects(factory, CONFIG)
        assert calls == [1]

    def test_empty(self, factory):
        assert make_objects(factory, []) == []


class TestErrors:

    def test_unknown_class_wrapped(self, factory):
        with pytest.raises(ObjectCreationError) as exc_info:
            make_objects(factory, [("Widget", "X", {})], source_name="plant.ini")
        error = exc_info.value
        assert error.instance_name == "X"
        assert error.source == "plant.ini"
        assert isinstance(error.__cause__, UnknownClassError)
        assert str(error).startswith("Failed creating object 'X' defined in plant.ini")

    def test_definition_source_preferred(self, factory):
        definition = ObjectDefinition("Storage", "Lake", {"Depth": "1"}, source="storages.ini")
        with pytest.raises(ObjectCreationError) as exc_info:
            make_objects(factory, [definition], source_name="plant.ini")
        assert exc_info.value.source == "storages.ini"
        assert isinstance(exc_info.value.__cause__, MissingMemberError)

    def test_invalid_instance_name_wrapped(self, factory):
        with pytest.raises(ObjectCreationError) as exc_info:
            make_objects(factory, [("Storage", "", {"EOL": "1"})], source_name="plant.ini")
        assert isinstance(exc_info.value.__cause__, InvalidNameError)

    def test_earlier_objects_remain(self, factory, registry):
        with pytest.raises(ObjectCreationError):
            make_objects(factory, [("Channel", "weir", {}), ("Widget", "X", {})])
        assert registry.find_instance(Channel, "weir").name == "weir"
